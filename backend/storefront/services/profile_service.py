"""Profile Service - self-service profile access and admin user management.

Invariants:
    - Self-registration creates role=client; it never accepts a role
    - Self update touches first_name/last_name/phone only
    - Reading another user's profile requires admin
    - Role changes go through check_role_assignment (superadmin guarded)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.access_policy import (
    ActorLike, check_role_assignment, require_admin, require_self,
    require_self_or_admin,
)
from storefront.core.domain_types import Role
from storefront.core.errors import ResourceConflictError, ResourceNotFoundError
from storefront.models.profile import Profile
from storefront.schemas.auth import TokenClaims
from storefront.schemas.profile import ProfileAdminUpdate, ProfileSelfUpdate

logger = logging.getLogger(__name__)


class ProfileService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, claims: TokenClaims, body: ProfileSelfUpdate) -> Profile:
        """Create the caller's profile from verified token claims."""
        if await self.db.get(Profile, claims.sub) is not None:
            raise ResourceConflictError("Profile already exists")
        profile = Profile(
            id=claims.sub,
            email=claims.email,
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
            role=Role.CLIENT.value,
        )
        self.db.add(profile)
        await self.db.commit()
        logger.info("Profile registered", extra={"user_id": claims.sub})
        return profile

    async def get(self, actor: ActorLike, profile_id: UUID) -> Profile:
        require_self_or_admin(actor, profile_id)
        return await self._get_or_404(profile_id)

    async def update_self(
        self, actor: ActorLike, profile_id: UUID, body: ProfileSelfUpdate,
    ) -> Profile:
        require_self(actor, profile_id)
        profile = await self._get_or_404(profile_id)
        for key, value in body.model_dump(exclude_unset=True).items():
            setattr(profile, key, value)
        await self.db.commit()
        return profile

    async def list_all(self, actor: ActorLike) -> list[Profile]:
        require_admin(actor)
        result = await self.db.execute(
            select(Profile).order_by(Profile.created_at.desc()),
        )
        return list(result.scalars().all())

    async def update_by_admin(
        self, actor: ActorLike, profile_id: UUID, body: ProfileAdminUpdate,
    ) -> Profile:
        require_admin(actor)
        profile = await self._get_or_404(profile_id)
        changes = body.model_dump(exclude_unset=True)
        new_role = changes.pop("role", None)
        check_role_assignment(
            actor, profile.role, Role(new_role).value if new_role else None,
        )
        for key, value in changes.items():
            setattr(profile, key, value)
        if new_role:
            profile.role = Role(new_role).value
        await self.db.commit()
        logger.info(
            "Profile updated by admin",
            extra={"user_id": actor.id, "role": profile.role},
        )
        return profile

    async def delete(self, actor: ActorLike, profile_id: UUID) -> dict:
        require_admin(actor)
        profile = await self._get_or_404(profile_id)
        # deleting a superadmin is treated like revoking the role
        check_role_assignment(actor, profile.role, Role.CLIENT.value)
        await self.db.delete(profile)
        await self.db.commit()
        logger.info(f"Profile {profile_id} deleted", extra={"user_id": actor.id})
        return {"message": "Profile deleted successfully"}

    async def _get_or_404(self, profile_id: UUID) -> Profile:
        profile = await self.db.get(Profile, profile_id)
        if not profile:
            raise ResourceNotFoundError("Profile", str(profile_id))
        return profile

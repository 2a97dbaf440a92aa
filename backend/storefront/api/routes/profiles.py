"""Profile Routes - the caller's own profile plus admin user management.

Invariants:
    - POST /profiles/me only needs a valid token (the profile does not exist yet)
    - /me routes registered before /{profile_id}
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user, get_token_claims
from storefront.infrastructure.database import get_db
from storefront.schemas.auth import CurrentUser, TokenClaims
from storefront.schemas.profile import (
    ProfileAdminUpdate, ProfileResponse, ProfileSelfUpdate,
)
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.post(
    "/me", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED,
)
async def register_my_profile(
    body: ProfileSelfUpdate,
    claims: TokenClaims = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
):
    """Create the caller's profile after sign-up."""
    return await ProfileService(db).register(claims, body)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).get(user, user.id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileSelfUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).update_self(user, user.id, body)


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).list_all(user)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).get(user, profile_id)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: UUID,
    body: ProfileAdminUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).update_by_admin(user, profile_id, body)


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService(db).delete(user, profile_id)

"""Access Policy - pure role and ownership checks shared by every service.

Invariants:
    - Admin means role in ADMIN_ROLES; None or an unknown role is never admin
    - Every check either returns None or raises AccessDeniedError
    - Only a superadmin may grant or revoke the superadmin role

Design Decisions:
    - One module instead of role-string comparisons copied into each service
    - ActorLike Protocol: works with CurrentUser or any object carrying id + role
"""

from typing import Protocol
from uuid import UUID

from storefront.core.domain_types import ADMIN_ROLES, Role
from storefront.core.errors import AccessDeniedError, ErrorContext


class ActorLike(Protocol):
    """Structural contract for the authenticated caller."""
    id: UUID
    role: str


def is_admin(role: str | None) -> bool:
    return role in ADMIN_ROLES


def require_admin(actor: ActorLike | None) -> None:
    """Raise unless the caller holds an admin role."""
    if actor is None or not is_admin(actor.role):
        raise AccessDeniedError(context=_context(actor))


def require_self(actor: ActorLike | None, owner_id: UUID) -> None:
    """Raise unless the caller is the owner of the resource."""
    if actor is None or actor.id != owner_id:
        raise AccessDeniedError(context=_context(actor))


def require_self_or_admin(actor: ActorLike | None, owner_id: UUID | None) -> None:
    """Raise unless the caller owns the resource or is an admin."""
    if actor is None:
        raise AccessDeniedError()
    if owner_id is not None and actor.id == owner_id:
        return
    require_admin(actor)


def check_role_assignment(
    actor: ActorLike | None, current_role: str, new_role: str | None,
) -> None:
    """Validate a role change made through the admin console.

    Admins may move users between client and admin. Touching superadmin,
    either granting it or taking it away, needs a superadmin.
    """
    require_admin(actor)
    if new_role is None or new_role == current_role:
        return
    superadmin = Role.SUPERADMIN.value
    if superadmin in (current_role, new_role) and actor.role != superadmin:
        raise AccessDeniedError(
            "Only a superadmin can change superadmin roles",
            context=_context(actor),
        )


def _context(actor: ActorLike | None) -> ErrorContext:
    return ErrorContext(user_id=str(actor.id) if actor is not None else None)

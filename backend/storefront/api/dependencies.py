"""Auth Guard - FastAPI dependencies that resolve the caller from a bearer token.

Invariants:
    - Only `Authorization: Bearer <token>` is accepted; anything else is "No token provided"
    - Role is read from the profiles table, never trusted from the token
    - get_optional_user returns None only when no Authorization header is sent;
      a present but bad token is still a 401

Design Decisions:
    - Dependencies instead of middleware: public routes stay untouched and
      each route states its requirement in its signature
"""

import logging

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import Settings, get_settings
from storefront.core.errors import AuthenticationError
from storefront.infrastructure.database import get_db
from storefront.infrastructure.token_verifier import verify_access_token
from storefront.models.profile import Profile
from storefront.schemas.auth import CurrentUser, TokenClaims

logger = logging.getLogger(__name__)


def extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()


async def get_token_claims(
    request: Request, settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """Verified token claims; no profile required."""
    token = extract_bearer_token(request)
    if not token:
        raise AuthenticationError("No token provided")
    return verify_access_token(token, settings)


async def _load_user(claims: TokenClaims, db: AsyncSession) -> CurrentUser:
    result = await db.execute(select(Profile).where(Profile.id == claims.sub))
    profile = result.scalar_one_or_none()
    if not profile:
        raise AuthenticationError("User profile not found")
    return CurrentUser(
        id=profile.id,
        email=claims.email or profile.email,
        role=profile.role,
        first_name=profile.first_name,
        last_name=profile.last_name,
        phone=profile.phone,
    )


async def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Authenticated caller with role from the profiles table."""
    return await _load_user(claims, db)


async def get_optional_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser | None:
    """Caller if an Authorization header was sent, else None."""
    if "authorization" not in request.headers:
        return None
    claims = await get_token_claims(request, settings)
    return await _load_user(claims, db)

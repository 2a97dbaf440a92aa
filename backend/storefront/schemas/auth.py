"""Auth Schemas - the authenticated caller as seen by routes and services.

Invariants:
    - CurrentUser.id is the JWT `sub`; role always comes from the profiles table,
      never from the token
"""

from uuid import UUID

from pydantic import BaseModel


class TokenClaims(BaseModel):
    """Verified claims from an identity-provider access token."""
    sub: UUID
    email: str | None = None
    aud: str | list[str] | None = None
    exp: int | None = None


class CurrentUser(BaseModel):
    id: UUID
    email: str | None = None
    role: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None

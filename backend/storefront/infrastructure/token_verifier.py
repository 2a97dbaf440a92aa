"""Token Verifier - validates identity-provider access tokens with PyJWT.

Invariants:
    - Signature, expiry and audience all verified; `sub` must be present
    - PyJWT exceptions never escape: mapped to AuthenticationError
      ("Token expired" vs "Invalid token")

Design Decisions:
    - Shared-secret HS256 (the provider signs with the project JWT secret)
    - Verifier built from Settings per call: tests swap the secret via env
"""

import logging

import jwt
from pydantic import ValidationError

from storefront.config import Settings
from storefront.core.errors import AuthenticationError
from storefront.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)


def verify_access_token(token: str, settings: Settings) -> TokenClaims:
    """Decode and verify a bearer token, returning its claims."""
    if not settings.jwt_secret:
        raise AuthenticationError("JWT secret not configured")
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=settings.jwt_algorithms,
            audience=settings.jwt_audience,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid token")

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError:
        raise AuthenticationError("Invalid token")

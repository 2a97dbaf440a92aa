"""Auth guard - bearer parsing, JWT verification and profile lookup.

Invariants:
    - Missing/non-Bearer header -> 401 "No token provided"
    - Expired token -> 401 "Token expired"; bad signature/audience -> "Invalid token"
    - Valid token without a profile -> 401 "User profile not found"
    - Role comes from the profile row
"""

from uuid import uuid4

from tests.services.auth_tokens import bearer, make_token


def _message(res) -> str:
    return res.json()["error"]["message"]


async def test_missing_header_rejected(client):
    res = await client.get("/api/v1/profiles/me")
    assert res.status_code == 401
    assert _message(res) == "No token provided"


async def test_non_bearer_scheme_rejected(client, customer):
    token = make_token(customer.id)
    res = await client.get(
        "/api/v1/profiles/me", headers={"Authorization": f"Basic {token}"},
    )
    assert res.status_code == 401
    assert _message(res) == "No token provided"


async def test_expired_token_rejected(client, customer):
    res = await client.get(
        "/api/v1/profiles/me", headers=bearer(customer.id, expires_in=-60),
    )
    assert res.status_code == 401
    assert _message(res) == "Token expired"


async def test_wrong_secret_rejected(client, customer):
    res = await client.get(
        "/api/v1/profiles/me", headers=bearer(customer.id, secret="other-secret-value-123456"),
    )
    assert res.status_code == 401
    assert _message(res) == "Invalid token"


async def test_wrong_audience_rejected(client, customer):
    res = await client.get(
        "/api/v1/profiles/me", headers=bearer(customer.id, audience="anon"),
    )
    assert res.status_code == 401
    assert _message(res) == "Invalid token"


async def test_garbage_token_rejected(client):
    res = await client.get(
        "/api/v1/profiles/me", headers={"Authorization": "Bearer not.a.jwt"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


async def test_token_without_profile_rejected(client):
    res = await client.get("/api/v1/profiles/me", headers=bearer(uuid4()))
    assert res.status_code == 401
    assert _message(res) == "User profile not found"


async def test_valid_token_resolves_profile_role(client, admin):
    res = await client.get("/api/v1/profiles/me", headers=bearer(admin.id))
    assert res.status_code == 200
    assert res.json()["role"] == "admin"
    assert res.json()["id"] == str(admin.id)

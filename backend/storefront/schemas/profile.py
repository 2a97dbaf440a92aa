"""Profile Schemas - self-service and admin profile payloads.

Invariants:
    - ProfileSelfUpdate cannot touch role (no such field)
    - ProfileAdminUpdate.role restricted to Role values
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.domain_types import Role


class ProfileSelfUpdate(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=40)


class ProfileAdminUpdate(ProfileSelfUpdate):
    role: Role | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    role: str
    created_at: datetime

"""Catalog Schemas - Pydantic models for categories and products at the API boundary.

Invariants:
    - slug: lowercase letters, digits and hyphens only
    - price/discount_price/stock are non-negative
    - ProductUpdate carries only the fields the client actually sent (exclude_unset)
    - Updates may omit NOT NULL fields but never send them as null

Design Decisions:
    - Create defaults mirror the ORM defaults (active, not draft, in stock)
    - Responses built from ORM rows via from_attributes
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def _reject_nulls(model: BaseModel, fields: tuple[str, ...]) -> None:
    """Fields that were sent must not be null when the column is NOT NULL."""
    nulls = [f for f in fields if f in model.model_fields_set and getattr(model, f) is None]
    if nulls:
        raise ValueError(f"{', '.join(nulls)} cannot be null")


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    slug: str = Field(min_length=1, max_length=140, pattern=SLUG_PATTERN)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    slug: str | None = Field(None, min_length=1, max_length=140, pattern=SLUG_PATTERN)
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_null_columns(self) -> "CategoryUpdate":
        _reject_nulls(self, ("name", "slug", "is_active"))
        return self


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    is_active: bool
    created_at: datetime


class CategorySummary(BaseModel):
    """Embedded in product responses."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str


class ProductCreate(BaseModel):
    """Product creation from the admin console."""
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=220, pattern=SLUG_PATTERN)
    description: str | None = None
    price: float = Field(ge=0)
    discount_price: float | None = Field(None, ge=0)
    is_discount: bool = False
    is_feature: bool = False
    is_active: bool = True
    is_draft: bool = False
    category_id: UUID | None = None
    image_url: str | None = Field(None, max_length=1000)
    stock: int = Field(0, ge=0)
    is_stock: bool = True
    variation1: str | None = Field(None, max_length=200)
    variation2: str | None = Field(None, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


_PRODUCT_NOT_NULL = (
    "name", "slug", "price", "stock", "is_discount", "is_feature",
    "is_active", "is_draft", "is_stock",
)


class ProductUpdate(BaseModel):
    """Partial update - every field optional."""
    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=220, pattern=SLUG_PATTERN)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    discount_price: float | None = Field(None, ge=0)
    is_discount: bool | None = None
    is_feature: bool | None = None
    is_active: bool | None = None
    is_draft: bool | None = None
    category_id: UUID | None = None
    image_url: str | None = Field(None, max_length=1000)
    stock: int | None = Field(None, ge=0)
    is_stock: bool | None = None
    variation1: str | None = Field(None, max_length=200)
    variation2: str | None = Field(None, max_length=200)

    @model_validator(mode="after")
    def reject_null_columns(self) -> "ProductUpdate":
        _reject_nulls(self, _PRODUCT_NOT_NULL)
        return self


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None
    price: float
    discount_price: float | None
    is_discount: bool
    is_feature: bool
    is_active: bool
    is_draft: bool
    category_id: UUID | None
    category: CategorySummary | None
    image_url: str | None
    stock: int
    is_stock: bool
    variation1: str | None
    variation2: str | None
    rating: float
    review_count: int
    created_at: datetime


class ProductPage(BaseModel):
    """Paginated product listing."""
    data: list[ProductResponse]
    count: int
    page: int
    limit: int
    total_pages: int


class ProductImportResponse(BaseModel):
    created: int
    skipped: list[str]
    errors: list[dict]

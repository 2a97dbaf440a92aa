"""Product ORM - catalog entries shown on the storefront and managed in the admin console.

Invariants:
    - slug is unique; public product pages are addressed by slug
    - A product is publicly visible iff is_active and not is_draft
    - rating/review_count are denormalized from reviews (recomputed on review writes)
    - category relationship eager-loaded (selectin): every response embeds {name, slug}

Design Decisions:
    - Float prices: amounts are compared with a cent tolerance, never summed in SQL
    - category_id nullable with SET NULL: deleting a category keeps its products
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from storefront.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(220), nullable=False, unique=True, index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_discount: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_feature: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    is_draft: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_stock: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    variation1: Mapped[str | None] = mapped_column(String(200), nullable=True)
    variation2: Mapped[str | None] = mapped_column(String(200), nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="products", lazy="selectin",
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="product",
        cascade="all, delete-orphan", passive_deletes=True,
    )

"""Order Schemas - checkout payload validation and order responses.

Invariants:
    - Checkout payload accepted in camelCase (storefront client) or snake_case
    - cart has at least one line; each line qty >= 1, prices >= 0
    - OrderCreate never carries user_id or status: both are decided server-side
    - OrderUpdate.status restricted to OrderStatus values

Design Decisions:
    - alias_generator=to_camel + populate_by_name: one model serves both casings
    - CartItem.to_line() hands a frozen core.cart.CartLine to the pure arithmetic
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from storefront.core.cart import CartLine
from storefront.core.domain_types import DEFAULT_PAYMENT_METHOD, OrderStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )


class CartItem(_CamelModel):
    product_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    discount_price: float | None = Field(None, ge=0)
    qty: int = Field(ge=1)
    variation1: str | None = None
    variation2: str | None = None
    image_url: str | None = None

    def to_line(self) -> CartLine:
        return CartLine(
            product_id=self.product_id,
            name=self.name,
            price=self.price,
            discount_price=self.discount_price,
            qty=self.qty,
            variation1=self.variation1,
            variation2=self.variation2,
            image_url=self.image_url,
        )


class OrderCreate(_CamelModel):
    """Checkout submission from the storefront."""
    is_guest: bool
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=40)
    address_line1: str = Field(min_length=1, max_length=300)
    address_line2: str | None = Field(None, max_length=300)
    company: str | None = Field(None, max_length=200)
    postal_code: str = Field(min_length=1, max_length=20)
    city: str = Field(min_length=1, max_length=120)
    cart: list[CartItem] = Field(min_length=1)
    payment_method: str = Field(DEFAULT_PAYMENT_METHOD, max_length=40)
    subtotal: float = Field(ge=0)
    shipping_fee: float = Field(ge=0)
    total: float = Field(ge=0)


class OrderUpdate(_CamelModel):
    """Admin edits on an existing order."""
    status: OrderStatus | None = None
    payment_method: str | None = Field(None, max_length=40)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=40)
    address_line1: str | None = Field(None, min_length=1, max_length=300)
    address_line2: str | None = Field(None, max_length=300)
    company: str | None = Field(None, max_length=200)
    postal_code: str | None = Field(None, min_length=1, max_length=20)
    city: str | None = Field(None, min_length=1, max_length=120)


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None
    is_guest: bool
    first_name: str
    last_name: str
    email: str
    phone: str
    address_line1: str
    address_line2: str | None
    company: str | None
    postal_code: str
    city: str
    cart: list[dict]
    payment_method: str
    status: str
    subtotal: float
    shipping_fee: float
    total: float
    created_at: datetime

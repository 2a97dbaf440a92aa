"""Order Routes - checkout submission, order history and admin order management.

Invariants:
    - POST /orders accepts guests; an Authorization header, if sent, must be valid
    - /orders/me registered before /orders/{order_id}
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user, get_optional_user
from storefront.config import Settings, get_settings
from storefront.core.domain_types import OrderStatus
from storefront.infrastructure.database import get_db
from storefront.schemas.auth import CurrentUser
from storefront.schemas.order import OrderCreate, OrderResponse, OrderUpdate
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post(
    "", response_model=OrderResponse, status_code=status.HTTP_201_CREATED,
)
async def create_order(
    body: OrderCreate,
    user: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Checkout. Totals are recomputed and must match the submitted ones."""
    return await OrderService(db, settings).create(body, user)


@router.get("/me", response_model=list[OrderResponse])
async def list_my_orders(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await OrderService(db, settings).list_for_user(user)


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """All orders (admin)."""
    return await OrderService(db, settings).list_all(user, status_filter)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await OrderService(db, settings).get(user, order_id)


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID,
    body: OrderUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await OrderService(db, settings).update(user, order_id, body)


@router.delete("/{order_id}")
async def delete_order(
    order_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await OrderService(db, settings).delete(user, order_id)

"""Order Service - checkout validation, order history and admin order management.

Invariants:
    - Totals are recomputed from the submitted cart before any insert; a
      mismatch beyond the configured tolerance raises OrderTotalsMismatchError
    - user_id comes from the authenticated caller, never from the payload;
      guest orders store user_id = NULL
    - New orders always start PENDING
    - Non-admins asking for someone else's order get 404, not 403 (no existence leak)

Design Decisions:
    - Stored totals are the server-computed ones (the submitted values only
      need to agree within tolerance)
    - Cart persisted as the validated JSON snapshot (snake_case keys)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import Settings
from storefront.core.access_policy import ActorLike, is_admin, require_admin
from storefront.core.cart import CartTotals, compute_totals, totals_match
from storefront.core.domain_types import OrderStatus
from storefront.core.errors import (
    AuthenticationError, ErrorContext, OrderTotalsMismatchError, ResourceNotFoundError,
)
from storefront.models.order import Order
from storefront.schemas.order import OrderCreate, OrderUpdate

logger = logging.getLogger(__name__)


class OrderService:
    """Checkout and order queries."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    def quote(self, body: OrderCreate) -> CartTotals:
        return compute_totals(
            [item.to_line() for item in body.cart],
            self.settings.free_shipping_threshold,
            self.settings.flat_shipping_fee,
        )

    async def create(self, body: OrderCreate, actor: ActorLike | None) -> Order:
        """Validate totals and persist a new order."""
        if not body.is_guest and actor is None:
            raise AuthenticationError("Sign in or check out as a guest")

        expected = self.quote(body)
        submitted = CartTotals(
            subtotal=body.subtotal, shipping=body.shipping_fee, total=body.total,
        )
        if not totals_match(expected, submitted, self.settings.totals_tolerance):
            logger.warning(
                f"Order totals mismatch: expected {expected}, got {submitted}",
                extra={"user_id": actor.id if actor else None},
            )
            raise OrderTotalsMismatchError(
                expected.as_dict(), submitted.as_dict(),
                ErrorContext(user_id=str(actor.id) if actor else None),
            )

        user_id = None if body.is_guest else actor.id
        order = Order(
            user_id=user_id,
            is_guest=user_id is None,
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
            phone=body.phone,
            address_line1=body.address_line1,
            address_line2=body.address_line2,
            company=body.company,
            postal_code=body.postal_code,
            city=body.city,
            cart=[item.model_dump() for item in body.cart],
            payment_method=body.payment_method,
            status=OrderStatus.PENDING.value,
            subtotal=expected.subtotal,
            shipping_fee=expected.shipping,
            total=expected.total,
        )
        self.db.add(order)
        await self.db.commit()
        logger.info(
            f"Order created: total={order.total}",
            extra={"order_id": order.id, "user_id": user_id},
        )
        return order

    async def list_for_user(self, actor: ActorLike) -> list[Order]:
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == actor.id)
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(
        self, actor: ActorLike, status: OrderStatus | None = None,
    ) -> list[Order]:
        require_admin(actor)
        query = select(Order).order_by(Order.created_at.desc())
        if status is not None:
            query = query.where(Order.status == status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, actor: ActorLike, order_id: UUID) -> Order:
        """Admins see any order; everyone else only their own."""
        query = select(Order).where(Order.id == order_id)
        if not is_admin(actor.role):
            query = query.where(Order.user_id == actor.id)
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if not order:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

    async def update(
        self, actor: ActorLike, order_id: UUID, body: OrderUpdate,
    ) -> Order:
        require_admin(actor)
        order = await self._get_or_404(order_id)
        changes = body.model_dump(exclude_unset=True)
        if "status" in changes and changes["status"] is not None:
            changes["status"] = OrderStatus(changes["status"]).value
        for key, value in changes.items():
            if value is None and key not in ("address_line2", "company"):
                continue
            setattr(order, key, value)
        await self.db.commit()
        logger.info(
            f"Order updated: {sorted(changes)}",
            extra={"order_id": order_id, "user_id": actor.id},
        )
        return order

    async def delete(self, actor: ActorLike, order_id: UUID) -> dict:
        require_admin(actor)
        order = await self._get_or_404(order_id)
        await self.db.delete(order)
        await self.db.commit()
        logger.info("Order deleted", extra={"order_id": order_id, "user_id": actor.id})
        return {"message": "Order deleted successfully"}

    async def _get_or_404(self, order_id: UUID) -> Order:
        order = await self.db.get(Order, order_id)
        if not order:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

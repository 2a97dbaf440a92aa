"""Review Service - product reviews and the denormalized product rating.

Invariants:
    - One review per (product, user); a second attempt raises ResourceConflictError
    - Product.rating (mean, 2 decimals) and review_count recomputed after
      every insert/delete in the same transaction
    - Only the author or an admin may delete a review
"""

import logging
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.access_policy import ActorLike, require_self_or_admin
from storefront.core.errors import ResourceConflictError, ResourceNotFoundError
from storefront.models.product import Product
from storefront.models.review import Review
from storefront.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_product(self, product_id: UUID) -> list[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(
        self, actor: ActorLike, product_id: UUID, body: ReviewCreate,
    ) -> Review:
        product = await self.db.get(Product, product_id)
        if not product:
            raise ResourceNotFoundError("Product", str(product_id))

        existing = await self.db.execute(
            select(Review.id)
            .where(Review.product_id == product_id)
            .where(Review.user_id == actor.id)
        )
        if existing.first() is not None:
            raise ResourceConflictError("You have already reviewed this product")

        review = Review(
            product_id=product_id, user_id=actor.id,
            rating=body.rating, comment=body.comment,
        )
        self.db.add(review)
        try:
            await self.db.flush()
            await self._refresh_rating(product)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ResourceConflictError("You have already reviewed this product")

        logger.info(
            f"Review added: rating={body.rating}",
            extra={"product_id": product_id, "user_id": actor.id},
        )
        return await self._get_or_404(review.id)

    async def delete(self, actor: ActorLike, review_id: UUID) -> dict:
        review = await self._get_or_404(review_id)
        require_self_or_admin(actor, review.user_id)
        product = await self.db.get(Product, review.product_id)
        await self.db.delete(review)
        await self.db.flush()
        if product:
            await self._refresh_rating(product)
        await self.db.commit()
        logger.info(
            "Review deleted",
            extra={"review_id": review_id, "user_id": actor.id},
        )
        return {"message": "Review deleted successfully"}

    async def _refresh_rating(self, product: Product) -> None:
        result = await self.db.execute(
            select(func.avg(Review.rating), func.count(Review.id))
            .where(Review.product_id == product.id)
        )
        average, count = result.one()
        product.rating = round(float(average), 2) if average is not None else 0.0
        product.review_count = count or 0

    async def _get_or_404(self, review_id: UUID) -> Review:
        result = await self.db.execute(
            select(Review)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        review = result.scalar_one_or_none()
        if not review:
            raise ResourceNotFoundError("Review", str(review_id))
        return review

"""Review Routes - product reviews listing, submission and removal."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.infrastructure.database import get_db
from storefront.schemas.auth import CurrentUser
from storefront.schemas.review import ReviewCreate, ReviewResponse
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/api/v1", tags=["reviews"])


@router.get(
    "/products/{product_id}/reviews", response_model=list[ReviewResponse],
)
async def list_reviews(product_id: UUID, db: AsyncSession = Depends(get_db)):
    """Reviews for a product, newest first."""
    return await ReviewService(db).list_for_product(product_id)


@router.post(
    "/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    product_id: UUID,
    body: ReviewCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).create(user, product_id, body)


@router.delete("/reviews/{review_id}")
async def delete_review(
    review_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).delete(user, review_id)

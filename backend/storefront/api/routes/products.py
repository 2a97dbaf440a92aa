"""Product Routes - storefront catalog reads and admin product management.

Invariants:
    - Fixed paths (featured, recent, drafts, import, admin/{id}) registered
      before /{slug} so they are never captured as slugs
    - Every write and every draft/admin read requires an admin caller
      (enforced in ProductService, not here)

Design Decisions:
    - CSV import takes the raw text/csv body: no multipart dependency, and the
      admin console uploads a single file anyway
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_current_user
from storefront.config import Settings, get_settings
from storefront.core.access_policy import require_admin
from storefront.core.domain_types import ProductSort
from storefront.core.errors import InvalidInputError
from storefront.core.product_import import template_csv
from storefront.infrastructure.database import get_db
from storefront.schemas.auth import CurrentUser
from storefront.schemas.catalog import (
    ProductCreate, ProductImportResponse, ProductPage, ProductResponse, ProductUpdate,
)
from storefront.services.catalog_service import ProductService

router = APIRouter(prefix="/api/v1/products", tags=["products"])


def _page_size(limit: int | None, settings: Settings) -> int:
    """Requested page size, defaulted and capped by settings."""
    return min(limit or settings.default_page_size, settings.max_page_size)


@router.get("", response_model=ProductPage)
async def list_products(
    search: str | None = Query(None, max_length=200),
    category: str | None = Query(None, max_length=140),
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    in_stock: bool = False,
    on_sale: bool = False,
    sort_by: ProductSort = ProductSort.NEWEST,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """Public catalog listing with filters and pagination."""
    return await ProductService(db).list_products(
        search=search, category=category,
        min_price=min_price, max_price=max_price,
        in_stock=in_stock, on_sale=on_sale,
        sort_by=sort_by, page=page, limit=_page_size(limit, settings),
    )


@router.get("/featured", response_model=list[ProductResponse])
async def list_featured(
    limit: int = Query(8, ge=1, le=100), db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).list_featured(limit)


@router.get("/recent", response_model=list[ProductResponse])
async def list_recent(
    limit: int = Query(8, ge=1, le=100), db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).list_recent(limit)


@router.get("/drafts", response_model=ProductPage)
async def list_drafts(
    search: str | None = Query(None, max_length=200),
    category: str | None = Query(None, max_length=140),
    sort_by: ProductSort = ProductSort.NEWEST,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Draft products for the admin console."""
    return await ProductService(db).list_drafts(
        user, search=search, category=category,
        sort_by=sort_by, page=page, limit=_page_size(limit, settings),
    )


@router.get("/import/template")
async def download_import_template(
    user: CurrentUser = Depends(get_current_user),
):
    require_admin(user)
    return Response(
        content=template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="products_template.csv"'},
    )


@router.post("/import", response_model=ProductImportResponse)
async def import_products(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Bulk import from the CSV template (raw text/csv body)."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidInputError("CSV must be UTF-8 encoded", "body")
    if not text.strip():
        raise InvalidInputError("CSV body is empty", "body")
    return await ProductService(db).import_csv(user, text)


@router.get("/admin/{product_id}", response_model=ProductResponse)
async def get_product_by_id(
    product_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).get_by_id(user, product_id)


@router.post(
    "", response_model=ProductResponse, status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).create(user, body)


@router.get("/{slug}", response_model=ProductResponse)
async def get_product(slug: str, db: AsyncSession = Depends(get_db)):
    """Public product page lookup."""
    return await ProductService(db).get_by_slug(slug)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).update(user, product_id, body)


@router.delete("/{product_id}")
async def delete_product(
    product_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService(db).delete(user, product_id)

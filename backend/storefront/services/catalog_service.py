"""Catalog Service - categories and products: public listings plus admin CRUD and CSV import.

Invariants:
    - Public reads only see products with is_active and not is_draft
    - Admin-only operations call require_admin before touching the DB
    - Slug uniqueness checked before insert/update; a racing IntegrityError
      on commit is mapped to ResourceConflictError as well
    - Returned products always have `category` loaded (responses embed it)

Design Decisions:
    - Unknown category slug in listing filters leaves the filter unapplied
      (matches the storefront's "all products" fallback)
    - Listing and count share one list of WHERE conditions so the envelope
      count always matches the filtered rows
"""

import logging
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.access_policy import ActorLike, require_admin
from storefront.core.domain_types import ProductSort
from storefront.core.errors import ResourceConflictError, ResourceNotFoundError
from storefront.core.pagination import page_window, paginated
from storefront.core.product_import import ImportRowError, parse_product_csv
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.catalog import (
    CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate,
)

logger = logging.getLogger(__name__)

_SORT_ORDER = {
    ProductSort.NEWEST: Product.created_at.desc(),
    ProductSort.PRICE_ASC: Product.price.asc(),
    ProductSort.PRICE_DESC: Product.price.desc(),
    ProductSort.RATING: Product.rating.desc(),
}


class CategoryService:
    """Category reads for the storefront, writes for admins."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active(self) -> list[Category]:
        result = await self.db.execute(
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.name.asc())
        )
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Category:
        result = await self.db.execute(
            select(Category)
            .where(Category.slug == slug)
            .where(Category.is_active.is_(True))
        )
        category = result.scalar_one_or_none()
        if not category:
            raise ResourceNotFoundError("Category", slug)
        return category

    async def create(self, actor: ActorLike, body: CategoryCreate) -> Category:
        require_admin(actor)
        await self._ensure_slug_free(body.slug)
        category = Category(**body.model_dump())
        self.db.add(category)
        await _commit_or_conflict(self.db, f"Category slug '{body.slug}' already exists")
        logger.info(f"Category created: {category.slug}", extra={"user_id": actor.id})
        return category

    async def update(
        self, actor: ActorLike, category_id: UUID, body: CategoryUpdate,
    ) -> Category:
        require_admin(actor)
        category = await self.db.get(Category, category_id)
        if not category:
            raise ResourceNotFoundError("Category", str(category_id))
        changes = body.model_dump(exclude_unset=True)
        if "slug" in changes and changes["slug"] != category.slug:
            await self._ensure_slug_free(changes["slug"])
        for key, value in changes.items():
            setattr(category, key, value)
        await _commit_or_conflict(self.db, "Category slug already exists")
        return category

    async def _ensure_slug_free(self, slug: str) -> None:
        result = await self.db.execute(
            select(Category.id).where(Category.slug == slug),
        )
        if result.first() is not None:
            raise ResourceConflictError(f"Category slug '{slug}' already exists")


class ProductService:
    """Product listings, lookups and admin management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Public reads -----------------------------------------------

    async def list_products(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        in_stock: bool = False,
        on_sale: bool = False,
        sort_by: ProductSort = ProductSort.NEWEST,
        page: int = 1,
        limit: int = 12,
    ) -> dict:
        """Public storefront listing with filters, sorting and pagination."""
        conditions = [Product.is_active.is_(True), Product.is_draft.is_(False)]
        conditions += await self._search_conditions(search, category)
        if min_price is not None:
            conditions.append(Product.price >= min_price)
        if max_price is not None:
            conditions.append(Product.price <= max_price)
        if in_stock:
            conditions.append(Product.is_stock.is_(True))
            conditions.append(Product.stock > 0)
        if on_sale:
            conditions.append(Product.is_discount.is_(True))
        return await self._page(conditions, sort_by, page, limit)

    async def list_featured(self, limit: int = 8) -> list[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.is_feature.is_(True))
            .where(Product.is_active.is_(True))
            .where(Product.is_draft.is_(False))
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_recent(self, limit: int = 8) -> list[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.is_active.is_(True))
            .where(Product.is_draft.is_(False))
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Product:
        result = await self.db.execute(
            select(Product)
            .where(Product.slug == slug)
            .where(Product.is_active.is_(True))
            .where(Product.is_draft.is_(False))
        )
        product = result.scalar_one_or_none()
        if not product:
            raise ResourceNotFoundError("Product", slug)
        return product

    # --- Admin ------------------------------------------------------

    async def list_drafts(
        self,
        actor: ActorLike,
        *,
        search: str | None = None,
        category: str | None = None,
        sort_by: ProductSort = ProductSort.NEWEST,
        page: int = 1,
        limit: int = 12,
    ) -> dict:
        require_admin(actor)
        conditions = [Product.is_draft.is_(True)]
        conditions += await self._search_conditions(search, category)
        return await self._page(conditions, sort_by, page, limit)

    async def get_by_id(self, actor: ActorLike, product_id: UUID) -> Product:
        require_admin(actor)
        return await self._get_or_404(product_id)

    async def create(self, actor: ActorLike, body: ProductCreate) -> Product:
        require_admin(actor)
        await self._ensure_slug_free(body.slug)
        if body.category_id is not None:
            await self._ensure_category_exists(body.category_id)
        product = Product(**body.model_dump())
        self.db.add(product)
        await _commit_or_conflict(self.db, f"Product slug '{body.slug}' already exists")
        logger.info(
            f"Product created: {product.slug}",
            extra={"user_id": actor.id, "product_id": product.id},
        )
        return await self._get_or_404(product.id)

    async def update(
        self, actor: ActorLike, product_id: UUID, body: ProductUpdate,
    ) -> Product:
        require_admin(actor)
        product = await self._get_or_404(product_id)
        changes = body.model_dump(exclude_unset=True)
        if "slug" in changes and changes["slug"] != product.slug:
            await self._ensure_slug_free(changes["slug"])
        if changes.get("category_id") is not None:
            await self._ensure_category_exists(changes["category_id"])
        for key, value in changes.items():
            setattr(product, key, value)
        await _commit_or_conflict(self.db, "Product slug already exists")
        return await self._get_or_404(product_id)

    async def delete(self, actor: ActorLike, product_id: UUID) -> dict:
        require_admin(actor)
        product = await self._get_or_404(product_id)
        await self.db.delete(product)
        await self.db.commit()
        logger.info(
            "Product deleted",
            extra={"user_id": actor.id, "product_id": product_id},
        )
        return {"message": "Product deleted successfully"}

    async def import_csv(self, actor: ActorLike, text: str) -> dict:
        """Bulk-create products from the admin CSV template.

        Valid rows are inserted in one transaction. Rows whose slug already
        exists (in the DB or earlier in the same file) are skipped, and
        rows naming an unknown category are reported as errors on their CSV line.
        """
        require_admin(actor)
        parsed = parse_product_csv(text)
        errors = [e.as_dict() for e in parsed.errors]

        slugs = [row["slug"] for row in parsed.rows]
        existing = set()
        if slugs:
            result = await self.db.execute(
                select(Product.slug).where(Product.slug.in_(slugs)),
            )
            existing = set(result.scalars().all())

        category_ids = await self._category_ids_by_slug(
            {row["category_slug"] for row in parsed.rows if row["category_slug"]},
        )

        created = 0
        skipped: list[str] = []
        for line, row in zip(parsed.line_numbers, parsed.rows):
            slug = row["slug"]
            if slug in existing:
                skipped.append(slug)
                continue
            category_slug = row.pop("category_slug")
            category_id = None
            if category_slug:
                category_id = category_ids.get(category_slug)
                if category_id is None:
                    errors.append(ImportRowError(
                        line, f"Unknown category '{category_slug}'",
                    ).as_dict())
                    continue
            self.db.add(Product(**row, category_id=category_id))
            existing.add(slug)
            created += 1

        errors.sort(key=lambda e: e["line"])
        if created:
            await _commit_or_conflict(self.db, "Import collided with an existing slug")
        logger.info(
            f"Product import: {created} created, {len(skipped)} skipped, "
            f"{len(errors)} errors",
            extra={"user_id": actor.id},
        )
        return {"created": created, "skipped": skipped, "errors": errors}

    # --- Helpers ----------------------------------------------------

    async def _search_conditions(
        self, search: str | None, category: str | None,
    ) -> list:
        conditions = []
        if search:
            conditions.append(or_(
                Product.name.icontains(search, autoescape=True),
                Product.description.icontains(search, autoescape=True),
            ))
        if category:
            result = await self.db.execute(
                select(Category.id).where(Category.slug == category),
            )
            category_id = result.scalar_one_or_none()
            if category_id is not None:
                conditions.append(Product.category_id == category_id)
        return conditions

    async def _page(
        self, conditions: list, sort_by: ProductSort, page: int, limit: int,
    ) -> dict:
        offset, limit = page_window(page, limit)
        rows = await self.db.execute(
            select(Product)
            .where(*conditions)
            .order_by(_SORT_ORDER[ProductSort(sort_by)], Product.id)
            .offset(offset)
            .limit(limit)
        )
        count = await self.db.scalar(
            select(func.count()).select_from(Product).where(*conditions),
        )
        return paginated(list(rows.scalars().all()), count or 0, max(page, 1), limit)

    async def _get_or_404(self, product_id: UUID) -> Product:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        product = result.scalar_one_or_none()
        if not product:
            raise ResourceNotFoundError("Product", str(product_id))
        return product

    async def _ensure_slug_free(self, slug: str) -> None:
        result = await self.db.execute(
            select(Product.id).where(Product.slug == slug),
        )
        if result.first() is not None:
            raise ResourceConflictError(f"Product slug '{slug}' already exists")

    async def _ensure_category_exists(self, category_id: UUID) -> None:
        if await self.db.get(Category, category_id) is None:
            raise ResourceNotFoundError("Category", str(category_id))

    async def _category_ids_by_slug(self, slugs: set[str]) -> dict[str, UUID]:
        if not slugs:
            return {}
        result = await self.db.execute(
            select(Category.slug, Category.id).where(Category.slug.in_(slugs)),
        )
        return {slug: cid for slug, cid in result.all()}


async def _commit_or_conflict(db: AsyncSession, message: str) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity error on commit: {e}")
        raise ResourceConflictError(message)

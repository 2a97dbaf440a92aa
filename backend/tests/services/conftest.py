"""Route test fixtures - async DB, FastAPI test client, profiles and signed tokens.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Tokens are signed with the same secret the app reads from settings

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Factories (make_profile, make_product, ...) instead of one big seed:
      each test states the rows it relies on
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import storefront.infrastructure.database as db_module
from storefront.db.base import Base
from storefront.infrastructure.database import get_db, DatabaseSessionManager
from storefront.main import app
from storefront.models import Category, Order, Product, Profile


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# --- Row factories ----------------------------------------------------

@pytest.fixture
def make_profile(test_db):
    async def _make(role: str = "client", **fields) -> Profile:
        profile = Profile(
            id=fields.pop("id", uuid4()),
            email=fields.pop("email", f"{role}-{uuid4().hex[:6]}@example.com"),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", role.title()),
            role=role,
            **fields,
        )
        test_db.add(profile)
        await test_db.commit()
        return profile
    return _make


@pytest.fixture
async def customer(make_profile) -> Profile:
    return await make_profile("client")


@pytest.fixture
async def admin(make_profile) -> Profile:
    return await make_profile("admin")


@pytest.fixture
async def superadmin(make_profile) -> Profile:
    return await make_profile("superadmin")


@pytest.fixture
def make_category(test_db):
    async def _make(slug: str = "skincare", **fields) -> Category:
        category = Category(
            name=fields.pop("name", slug.title()), slug=slug, **fields,
        )
        test_db.add(category)
        await test_db.commit()
        return category
    return _make


_clock = {"t": datetime(2026, 1, 1, tzinfo=timezone.utc)}


@pytest.fixture
def make_product(test_db):
    """Products get strictly increasing created_at so 'newest' order is deterministic."""
    async def _make(slug: str, price: float = 50.0, **fields) -> Product:
        _clock["t"] += timedelta(minutes=1)
        product = Product(
            name=fields.pop("name", slug.replace("-", " ").title()),
            slug=slug,
            price=price,
            created_at=fields.pop("created_at", _clock["t"]),
            **fields,
        )
        test_db.add(product)
        await test_db.commit()
        return product
    return _make


@pytest.fixture
def make_order(test_db):
    async def _make(user_id: UUID | None = None, **fields) -> Order:
        _clock["t"] += timedelta(minutes=1)
        order = Order(
            user_id=user_id,
            is_guest=user_id is None,
            first_name="Test", last_name="Buyer",
            email="buyer@example.com", phone="123",
            address_line1="1 Main St", postal_code="1000", city="Tunis",
            cart=[{"product_id": "p1", "name": "Serum", "price": 80, "qty": 1}],
            subtotal=80, shipping_fee=8, total=88,
            created_at=fields.pop("created_at", _clock["t"]),
            **fields,
        )
        test_db.add(order)
        await test_db.commit()
        return order
    return _make

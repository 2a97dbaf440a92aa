"""Category routes - public listing and admin writes."""

from tests.services.auth_tokens import bearer


async def test_lists_only_active_categories_alphabetically(client, make_category):
    await make_category("makeup", name="Makeup")
    await make_category("fragrance", name="Fragrance")
    await make_category("archived", name="Archived", is_active=False)

    res = await client.get("/api/v1/categories")

    assert res.status_code == 200
    assert [c["slug"] for c in res.json()] == ["fragrance", "makeup"]


async def test_get_by_slug(client, make_category):
    await make_category("skincare")
    res = await client.get("/api/v1/categories/skincare")
    assert res.status_code == 200
    assert res.json()["name"] == "Skincare"


async def test_inactive_category_is_not_found(client, make_category):
    await make_category("hidden", is_active=False)
    res = await client.get("/api/v1/categories/hidden")
    assert res.status_code == 404


async def test_admin_creates_category(client, admin):
    res = await client.post(
        "/api/v1/categories",
        json={"name": "Hair", "slug": "hair"},
        headers=bearer(admin.id),
    )
    assert res.status_code == 201
    assert res.json()["slug"] == "hair"
    assert res.json()["is_active"] is True


async def test_client_cannot_create_category(client, customer):
    res = await client.post(
        "/api/v1/categories",
        json={"name": "Hair", "slug": "hair"},
        headers=bearer(customer.id),
    )
    assert res.status_code == 403


async def test_duplicate_category_slug_conflicts(client, admin, make_category):
    await make_category("hair")
    res = await client.post(
        "/api/v1/categories",
        json={"name": "Hair again", "slug": "hair"},
        headers=bearer(admin.id),
    )
    assert res.status_code == 409


async def test_admin_renames_category(client, admin, make_category):
    category = await make_category("body")
    res = await client.put(
        f"/api/v1/categories/{category.id}",
        json={"name": "Body Care"},
        headers=bearer(admin.id),
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Body Care"
    assert res.json()["slug"] == "body"


async def test_null_name_rejected_and_row_untouched(client, admin, make_category):
    category = await make_category("body")
    res = await client.put(
        f"/api/v1/categories/{category.id}",
        json={"name": None},
        headers=bearer(admin.id),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"

    listed = await client.get("/api/v1/categories/body")
    assert listed.json()["name"] == "Body"

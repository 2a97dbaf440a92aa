"""Product CSV import routes - template download and bulk upload."""

from sqlalchemy import select

from storefront.models.product import Product
from tests.services.auth_tokens import bearer

HEADER = "name,slug,price,category_slug,stock,is_feature\n"


async def _upload(client, profile, text: str):
    return await client.post(
        "/api/v1/products/import",
        content=text.encode("utf-8"),
        headers={**bearer(profile.id), "Content-Type": "text/csv"},
    )


async def test_template_download(client, admin):
    res = await client.get(
        "/api/v1/products/import/template", headers=bearer(admin.id),
    )
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "products_template.csv" in res.headers["content-disposition"]
    assert res.text.splitlines()[0].startswith("name,slug,description,price")


async def test_template_requires_admin(client, customer):
    res = await client.get(
        "/api/v1/products/import/template", headers=bearer(customer.id),
    )
    assert res.status_code == 403


async def test_import_creates_products(client, test_db, admin, make_category):
    category = await make_category("skincare")
    text = HEADER + (
        "Rose Toner,rose-toner,25.5,skincare,10,true\n"
        "Clay Mask,clay-mask,18,,0,no\n"
    )

    res = await _upload(client, admin, text)

    assert res.status_code == 200
    assert res.json() == {"created": 2, "skipped": [], "errors": []}
    result = await test_db.execute(
        select(Product).where(Product.slug == "rose-toner"),
    )
    toner = result.scalar_one()
    assert toner.category_id == category.id
    assert toner.stock == 10
    assert toner.is_feature is True


async def test_import_skips_existing_slugs(client, admin, make_product):
    await make_product("rose-toner")
    text = HEADER + (
        "Rose Toner,rose-toner,25,,1,false\n"
        "Clay Mask,clay-mask,18,,1,false\n"
        "Clay Mask Again,clay-mask,18,,1,false\n"
    )
    res = await _upload(client, admin, text)
    body = res.json()
    assert body["created"] == 1
    assert body["skipped"] == ["rose-toner", "clay-mask"]


async def test_import_reports_row_errors(client, admin):
    text = HEADER + (
        "Good,good,10,,1,false\n"
        "Bad Price,bad-price,free,,1,false\n"
        "Mystery,mystery,10,no-such-category,1,false\n"
    )
    res = await _upload(client, admin, text)
    body = res.json()
    assert body["created"] == 1
    assert body["errors"][0]["line"] == 3
    assert "price" in body["errors"][0]["message"]
    assert body["errors"][1] == {
        "line": 4, "message": "Unknown category 'no-such-category'",
    }


async def test_import_errors_share_one_shape_in_line_order(client, admin):
    text = "name,slug,price,category_slug\nA,a,10,nope\nB,b,abc,\n"
    res = await _upload(client, admin, text)
    errors = res.json()["errors"]
    assert [e["line"] for e in errors] == [2, 3]
    assert all(set(e) == {"line", "message"} for e in errors)
    assert errors[0]["message"] == "Unknown category 'nope'"


async def test_import_missing_columns(client, admin):
    res = await _upload(client, admin, "name,price\nX,1\n")
    body = res.json()
    assert body["created"] == 0
    assert body["errors"][0]["line"] == 1


async def test_import_empty_body_rejected(client, admin):
    res = await _upload(client, admin, "   ")
    assert res.status_code == 400


async def test_import_requires_admin(client, customer):
    res = await _upload(client, customer, HEADER + "X,x,1,,1,false\n")
    assert res.status_code == 403

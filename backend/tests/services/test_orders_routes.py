"""Order routes - checkout, order history and admin order management.

Invariants:
    - Submitted totals must match the recomputed cart totals (tolerance 0.01)
    - user_id is taken from the token; guests get user_id = null
    - New orders are always PENDING
    - A client asking for someone else's order gets 404
"""

from uuid import uuid4

from tests.services.auth_tokens import bearer


def _checkout(**overrides) -> dict:
    payload = {
        "isGuest": True,
        "firstName": "Amira",
        "lastName": "Ben Salah",
        "email": "amira@example.com",
        "phone": "+216 20 000 000",
        "addressLine1": "12 Rue de Marseille",
        "postalCode": "1000",
        "city": "Tunis",
        "cart": [
            {"productId": "p-serum", "name": "Serum", "price": 40, "qty": 2},
        ],
        "subtotal": 80,
        "shippingFee": 8,
        "total": 88,
    }
    payload.update(overrides)
    return payload


async def test_guest_checkout_creates_pending_order(client):
    res = await client.post("/api/v1/orders", json=_checkout())

    assert res.status_code == 201
    body = res.json()
    assert body["user_id"] is None
    assert body["is_guest"] is True
    assert body["status"] == "PENDING"
    assert body["payment_method"] == "cash_on_delivery"
    assert body["total"] == 88
    assert body["cart"][0]["product_id"] == "p-serum"


async def test_signed_in_checkout_records_caller(client, customer):
    res = await client.post(
        "/api/v1/orders",
        json=_checkout(isGuest=False),
        headers=bearer(customer.id),
    )
    assert res.status_code == 201
    assert res.json()["user_id"] == str(customer.id)
    assert res.json()["is_guest"] is False


async def test_snake_case_payload_accepted(client):
    payload = {
        "is_guest": True, "first_name": "A", "last_name": "B",
        "email": "a@example.com", "phone": "1", "address_line1": "x",
        "postal_code": "1", "city": "c",
        "cart": [{"product_id": "p", "name": "n", "price": 120, "qty": 1}],
        "subtotal": 120, "shipping_fee": 0, "total": 120,
    }
    res = await client.post("/api/v1/orders", json=payload)
    assert res.status_code == 201
    assert res.json()["shipping_fee"] == 0


async def test_discount_price_used_for_totals(client):
    cart = [{
        "productId": "p", "name": "Cream", "price": 60,
        "discountPrice": 45, "qty": 2,
    }]
    res = await client.post(
        "/api/v1/orders",
        json=_checkout(cart=cart, subtotal=90, shippingFee=8, total=98),
    )
    assert res.status_code == 201


async def test_totals_mismatch_rejected(client):
    res = await client.post("/api/v1/orders", json=_checkout(total=50))

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "ORDER_TOTALS_MISMATCH"
    assert error["expected"] == {"subtotal": 80, "shipping_fee": 8, "total": 88}


async def test_status_and_user_id_in_payload_ignored(client, customer):
    res = await client.post(
        "/api/v1/orders",
        json=_checkout(status="PAID", userId=str(customer.id)),
    )
    assert res.status_code == 201
    assert res.json()["status"] == "PENDING"
    assert res.json()["user_id"] is None


async def test_member_checkout_without_token_is_401(client):
    res = await client.post("/api/v1/orders", json=_checkout(isGuest=False))
    assert res.status_code == 401


async def test_checkout_with_bad_token_is_401(client):
    res = await client.post(
        "/api/v1/orders", json=_checkout(),
        headers={"Authorization": "Bearer garbage"},
    )
    assert res.status_code == 401


async def test_empty_cart_rejected(client):
    res = await client.post(
        "/api/v1/orders",
        json=_checkout(cart=[], subtotal=0, shippingFee=8, total=8),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_invalid_email_rejected(client):
    res = await client.post("/api/v1/orders", json=_checkout(email="not-an-email"))
    assert res.status_code == 400


async def test_my_orders_only_lists_own(client, customer, make_profile, make_order):
    other = await make_profile("client")
    mine = await make_order(customer.id)
    await make_order(other.id)
    await make_order()

    res = await client.get("/api/v1/orders/me", headers=bearer(customer.id))

    assert res.status_code == 200
    assert [o["id"] for o in res.json()] == [str(mine.id)]


async def test_admin_lists_all_orders_newest_first(client, admin, make_order):
    first = await make_order()
    second = await make_order()
    res = await client.get("/api/v1/orders", headers=bearer(admin.id))
    assert [o["id"] for o in res.json()] == [str(second.id), str(first.id)]


async def test_admin_filters_by_status(client, admin, make_order):
    await make_order()
    paid = await make_order(status="PAID")
    res = await client.get(
        "/api/v1/orders", params={"status": "PAID"}, headers=bearer(admin.id),
    )
    assert [o["id"] for o in res.json()] == [str(paid.id)]


async def test_client_cannot_list_all_orders(client, customer):
    res = await client.get("/api/v1/orders", headers=bearer(customer.id))
    assert res.status_code == 403


async def test_owner_reads_own_order(client, customer, make_order):
    order = await make_order(customer.id)
    res = await client.get(f"/api/v1/orders/{order.id}", headers=bearer(customer.id))
    assert res.status_code == 200
    assert res.json()["total"] == 88


async def test_someone_elses_order_is_not_found(client, customer, make_profile, make_order):
    other = await make_profile("client")
    order = await make_order(other.id)
    res = await client.get(f"/api/v1/orders/{order.id}", headers=bearer(customer.id))
    assert res.status_code == 404


async def test_admin_reads_any_order(client, admin, make_order):
    order = await make_order()
    res = await client.get(f"/api/v1/orders/{order.id}", headers=bearer(admin.id))
    assert res.status_code == 200


async def test_admin_updates_status(client, admin, make_order):
    order = await make_order()
    res = await client.patch(
        f"/api/v1/orders/{order.id}",
        json={"status": "FULFILLED"},
        headers=bearer(admin.id),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "FULFILLED"
    assert res.json()["city"] == "Tunis"


async def test_unknown_status_rejected(client, admin, make_order):
    order = await make_order()
    res = await client.patch(
        f"/api/v1/orders/{order.id}",
        json={"status": "SHIPPED_BY_OWL"},
        headers=bearer(admin.id),
    )
    assert res.status_code == 400


async def test_client_cannot_update_order(client, customer, make_order):
    order = await make_order(customer.id)
    res = await client.patch(
        f"/api/v1/orders/{order.id}",
        json={"status": "PAID"},
        headers=bearer(customer.id),
    )
    assert res.status_code == 403


async def test_admin_deletes_order(client, admin, make_order):
    order = await make_order()
    res = await client.delete(f"/api/v1/orders/{order.id}", headers=bearer(admin.id))
    assert res.status_code == 200
    assert res.json() == {"message": "Order deleted successfully"}

    again = await client.get(f"/api/v1/orders/{order.id}", headers=bearer(admin.id))
    assert again.status_code == 404


async def test_delete_missing_order_is_404(client, admin):
    res = await client.delete(f"/api/v1/orders/{uuid4()}", headers=bearer(admin.id))
    assert res.status_code == 404

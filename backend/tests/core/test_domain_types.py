"""Domain Types - verifies enum values match the stored column strings.

Tests:
    - NewType wrappers are transparent over UUID
    - Role / OrderStatus / ProductSort members and raw values
    - ADMIN_ROLES holds exactly the privileged roles
"""

from uuid import uuid4

from storefront.core.domain_types import (
    ADMIN_ROLES, DEFAULT_PAYMENT_METHOD,
    OrderId, OrderStatus, ProductId, ProductSort, Role, UserId,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert ProductId(uid) == uid
    assert OrderId(uid) == uid
    assert UserId(uid) == uid


def test_roles_match_profile_column_values():
    assert [r.value for r in Role] == ["client", "admin", "superadmin"]


def test_admin_roles_exclude_client():
    assert ADMIN_ROLES == {"admin", "superadmin"}
    assert Role.CLIENT.value not in ADMIN_ROLES


def test_order_status_has_five_states():
    assert {s.value for s in OrderStatus} == {
        "PENDING", "PAID", "FULFILLED", "CANCELED", "REFUNDED",
    }


def test_str_enums_compare_equal_to_raw_strings():
    assert OrderStatus.PENDING == "PENDING"
    assert Role("admin") is Role.ADMIN
    assert ProductSort("price_asc") is ProductSort.PRICE_ASC


def test_default_payment_method():
    assert DEFAULT_PAYMENT_METHOD == "cash_on_delivery"

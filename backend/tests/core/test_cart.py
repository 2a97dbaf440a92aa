"""Tests for cart arithmetic - totals, shipping threshold and line operations."""

import pytest

from storefront.core.cart import (
    CartLine, CartTotals, add_line, compute_totals, effective_price,
    item_count, remove_line, totals_match, update_line,
)

THRESHOLD = 100.0
FEE = 8.0


def _line(pid="1", price=50.0, qty=1, **kw) -> CartLine:
    return CartLine(product_id=pid, name=f"Product {pid}", price=price, qty=qty, **kw)


def test_subtotal_for_regular_prices():
    totals = compute_totals(
        [_line("1", 50, 2), _line("2", 30, 1)], THRESHOLD, FEE,
    )
    assert totals.subtotal == 130


def test_discount_price_used_when_set():
    totals = compute_totals(
        [_line("1", 100, 1, discount_price=80), _line("2", 50, 1)], THRESHOLD, FEE,
    )
    assert totals.subtotal == 130


def test_zero_discount_price_falls_back_to_price():
    assert effective_price(_line(price=40, discount_price=0)) == 40


def test_free_shipping_over_threshold():
    totals = compute_totals([_line(price=120)], THRESHOLD, FEE)
    assert totals == CartTotals(subtotal=120, shipping=0, total=120)


def test_free_shipping_exactly_at_threshold():
    totals = compute_totals([_line(price=100)], THRESHOLD, FEE)
    assert totals.shipping == 0
    assert totals.total == 100


def test_threshold_compared_after_rounding_to_cents():
    totals = compute_totals([_line(price=99.996)], THRESHOLD, FEE)
    assert totals == CartTotals(subtotal=100.0, shipping=0, total=100.0)


def test_flat_fee_under_threshold():
    totals = compute_totals([_line(price=80)], THRESHOLD, FEE)
    assert totals == CartTotals(subtotal=80, shipping=8, total=88)


def test_empty_cart_still_charges_shipping():
    totals = compute_totals([], THRESHOLD, FEE)
    assert totals == CartTotals(subtotal=0, shipping=8, total=8)


def test_totals_rounded_to_cents():
    totals = compute_totals([_line(price=0.1, qty=3)], THRESHOLD, FEE)
    assert totals.subtotal == 0.3
    assert totals.total == 8.3


def test_totals_match_within_tolerance():
    expected = CartTotals(80, 8, 88)
    assert totals_match(expected, CartTotals(80.005, 8, 88.005), 0.01)


def test_totals_mismatch_beyond_tolerance():
    expected = CartTotals(80, 8, 88)
    assert not totals_match(expected, CartTotals(80, 0, 80), 0.01)
    assert not totals_match(expected, CartTotals(79.5, 8, 88), 0.01)


def test_add_line_merges_same_variant():
    cart = add_line([_line("1", qty=1, variation1="50ml")], _line("1", qty=2, variation1="50ml"))
    assert len(cart) == 1
    assert cart[0].qty == 3


def test_add_line_keeps_distinct_variants_separate():
    cart = add_line([_line("1", variation1="50ml")], _line("1", variation1="100ml"))
    assert len(cart) == 2


def test_add_line_does_not_mutate_input():
    original = [_line("1")]
    add_line(original, _line("1"))
    assert original[0].qty == 1


def test_update_line_changes_first_match_only():
    cart = update_line([_line("1"), _line("2")], "2", qty=5)
    assert [l.qty for l in cart] == [1, 5]


def test_update_line_missing_product_is_noop():
    cart = [_line("1")]
    assert update_line(cart, "404", qty=9) == cart


def test_remove_line_matches_all_keys():
    cart = [_line("1", variation1="a"), _line("1", variation1="b")]
    remaining = remove_line(cart, "1", "a")
    assert [l.variation1 for l in remaining] == ["b"]


def test_item_count_sums_quantities():
    assert item_count([_line("1", qty=2), _line("2", qty=3)]) == 5


@pytest.mark.parametrize("subtotal_price,expected_shipping", [
    (99.99, 8.0), (100.0, 0.0), (100.01, 0.0),
])
def test_shipping_boundary(subtotal_price, expected_shipping):
    totals = compute_totals([_line(price=subtotal_price)], THRESHOLD, FEE)
    assert totals.shipping == expected_shipping

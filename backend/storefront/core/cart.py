"""Cart Arithmetic - pure cart operations and checkout totals.

Invariants:
    - Line price is discount_price when set and non-zero, otherwise price
    - shipping = flat fee when subtotal < threshold, else 0 (empty cart still pays the fee)
    - total = subtotal + shipping; all three rounded to cents
    - The free-shipping comparison uses the subtotal already rounded to cents
      (99.996 rounds to 100.00 and ships free)
    - Lines are merged on (product_id, variation1, variation2)
    - Every function returns a new list; inputs are never mutated

Design Decisions:
    - Threshold and fee passed in by callers (read from Settings), no config import here
    - Tolerance comparison instead of exact equality: clients compute in binary floats
"""

from dataclasses import dataclass, replace
from typing import Iterable


@dataclass(frozen=True)
class CartLine:
    """A single cart entry as submitted by the storefront client."""
    product_id: str
    name: str
    price: float
    qty: int = 1
    discount_price: float | None = None
    variation1: str | None = None
    variation2: str | None = None
    image_url: str | None = None

    @property
    def key(self) -> tuple[str, str | None, str | None]:
        return (self.product_id, self.variation1, self.variation2)


@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    shipping: float
    total: float

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "shipping_fee": self.shipping,
            "total": self.total,
        }


def effective_price(line: CartLine) -> float:
    return line.discount_price or line.price


def compute_totals(
    lines: Iterable[CartLine], free_shipping_threshold: float, flat_shipping_fee: float,
) -> CartTotals:
    """Recompute subtotal, shipping and total for a cart."""
    subtotal = round(sum(effective_price(line) * line.qty for line in lines), 2)
    shipping = flat_shipping_fee if subtotal < free_shipping_threshold else 0.0
    return CartTotals(
        subtotal=subtotal,
        shipping=round(shipping, 2),
        total=round(subtotal + shipping, 2),
    )


def totals_match(
    expected: CartTotals, submitted: CartTotals, tolerance: float,
) -> bool:
    """True when each submitted value is within tolerance of the expected one."""
    return (
        abs(expected.subtotal - submitted.subtotal) <= tolerance
        and abs(expected.shipping - submitted.shipping) <= tolerance
        and abs(expected.total - submitted.total) <= tolerance
    )


def add_line(lines: list[CartLine], line: CartLine) -> list[CartLine]:
    """Add a line, merging quantities with an existing line for the same variant."""
    result = list(lines)
    for i, existing in enumerate(result):
        if existing.key == line.key:
            result[i] = replace(existing, qty=existing.qty + (line.qty or 1))
            return result
    result.append(replace(line, qty=line.qty or 1))
    return result


def update_line(
    lines: list[CartLine], product_id: str, **changes,
) -> list[CartLine]:
    """Apply changes to the first line for product_id. No-op if absent."""
    result = list(lines)
    for i, existing in enumerate(result):
        if existing.product_id == product_id:
            result[i] = replace(existing, **changes)
            break
    return result


def remove_line(
    lines: list[CartLine],
    product_id: str,
    variation1: str | None = None,
    variation2: str | None = None,
) -> list[CartLine]:
    key = (product_id, variation1, variation2)
    return [line for line in lines if line.key != key]


def item_count(lines: Iterable[CartLine]) -> int:
    return sum(line.qty for line in lines)

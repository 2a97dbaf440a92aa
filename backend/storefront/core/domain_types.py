"""Domain Types - enums and aliases that replace bare strings across the codebase.

Invariants:
    - All valid roles, order statuses and sort keys encoded as Enums
    - ADMIN_ROLES is the only place that decides which roles are privileged

Design Decisions:
    - str Enums: serialize to JSON and compare equal to the raw DB strings
    - NewType ids: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# --- Identity Types -------------------------------------------------

ProductId = NewType("ProductId", UUID)
CategoryId = NewType("CategoryId", UUID)
OrderId = NewType("OrderId", UUID)
ReviewId = NewType("ReviewId", UUID)
UserId = NewType("UserId", UUID)


# --- Enums ----------------------------------------------------------

class Role(str, Enum):
    """Profile roles - maps to profiles.role column."""
    CLIENT = "client"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


ADMIN_ROLES = frozenset({Role.ADMIN.value, Role.SUPERADMIN.value})


class OrderStatus(str, Enum):
    """Order lifecycle states - maps to orders.status column."""
    PENDING = "PENDING"
    PAID = "PAID"
    FULFILLED = "FULFILLED"
    CANCELED = "CANCELED"
    REFUNDED = "REFUNDED"


class ProductSort(str, Enum):
    """Catalog listing sort keys accepted by the products endpoints."""
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING = "rating"


DEFAULT_PAYMENT_METHOD = "cash_on_delivery"

"""ORM Models - SQLAlchemy declarative models for all storefront tables.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per table for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from storefront.models.category import Category  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.profile import Profile  # noqa: F401
from storefront.models.order import Order  # noqa: F401
from storefront.models.review import Review  # noqa: F401

"""Root conftest - shared test configuration."""

import os

# Set before any storefront import: get_settings() is cached per process
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-storefront-suite")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")

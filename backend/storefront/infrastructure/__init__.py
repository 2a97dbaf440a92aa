"""Infrastructure Layer - database sessions, token verification and logging.

Invariants:
    - Infrastructure maps third-party exceptions to core/errors.py types
    - Nothing here knows about routes or HTTP status codes directly
"""

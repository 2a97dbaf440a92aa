"""Services Layer - one service class per resource, each wrapping an AsyncSession.

Invariants:
    - Services own authorization (via core/access_policy) and DB access
    - Routes stay thin: parse, call one service method, shape the response
"""

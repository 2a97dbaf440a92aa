"""Core Layer - pure storefront rules: cart arithmetic, access policy, CSV parsing.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core, imperative shell: services load rows, core decides, services persist
"""

"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is JSON; entities leave only through core/projections.py

Design Decisions:
    - Thin routes delegate to services (ADR: functional core, imperative shell)
"""

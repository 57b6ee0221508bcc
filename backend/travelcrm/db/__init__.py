"""Database Package — SQLAlchemy declarative Base.

Invariants:
    - Engines and sessions are created in infrastructure/database.py, not here

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for local runs and tests
"""

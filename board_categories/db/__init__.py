"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - All sessions are async (AsyncSession)
    - asyncpg driver for PostgreSQL, aiosqlite in tests
"""

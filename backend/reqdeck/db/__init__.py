"""Database Infrastructure: SQLAlchemy Base shared by the ORM models.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite driver by default: the workspace is one local document, no server needed
"""

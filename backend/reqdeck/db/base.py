"""SQLAlchemy Declarative Base: shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata (create_all at startup)

Design Decisions:
    - Separate file for Base: avoids circular imports between models and infrastructure
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ReqDeck ORM models."""
    pass

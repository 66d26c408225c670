"""Workspace Document ORM: the whole collection list stored as one JSON row.

Invariants:
    - id is a fixed slot name ("default" unless configured otherwise)
    - document holds collections_to_document() output verbatim
    - version increments on every save

Design Decisions:
    - JSON column over normalized tables: the editor always loads and saves the full
      document, so there is nothing to query inside it
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from reqdeck.db.base import Base

DEFAULT_SLOT = "default"


class WorkspaceDocument(Base):
    """One saved workspace."""
    __tablename__ = "workspace_documents"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=DEFAULT_SLOT,
    )
    document: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

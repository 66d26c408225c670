"""Gesture Schemas: drag start and drop-target payloads."""

from pydantic import BaseModel, Field

from reqdeck.core.domain_types import TableKind


class DragStart(BaseModel):
    kind: TableKind
    index: int = Field(ge=0)


class TableDrop(BaseModel):
    """Drop on a row position of the displayed table."""
    kind: TableKind
    drop_index: int = Field(ge=0)


class RequestDrop(BaseModel):
    """Drop on a sidebar request; kind defaults to the dragged rows' table."""
    kind: TableKind | None = None


class TabTarget(BaseModel):
    kind: TableKind

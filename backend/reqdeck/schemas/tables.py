"""Table Schemas: row, cell, active-flag and raw-editor payloads.

Invariants:
    - Row indices are non-negative; the engine rejects indices past the table end
    - Cell text is the flat editor text; body values are classified by the engine
"""

from pydantic import BaseModel, Field

from reqdeck.core.domain_types import RowField


class RowCreate(BaseModel):
    """Keyed row above the sentinel; an empty key just returns the sentinel."""
    key: str = ""
    value: str = ""


class CellEdit(BaseModel):
    index: int = Field(ge=0)
    field: RowField
    text: str


class ActiveUpdate(BaseModel):
    is_active: bool


class RawTableUpdate(BaseModel):
    """Raw-JSON editor content for one table."""
    text: str = Field(max_length=1_000_000)


class SelectionToggle(BaseModel):
    index: int = Field(ge=0)

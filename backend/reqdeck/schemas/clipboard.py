"""Clipboard Schemas: generic table-row copies and side-channel text imports.

Invariants:
    - Table rows carry scalar cells only (str, number, bool or null)
"""

from pydantic import BaseModel, Field

from reqdeck.core.clipboard import TableRowData

Cell = str | int | float | bool | None


class TableRowIn(BaseModel):
    row_index: int = Field(ge=0)
    columns: list[Cell]

    def to_domain(self) -> TableRowData:
        return TableRowData(row_index=self.row_index, columns=list(self.columns))


class TableRowsCopy(BaseModel):
    rows: list[TableRowIn]
    headers: list[str] = Field(default_factory=list)
    source: str = Field("table", max_length=100)


class TextImport(BaseModel):
    """Text read from the OS clipboard by the client (JSON rows or TSV)."""
    text: str = Field(max_length=1_000_000)
    source: str = Field("system", max_length=100)

"""Table Invariants: positions mirror array order, one trailing sentinel per table.

Invariants:
    - After normalize_table: position == index for every row
    - After normalize_table: exactly one row has key == "" and it is the last row
    - The sentinel's value is kind-correct: "" for params/headers, BodyValue.string("") for body
    - Never raises, for any input table

Design Decisions:
    - In-place mutation of the given list: callers (and the UI) hold references to the table
    - The last empty-key row found is the one kept, so a value typed into the sentinel before its key survives
    - Interior empty-key rows are dropped, not merged: they carry no key to address them by
"""

from reqdeck.core.domain_types import TableKind
from reqdeck.core.request_models import BodyRecord, BodyValue, Record, Row


def new_sentinel(kind: TableKind, position: int = 0) -> Row:
    """A fresh empty insertion row for the given table kind."""
    if kind.is_typed:
        return BodyRecord(key="", value=BodyValue.string(""), is_active=False, position=position)
    return Record(key="", value="", is_active=False, position=position)


def is_sentinel(row: Row) -> bool:
    return row.key == ""


def content_rows(rows: list[Row]) -> list[Row]:
    """Rows that carry a key (everything selectable, draggable and copyable)."""
    return [row for row in rows if not is_sentinel(row)]


def content_length(rows: list[Row]) -> int:
    return sum(1 for row in rows if not is_sentinel(row))


def renumber(rows: list[Row]) -> list[Row]:
    """Write position = index for every row."""
    for index, row in enumerate(rows):
        row.position = index
    return rows


def ensure_sentinel(rows: list[Row], kind: TableKind) -> list[Row]:
    """Guarantee exactly one trailing empty-key row of the right type."""
    sentinels = [row for row in rows if is_sentinel(row)]
    sentinel = sentinels[-1] if sentinels else new_sentinel(kind)
    if _wrong_type(sentinel, kind):
        sentinel = new_sentinel(kind)
    rows[:] = [*content_rows(rows), sentinel]
    return rows


def normalize_table(rows: list[Row], kind: TableKind) -> list[Row]:
    """Restore both table invariants. Runs at the end of every mutating path."""
    return renumber(ensure_sentinel(rows, kind))


def table_is_normalized(rows: list[Row]) -> bool:
    """Check both invariants without mutating (used by tests and debug logging)."""
    if not rows or not is_sentinel(rows[-1]):
        return False
    if any(is_sentinel(row) for row in rows[:-1]):
        return False
    return all(row.position == index for index, row in enumerate(rows))


def _wrong_type(row: Row, kind: TableKind) -> bool:
    if kind.is_typed:
        return not isinstance(row, BodyRecord)
    return not isinstance(row, Record)

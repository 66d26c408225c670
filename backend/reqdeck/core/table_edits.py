"""Table Edits: row CRUD, cell edits, active flags, raw-JSON replacement and url query extraction.

Invariants:
    - Every function that mutates a table ends with normalize_table on it
    - edit_cell pushes exactly one UndoEntry, before the new value is written
    - Only the trailing sentinel may have an empty key: clearing another row's key is rejected
    - delete_row on the last remaining row leaves a fresh sentinel
    - Rejected edits (ValidationWarning) change nothing

Design Decisions:
    - Body value cells are classified with flat_to_structured: the editor shows flat text,
      the table stores the variant
    - create_row never adds a second empty row; with no key it returns the sentinel slot
    - parse_url records the url change on the undo stack; the params it rebuilds are not
      (same as every other non-cell bulk change)
"""

from urllib.parse import parse_qsl, urlsplit

from reqdeck.core.coercion import flat_to_structured
from reqdeck.core.domain_types import RowField, TableKind
from reqdeck.core.errors import EmptyKeyError, MalformedRawTableError, RowIndexError
from reqdeck.core.raw_tables import json_to_table
from reqdeck.core.request_models import BodyRecord, BodyValue, Record, Request, Row
from reqdeck.core.table_invariants import content_length, normalize_table
from reqdeck.core.undo import UndoEntry, UndoStack


# ─── Row CRUD ────────────────────────────────────────────────────

def create_row(
    request: Request,
    kind: TableKind,
    key: str = "",
    value: str = "",
    is_active: bool | None = None,
) -> Row:
    """Add a row above the sentinel, or return the sentinel slot when key is empty."""
    rows = request.table(kind)
    normalize_table(rows, kind)
    if not key:
        return rows[-1]

    active = True if is_active is None else is_active
    if kind.is_typed:
        row: Row = BodyRecord(key=key, value=flat_to_structured(value), is_active=active)
    else:
        row = Record(key=key, value=value, is_active=active)
    rows.insert(content_length(rows), row)
    normalize_table(rows, kind)
    return row


def delete_row(request: Request, kind: TableKind, index: int) -> Row | None:
    """Remove one row. Returns it, or None for an index out of range."""
    rows = request.table(kind)
    if not 0 <= index < len(rows):
        return None
    removed = rows.pop(index)
    normalize_table(rows, kind)
    return removed


def set_row_active(request: Request, kind: TableKind, index: int, is_active: bool) -> None:
    rows = request.table(kind)
    if not 0 <= index < len(rows):
        raise RowIndexError(kind.value, index)
    rows[index].is_active = is_active


def set_all_active(request: Request, kind: TableKind, is_active: bool) -> None:
    """Header checkbox: flip every row, sentinel included."""
    for row in request.table(kind):
        row.is_active = is_active


# ─── Cell edits ──────────────────────────────────────────────────

def edit_cell(
    request: Request,
    kind: TableKind,
    index: int,
    field: RowField,
    text: str,
    undo: UndoStack,
) -> Row:
    """Write a typed cell, recording the previous value for undo."""
    rows = request.table(kind)
    if not 0 <= index < len(rows):
        raise RowIndexError(kind.value, index)
    if field is RowField.KEY and text == "" and index != len(rows) - 1:
        raise EmptyKeyError(index)

    row = rows[index]
    if field is RowField.KEY:
        old, new = row.key, text
    elif kind.is_typed:
        old, new = row.value, flat_to_structured(text)
    else:
        old, new = row.value, text

    undo.push(UndoEntry.field_change(kind, request.id, index, field, old, new))

    if field is RowField.KEY:
        row.key = new
        row.is_active = True
    else:
        row.value = new
    normalize_table(rows, kind)
    return row


def restore_cell(
    request: Request, kind: TableKind, index: int, field: RowField, value: object,
) -> bool:
    """Write an undone value back. False when the row no longer exists."""
    rows = request.table(kind)
    if not 0 <= index < len(rows):
        return False
    row = rows[index]
    if field is RowField.KEY:
        row.key = str(value)
    elif kind.is_typed:
        row.value = value if isinstance(value, BodyValue) else flat_to_structured(str(value))
    else:
        row.value = str(value)
    normalize_table(rows, kind)
    return True


# ─── Raw JSON editor ─────────────────────────────────────────────

def replace_from_raw(request: Request, kind: TableKind, text: str) -> list[Row]:
    """Rebuild a table from the raw-JSON editor. Malformed JSON leaves it unchanged."""
    rows = json_to_table(text, kind)
    if rows is None:
        raise MalformedRawTableError(kind.value)
    request.replace_table(kind, rows)
    return request.table(kind)


# ─── URL query extraction ────────────────────────────────────────

def _strip_query(url: str) -> str:
    parts = urlsplit(url)
    host = parts.netloc.rsplit("@", 1)[-1]
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return f"{parts.scheme}://{host}{parts.path or '/'}{fragment}"


def parse_url(request: Request, undo: UndoStack) -> bool:
    """Move the url's query string into the params table. True when params were rebuilt.

    A missing scheme gets "http://"; every url change is undoable back to the typed text.
    """
    original = request.url
    if original == "":
        return False
    url = original if "http" in original else "http://" + original

    try:
        query = urlsplit(url).query
    except ValueError:
        query = ""
    if query == "":
        if url != original:
            undo.push(UndoEntry.url_change(request.id, original, url))
            request.url = url
        return False

    params: list[Row] = [
        Record(key=key, value=value, is_active=True)
        for key, value in parse_qsl(query, keep_blank_values=True)
        if key
    ]
    request.replace_table(TableKind.PARAMS, normalize_table(params, TableKind.PARAMS))

    stripped = _strip_query(url)
    undo.push(UndoEntry.url_change(request.id, original, stripped))
    request.url = stripped
    return True

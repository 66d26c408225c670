"""Reorder Engine: single-row, multi-row and cross-table moves over request tables.

Invariants:
    - Every function that mutates a table ends with normalize_table on it
    - move_selection keeps the selected rows' relative order and inserts them contiguously
    - move_selection insert point = drop_index - (#selected indices < drop_index), clamped to [0, len]
    - move_across never aliases: destination rows are deep clones of the dragged snapshots
    - move_across removes source rows by (key, serialized value), first unmatched match wins
    - check_drop_compatible raises before any mutation

Design Decisions:
    - Selection removal in descending index order so earlier removals don't shift later ones
    - Source removal by content, not identity: the dragged rows are snapshots taken at drag
      start, so object identity with the live table is already lost
    - When source and destination are the same list the freshly inserted clones are excluded
      from the content match, otherwise a drop above the originals would delete the clones
"""

import logging
from typing import Sequence, TypeVar

from reqdeck.core.coercion import convert_row, needs_coercion, serialized_value
from reqdeck.core.domain_types import TableKind
from reqdeck.core.errors import IncompatibleDropError
from reqdeck.core.request_models import Row
from reqdeck.core.table_invariants import content_length, is_sentinel, normalize_table

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ─── Plain list moves ────────────────────────────────────────────

def move_in_list(items: list[T], from_index: int, to_index: int) -> list[T]:
    """Splice move with both indices clamped to the list bounds."""
    if not items:
        return items
    last = len(items) - 1
    source = _clamp(from_index, 0, last)
    target = _clamp(to_index, 0, last)
    if source != target:
        items.insert(target, items.pop(source))
    return items


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


# ─── Same-table moves ────────────────────────────────────────────

def move_item(
    rows: list[Row], from_index: int, to_index: int, kind: TableKind,
) -> list[Row]:
    """Move one row within its table."""
    move_in_list(rows, from_index, to_index)
    return normalize_table(rows, kind)


def selection_insert_index(
    indices: Sequence[int], drop_index: int, remaining: int,
) -> int:
    """Drop index corrected for the selected rows removed in front of it."""
    removed_before = sum(1 for index in indices if index < drop_index)
    return _clamp(drop_index - removed_before, 0, remaining)


def move_selection(
    rows: list[Row], indices: Sequence[int], drop_index: int, kind: TableKind,
) -> list[Row]:
    """Move several rows as one contiguous block. Returns the moved rows."""
    ordered = sorted(set(indices))
    if not ordered:
        return []

    removed: list[Row] = []
    for index in reversed(ordered):
        if 0 <= index < len(rows):
            removed.insert(0, rows.pop(index))

    insert_at = selection_insert_index(ordered, drop_index, len(rows))
    rows[insert_at:insert_at] = removed
    normalize_table(rows, kind)
    logger.debug(
        "Moved %d rows to index %d", len(removed), insert_at,
        extra={"table_kind": kind.value, "row_count": len(removed)},
    )
    return removed


# ─── Cross-table moves ───────────────────────────────────────────

def check_drop_compatible(
    source_kind: TableKind, dest_kind: TableKind, coercion_supported: bool,
) -> None:
    """Reject body <-> params/headers drops where no coercion runs."""
    if not coercion_supported and needs_coercion(source_kind, dest_kind):
        raise IncompatibleDropError(source_kind.value, dest_kind.value)


def convert_rows(
    items: Sequence[Row], source_kind: TableKind, dest_kind: TableKind,
) -> list[Row]:
    """Deep clones of the dragged rows, retyped for the destination."""
    return [convert_row(item, source_kind, dest_kind) for item in items if not is_sentinel(item)]


def remove_matching_rows(
    rows: list[Row], items: Sequence[Row], exclude: Sequence[Row] = (),
) -> list[int]:
    """Remove, per item, the first row with the same key and value. Returns removed indices."""
    excluded = {id(row) for row in exclude}
    matched: list[int] = []
    for item in items:
        wanted = (item.key, serialized_value(item))
        for index, row in enumerate(rows):
            if index in matched or id(row) in excluded:
                continue
            if (row.key, serialized_value(row)) == wanted:
                matched.append(index)
                break
    for index in sorted(matched, reverse=True):
        del rows[index]
    return matched


def move_across(
    source_rows: list[Row],
    dest_rows: list[Row],
    items: Sequence[Row],
    drop_index: int,
    source_kind: TableKind,
    dest_kind: TableKind,
) -> list[Row]:
    """Move dragged rows into another table (or request) at drop_index."""
    inserted = convert_rows(items, source_kind, dest_kind)
    insert_at = _clamp(drop_index, 0, len(dest_rows))
    dest_rows[insert_at:insert_at] = inserted
    for index in range(insert_at, len(dest_rows)):
        dest_rows[index].position = index

    removed = remove_matching_rows(source_rows, items, exclude=inserted)
    if len(removed) != len(inserted):
        logger.warning(
            "Cross-table move matched %d of %d source rows",
            len(removed), len(inserted),
            extra={"table_kind": source_kind.value, "row_count": len(inserted)},
        )

    normalize_table(source_rows, source_kind)
    if dest_rows is not source_rows:
        normalize_table(dest_rows, dest_kind)
    return inserted


def append_rows(
    dest_rows: list[Row], items: Sequence[Row], source_kind: TableKind, dest_kind: TableKind,
) -> list[Row]:
    """Copy dragged rows to the end of a table (just above its sentinel)."""
    inserted = convert_rows(items, source_kind, dest_kind)
    insert_at = content_length(dest_rows)
    normalize_table(dest_rows, dest_kind)
    dest_rows[insert_at:insert_at] = inserted
    normalize_table(dest_rows, dest_kind)
    return inserted

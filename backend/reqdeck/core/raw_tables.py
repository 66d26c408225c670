"""Raw Tables: the JSON text view of a params/headers/body table and its parser.

Invariants:
    - table_to_json only emits rows with a non-empty key; a later duplicate key wins
    - params render indented (2 spaces); headers and body render compact
    - json_to_table returns active rows followed by one sentinel, or None for malformed JSON
    - Body cells are flattened on the way out and re-classified on the way in

Design Decisions:
    - Body values are written as their flat text (arrays become "[1,2]" strings): reading
      them back through parse_body_value restores the same variant
    - None (not an empty table) on parse failure so the caller can keep the current rows
"""

from typing import Any

from reqdeck.core.coercion import (
    canonical_json, flat_text, load_json, parse_body_value, structured_to_flat,
)
from reqdeck.core.domain_types import TableKind
from reqdeck.core.errors import ConversionFailure
from reqdeck.core.request_models import BodyRecord, Record, Row
from reqdeck.core.table_invariants import normalize_table

_INDENT: dict[TableKind, int | None] = {
    TableKind.PARAMS: 2,
    TableKind.HEADERS: None,
    TableKind.BODY: None,
}


def table_to_mapping(rows: list[Row], kind: TableKind) -> dict[str, str]:
    """key -> flat value over every keyed row."""
    result: dict[str, str] = {}
    for row in rows:
        if not row.key:
            continue
        if kind.is_typed:
            result[row.key] = structured_to_flat(row.value)
        else:
            result[row.key] = row.value
    return result


def table_to_json(rows: list[Row], kind: TableKind) -> str:
    return canonical_json(table_to_mapping(rows, kind), indent=_INDENT[kind])


def json_to_table(text: str, kind: TableKind) -> list[Row] | None:
    """Rows parsed from raw JSON text, or None when the text is not valid JSON."""
    try:
        data = load_json(text)
    except ConversionFailure:
        return None

    rows: list[Row] = []
    for key, value in _entries(data):
        if kind.is_typed:
            rows.append(BodyRecord(key=key, value=parse_body_value(value), is_active=True))
        else:
            rows.append(Record(key=key, value=flat_text(value), is_active=True))
    return normalize_table(rows, kind)


def _entries(data: Any) -> list[tuple[str, Any]]:
    """Object.keys() semantics: arrays are keyed by index, scalars have no keys."""
    if not data:
        return []
    if isinstance(data, dict):
        return [(str(k), v) for k, v in data.items() if str(k)]
    if isinstance(data, list):
        return [(str(i), v) for i, v in enumerate(data)]
    return []

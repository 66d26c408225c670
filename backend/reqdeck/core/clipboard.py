"""Clipboard: the engine-wide copy buffer and the paste conversion between table shapes.

Invariants:
    - Exactly one payload is held at a time; every copy replaces it (last write wins)
    - get() never consumes the payload; only clear() or the next copy removes it
    - Payload items are deep snapshots: editing the source table never changes the clipboard
    - The OS side channel is best effort: a failed write falls back to fallback_text, the
      logical copy always succeeds
    - paste_rows converts on a scratch list and touches the destination only after every
      item converted; the destination ends normalized

Design Decisions:
    - Two payload variants, mirroring the two table families: generic visualization tables
      (TableRows) and editable key/value tables (KeyValuePairs)
    - Any payload pastes into any table: mismatched shapes are converted, never rejected
    - TSV side-channel text for table rows, pretty JSON for key/value rows; both can be read
      back by payload_from_text so a second app instance can paste them
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Sequence

from reqdeck.core.boundary_protocols import ClipboardBridge
from reqdeck.core.coercion import (
    canonical_json, flat_text, flat_to_structured, load_json, row_text,
    structured_to_flat,
)
from reqdeck.core.domain_types import PLACEHOLDER_KEY_PREFIX, TableKind
from reqdeck.core.errors import ConversionFailure, EmptyClipboardError, PasteConversionError
from reqdeck.core.request_models import BodyRecord, Record, Row
from reqdeck.core.table_invariants import content_length, normalize_table
from reqdeck.core.workspace_snapshot import body_value_from_dict, row_to_dict

logger = logging.getLogger(__name__)

Cell = str | int | float | bool | None


class ClipboardKind(str, Enum):
    TABLE_ROWS = "table-rows"
    KEY_VALUE_PAIRS = "key-value-pairs"


class PasteTarget(str, Enum):
    TABLE = "table"
    EDITABLE_TABLE = "editable-table"


@dataclass(frozen=True)
class TableRowData:
    """One row of a generic visualization table."""
    row_index: int
    columns: list[Cell]


@dataclass(frozen=True)
class TableRowsPayload:
    rows: list[TableRowData]
    headers: list[str]
    source: str
    timestamp: datetime
    kind: ClipboardKind = field(default=ClipboardKind.TABLE_ROWS, init=False)


@dataclass(frozen=True)
class KeyValuePayload:
    items: list[Row]
    source: str
    timestamp: datetime
    kind: ClipboardKind = field(default=ClipboardKind.KEY_VALUE_PAIRS, init=False)


ClipboardPayload = TableRowsPayload | KeyValuePayload


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Text encodings ──────────────────────────────────────────────

def _cell_text(cell: Cell) -> str:
    return "" if cell is None else flat_text(cell)


def to_tsv(rows: Sequence[TableRowData], headers: Sequence[str]) -> str:
    lines: list[str] = []
    if headers:
        lines.append("\t".join(headers))
    for row in rows:
        lines.append("\t".join(_cell_text(col) for col in row.columns))
    return "\n".join(lines)


def key_value_json(items: Sequence[Row]) -> str:
    return canonical_json([row_to_dict(item) for item in items], indent=2)


# ─── Shape projections ───────────────────────────────────────────

def table_rows_to_key_value_pairs(rows: Sequence[TableRowData]) -> list[Record]:
    """First column -> key (row_<n> when blank), second column -> value."""
    pairs: list[Record] = []
    for index, row in enumerate(rows):
        key = _cell_text(row.columns[0]) if row.columns else ""
        value = _cell_text(row.columns[1]) if len(row.columns) > 1 else ""
        pairs.append(Record(
            key=key or f"{PLACEHOLDER_KEY_PREFIX}{index + 1}",
            value=value, is_active=True, position=index,
        ))
    return pairs


def key_value_pairs_to_table_rows(items: Sequence[Row]) -> list[TableRowData]:
    return [
        TableRowData(row_index=index, columns=[item.key, row_text(item)])
        for index, item in enumerate(items)
    ]


KEY_VALUE_HEADERS = ["Key", "Value"]


def payload_as_table_rows(
    payload: ClipboardPayload | None,
) -> tuple[list[TableRowData], list[str]]:
    """Rows and headers for pasting a payload into a generic table.

    Key/value payloads project to two columns. Raises EmptyClipboardError on no payload.
    """
    if payload is None:
        raise EmptyClipboardError()
    if isinstance(payload, TableRowsPayload):
        rows = [TableRowData(r.row_index, list(r.columns)) for r in payload.rows]
        return rows, list(payload.headers)
    return key_value_pairs_to_table_rows(payload.items), list(KEY_VALUE_HEADERS)


# ─── Paste ───────────────────────────────────────────────────────

def _convert_for_paste(item: Any, dest_kind: TableKind) -> Row:
    if not isinstance(item, (Record, BodyRecord)) or not isinstance(item.key, str):
        raise PasteConversionError(f"unsupported clipboard item {type(item).__name__}")
    if dest_kind.is_typed:
        if isinstance(item, BodyRecord):
            value = copy.deepcopy(item.value)
        else:
            value = flat_to_structured(item.value)
        return BodyRecord(key=item.key, value=value, is_active=item.is_active)
    if isinstance(item, BodyRecord):
        return Record(key=item.key, value=structured_to_flat(item.value), is_active=item.is_active)
    return Record(key=item.key, value=str(item.value), is_active=item.is_active)


def payload_items(payload: ClipboardPayload) -> list[Row]:
    """Payload content as key/value rows, whatever its variant."""
    if isinstance(payload, TableRowsPayload):
        return list(table_rows_to_key_value_pairs(payload.rows))
    return list(payload.items)


def paste_rows(
    payload: ClipboardPayload | None, dest_rows: list[Row], dest_kind: TableKind,
) -> list[Row]:
    """Append the payload to a table, above its sentinel. Returns the new rows."""
    if payload is None:
        raise EmptyClipboardError()

    try:
        scratch = [
            _convert_for_paste(item, dest_kind)
            for item in payload_items(payload) if item.key != ""
        ]
    except PasteConversionError:
        raise
    except (AttributeError, TypeError, ValueError) as e:
        raise PasteConversionError(str(e)) from e

    start = content_length(dest_rows)
    normalize_table(dest_rows, dest_kind)
    for offset, row in enumerate(scratch):
        row.position = start + offset
    dest_rows[start:start] = scratch
    normalize_table(dest_rows, dest_kind)
    return scratch


# ─── Reading another instance's side channel ─────────────────────

def _row_from_text_item(item: dict) -> Row:
    is_active = bool(item.get("is_active", item.get("isActive", True)))
    value = item.get("value", "")
    if isinstance(value, dict) and "type" in value:
        return BodyRecord(key=str(item.get("key", "")), value=body_value_from_dict(value), is_active=is_active)
    return Record(key=str(item.get("key", "")), value=flat_text(value), is_active=is_active)


def payload_from_text(
    text: str, source: str, clock: Callable[[], datetime] = _utc_now,
) -> ClipboardPayload | None:
    """Rebuild a payload from side-channel text (JSON rows or TSV)."""
    if not text.strip():
        return None
    try:
        data = load_json(text)
    except ConversionFailure:
        data = None
    if isinstance(data, list) and all(isinstance(d, dict) and "key" in d for d in data):
        try:
            items = [_row_from_text_item(d) for d in data]
        except ValueError as e:
            logger.info(f"Clipboard JSON rows unreadable, reading as TSV: {e}")
        else:
            return KeyValuePayload(items=items, source=source, timestamp=clock())

    rows = [
        TableRowData(row_index=index, columns=list(line.split("\t")))
        for index, line in enumerate(text.splitlines()) if line.strip()
    ]
    return TableRowsPayload(rows=rows, headers=[], source=source, timestamp=clock())


# ─── Engine-wide buffer ──────────────────────────────────────────

class Clipboard:
    """Holds the current payload and mirrors copies to the OS clipboard."""

    def __init__(
        self,
        bridge: ClipboardBridge | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._bridge = bridge
        self._clock = clock
        self._payload: ClipboardPayload | None = None
        self.fallback_text: str | None = None

    @property
    def payload(self) -> ClipboardPayload | None:
        return self._payload

    def get(self) -> ClipboardPayload | None:
        return self._payload

    def has_data(self) -> bool:
        return self._payload is not None

    def clear(self) -> None:
        self._payload = None

    def copy_table_rows(
        self, rows: Sequence[TableRowData], headers: Sequence[str], source: str,
    ) -> TableRowsPayload:
        payload = TableRowsPayload(
            rows=[TableRowData(r.row_index, list(r.columns)) for r in rows],
            headers=list(headers), source=source, timestamp=self._clock(),
        )
        self._payload = payload
        self._write_side_channel(to_tsv(payload.rows, payload.headers))
        return payload

    def copy_key_value_pairs(self, items: Sequence[Row], source: str) -> KeyValuePayload:
        payload = KeyValuePayload(
            items=[copy.deepcopy(item) for item in items],
            source=source, timestamp=self._clock(),
        )
        self._payload = payload
        self._write_side_channel(key_value_json(payload.items))
        return payload

    def load_text(self, text: str, source: str) -> ClipboardPayload | None:
        """Adopt text copied by another instance as the current payload."""
        payload = payload_from_text(text, source, self._clock)
        if payload is not None:
            self._payload = payload
        return payload

    def is_compatible_with(self, target: PasteTarget) -> bool:
        if self._payload is None:
            return False
        return target in (PasteTarget.TABLE, PasteTarget.EDITABLE_TABLE)

    def _write_side_channel(self, text: str) -> bool:
        written = False
        if self._bridge is not None:
            try:
                written = bool(self._bridge.write(text))
            except Exception as e:
                logger.warning(f"Failed to copy to system clipboard: {e}")
        if not written:
            logger.info("System clipboard unavailable, using local fallback copy")
            self.fallback_text = text
        else:
            self.fallback_text = None
        return written


def payload_to_dict(payload: ClipboardPayload) -> dict:
    """JSON-safe view of a payload for the API."""
    base = {
        "type": payload.kind.value,
        "source": payload.source,
        "timestamp": payload.timestamp.isoformat(),
    }
    if isinstance(payload, TableRowsPayload):
        base["headers"] = payload.headers
        base["data"] = [{"row_index": r.row_index, "columns": r.columns} for r in payload.rows]
    else:
        base["data"] = [row_to_dict(item) for item in payload.items]
    return base


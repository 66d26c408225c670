"""Undo Stack: last-in-first-out record of direct edits (cells, titles, urls).

Invariants:
    - An entry is pushed before the edited value is committed
    - pop() removes exactly one entry; there is no redo stack
    - Entries address their target by id (+ row index and field), never by object reference
    - Drag and paste mutations never produce entries

Design Decisions:
    - Unbounded list: one editing session, nothing persisted across reloads
    - Entry applies itself through workspace.apply_undo so this module stays free of lookups
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from reqdeck.core.domain_types import RowField, TableKind


class UndoKind(str, Enum):
    URL = "url"
    COLLECTION_TITLE = "collectionTitle"
    REQUEST_TITLE = "requestTitle"
    PARAM = "param"
    HEADER = "header"
    BODY = "body"


TABLE_UNDO_KINDS: dict[TableKind, UndoKind] = {
    TableKind.PARAMS: UndoKind.PARAM,
    TableKind.HEADERS: UndoKind.HEADER,
    TableKind.BODY: UndoKind.BODY,
}
UNDO_TABLE_KINDS: dict[UndoKind, TableKind] = {v: k for k, v in TABLE_UNDO_KINDS.items()}


@dataclass(frozen=True)
class UndoEntry:
    """One reversible edit."""

    kind: UndoKind
    old_value: Any
    new_value: Any
    collection_id: str | None = None
    request_id: str | None = None
    index: int | None = None
    field: RowField | None = None

    @classmethod
    def url_change(cls, request_id: str, old: str, new: str) -> "UndoEntry":
        return cls(UndoKind.URL, old, new, request_id=request_id)

    @classmethod
    def collection_title_change(cls, collection_id: str, old: str, new: str) -> "UndoEntry":
        return cls(UndoKind.COLLECTION_TITLE, old, new, collection_id=collection_id)

    @classmethod
    def request_title_change(cls, request_id: str, old: str, new: str) -> "UndoEntry":
        return cls(UndoKind.REQUEST_TITLE, old, new, request_id=request_id)

    @classmethod
    def field_change(
        cls,
        kind: TableKind,
        request_id: str,
        index: int,
        field: RowField,
        old: Any,
        new: Any,
    ) -> "UndoEntry":
        return cls(
            TABLE_UNDO_KINDS[kind], old, new,
            request_id=request_id, index=index, field=field,
        )

    @property
    def table_kind(self) -> TableKind | None:
        return UNDO_TABLE_KINDS.get(self.kind)


class UndoStack:
    """LIFO list of UndoEntry."""

    def __init__(self) -> None:
        self._entries: list[UndoEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def depth(self) -> int:
        return len(self._entries)

    def push(self, entry: UndoEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> UndoEntry | None:
        return self._entries.pop() if self._entries else None

    def peek(self) -> UndoEntry | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

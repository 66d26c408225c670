"""Request Models: collections, requests, their three tables and the response history.

Invariants:
    - Collection.requests order is display order (no separate rank field)
    - Record.position / BodyRecord.position cache the row's array index; never authoritative
    - BodyValue carries exactly one variant, named by its BodyValueType discriminant
    - Request.responses is most-recent-first and never exceeds its capacity

Design Decisions:
    - Plain dataclasses, not ORM rows: the workspace is one JSON document, tables are edited in memory
    - BodyValue is frozen: edits replace the value object instead of mutating it in place
    - Table access by TableKind through Request.table() so engine code never uses getattr
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

from reqdeck.core.domain_types import (
    BodyValueType, CollectionId, HttpMethod, RequestId, ResponseId,
    ResponseStatus, TableKind, RESPONSE_HISTORY_CAPACITY,
)


def _new_id() -> str:
    return str(uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Body Values ─────────────────────────────────────────────────

@dataclass(frozen=True)
class BodyValue:
    """Tagged variant over String, Number, Bool, Array and Object."""

    type: BodyValueType
    value: Any

    @classmethod
    def string(cls, text: str = "") -> "BodyValue":
        return cls(BodyValueType.STRING, text)

    @classmethod
    def number(cls, number: int | float) -> "BodyValue":
        return cls(BodyValueType.NUMBER, number)

    @classmethod
    def boolean(cls, flag: bool) -> "BodyValue":
        return cls(BodyValueType.BOOL, flag)

    @classmethod
    def array(cls, items: list) -> "BodyValue":
        return cls(BodyValueType.ARRAY, items)

    @classmethod
    def mapping(cls, mapping: dict) -> "BodyValue":
        return cls(BodyValueType.OBJECT, mapping)

    @property
    def is_empty(self) -> bool:
        return self.value == ""


# ─── Rows ────────────────────────────────────────────────────────

@dataclass
class Record:
    """params/headers row: flat string value."""
    key: str = ""
    value: str = ""
    is_active: bool = False
    position: int = 0


@dataclass
class BodyRecord:
    """body row: typed value."""
    key: str = ""
    value: BodyValue = field(default_factory=BodyValue.string)
    is_active: bool = False
    position: int = 0


Row = Record | BodyRecord


# ─── Response History ────────────────────────────────────────────

@dataclass
class ResponseEntry:
    """One recorded response for a request."""
    data: str
    status: ResponseStatus
    id: ResponseId = field(default_factory=lambda: ResponseId(_new_id()))
    timestamp: datetime = field(default_factory=_utc_now)


# ─── Requests & Collections ──────────────────────────────────────

@dataclass
class Request:
    """A request definition with three ordered tables."""

    id: RequestId = field(default_factory=lambda: RequestId(_new_id()))
    title: str = ""
    method: HttpMethod = HttpMethod.GET
    url: str = ""
    params: list[Record] = field(default_factory=list)
    headers: list[Record] = field(default_factory=list)
    body: list[BodyRecord] = field(default_factory=list)
    responses: list[ResponseEntry] = field(default_factory=list)

    def table(self, kind: TableKind) -> list:
        """The row list for a table kind (the same list object, not a copy)."""
        if kind is TableKind.PARAMS:
            return self.params
        if kind is TableKind.HEADERS:
            return self.headers
        return self.body

    def replace_table(self, kind: TableKind, rows: list) -> None:
        """Swap a table's contents in place so outstanding references stay valid."""
        self.table(kind)[:] = rows

    @property
    def latest_response(self) -> ResponseEntry | None:
        return self.responses[0] if self.responses else None

    def record_response(
        self,
        data: str,
        status: ResponseStatus,
        capacity: int = RESPONSE_HISTORY_CAPACITY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> ResponseEntry:
        """Insert a response at the front, evicting the oldest beyond capacity."""
        entry = ResponseEntry(data=data, status=status, timestamp=clock())
        self.responses.insert(0, entry)
        del self.responses[capacity:]
        return entry

    def clear_responses(self) -> None:
        self.responses.clear()


@dataclass
class Collection:
    """A titled, ordered group of requests."""
    id: CollectionId = field(default_factory=lambda: CollectionId(_new_id()))
    title: str = ""
    requests: list[Request] = field(default_factory=list)

    def find_request(self, request_id: str) -> Request | None:
        return next((r for r in self.requests if r.id == request_id), None)

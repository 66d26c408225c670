"""Workspace Snapshot: serialization / deserialization of collections to a JSON-safe document.

Invariants:
    - collections_to_document produces only dicts, lists, str, int, float, bool, None
    - collections_from_document(collections_to_document(x)) == x
    - Missing keys fall back to dataclass defaults (forward-compatible)
    - Loaded tables are normalized: missing positions come from array order, one sentinel each

Design Decisions:
    - Extracted from request_models.py: the models stay free of wire-format concerns
    - BodyValue serialized as {"type": ..., "value": ...} (same shape the clipboard side channel uses)
"""

from datetime import datetime, timezone
from typing import Any

from reqdeck.core.domain_types import (
    BodyValueType, CollectionId, HttpMethod, RequestId, ResponseId,
    ResponseStatus, TableKind,
)
from reqdeck.core.request_models import (
    BodyRecord, BodyValue, Collection, Record, Request, ResponseEntry, Row,
)
from reqdeck.core.table_invariants import normalize_table


# ─── Rows ────────────────────────────────────────────────────────

def body_value_to_dict(value: BodyValue) -> dict:
    return {"type": value.type.value, "value": value.value}


def body_value_from_dict(data: Any) -> BodyValue:
    if not isinstance(data, dict) or "type" not in data:
        return BodyValue.string("" if data is None else str(data))
    return BodyValue(BodyValueType(data["type"]), data.get("value", ""))


def row_to_dict(row: Row) -> dict:
    value = body_value_to_dict(row.value) if isinstance(row, BodyRecord) else row.value
    return {
        "key": row.key,
        "value": value,
        "is_active": row.is_active,
        "position": row.position,
    }


def row_from_dict(data: dict, kind: TableKind, fallback_position: int = 0) -> Row:
    is_active = bool(data.get("is_active", data.get("isActive", False)))
    position = data.get("position")
    if not isinstance(position, int):
        position = fallback_position
    key = str(data.get("key", ""))
    if kind.is_typed:
        return BodyRecord(
            key=key, value=body_value_from_dict(data.get("value")),
            is_active=is_active, position=position,
        )
    value = data.get("value", "")
    return Record(
        key=key, value="" if value is None else str(value),
        is_active=is_active, position=position,
    )


def _table_from_list(data: Any, kind: TableKind) -> list[Row]:
    rows = [
        row_from_dict(item, kind, index)
        for index, item in enumerate(data or [])
        if isinstance(item, dict)
    ]
    return normalize_table(rows, kind)


# ─── Responses ───────────────────────────────────────────────────

def response_to_dict(entry: ResponseEntry) -> dict:
    return {
        "id": entry.id,
        "timestamp": entry.timestamp.isoformat(),
        "data": entry.data,
        "status": entry.status.value,
    }


def response_from_dict(data: dict) -> ResponseEntry:
    raw_ts = data.get("timestamp")
    try:
        timestamp = datetime.fromisoformat(raw_ts) if raw_ts else datetime.now(timezone.utc)
    except (TypeError, ValueError):
        timestamp = datetime.now(timezone.utc)
    entry = ResponseEntry(
        data=str(data.get("data", "")),
        status=ResponseStatus(data.get("status", ResponseStatus.SUCCESS.value)),
        timestamp=timestamp,
    )
    if data.get("id"):
        entry.id = ResponseId(str(data["id"]))
    return entry


# ─── Requests & Collections ──────────────────────────────────────

def request_to_dict(request: Request) -> dict:
    return {
        "id": request.id,
        "title": request.title,
        "method": request.method.value,
        "url": request.url,
        "params": [row_to_dict(r) for r in request.params],
        "headers": [row_to_dict(r) for r in request.headers],
        "body": [row_to_dict(r) for r in request.body],
        "responses": [response_to_dict(r) for r in request.responses],
    }


def request_from_dict(data: dict) -> Request:
    request = Request(
        title=str(data.get("title", "")),
        method=HttpMethod(data.get("method", data.get("typeReq", HttpMethod.GET.value))),
        url=str(data.get("url", "")),
        params=_table_from_list(data.get("params"), TableKind.PARAMS),
        headers=_table_from_list(data.get("headers"), TableKind.HEADERS),
        body=_table_from_list(data.get("body"), TableKind.BODY),
        responses=[response_from_dict(r) for r in data.get("responses") or [] if isinstance(r, dict)],
    )
    if data.get("id"):
        request.id = RequestId(str(data["id"]))
    return request


def collection_to_dict(collection: Collection) -> dict:
    return {
        "id": collection.id,
        "title": collection.title,
        "requests": [request_to_dict(r) for r in collection.requests],
    }


def collection_from_dict(data: dict) -> Collection:
    collection = Collection(
        title=str(data.get("title", "")),
        requests=[request_from_dict(r) for r in data.get("requests") or [] if isinstance(r, dict)],
    )
    if data.get("id"):
        collection.id = CollectionId(str(data["id"]))
    return collection


def collections_to_document(collections: list[Collection]) -> list[dict]:
    """Serialize the whole workspace. Pure, no IO."""
    return [collection_to_dict(c) for c in collections]


def collections_from_document(data: Any) -> list[Collection]:
    """Rebuild the workspace from a stored document. Pure, no IO."""
    if not isinstance(data, list):
        return []
    return [collection_from_dict(c) for c in data if isinstance(c, dict)]

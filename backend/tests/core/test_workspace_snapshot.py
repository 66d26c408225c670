"""Workspace snapshot tests: document round trip and lenient loading.

Tests cover:
    - to_document -> from_document reproduces the collections exactly
    - The document is plain JSON data
    - Legacy keys (isActive, typeReq) and missing positions load
    - Loaded tables come back normalized
"""

import json
from datetime import datetime, timezone

from reqdeck.core.domain_types import HttpMethod, ResponseStatus, TableKind
from reqdeck.core.request_models import BodyRecord, BodyValue, Record
from reqdeck.core.table_edits import create_row
from reqdeck.core.table_invariants import table_is_normalized
from reqdeck.core.workspace import Workspace
from reqdeck.core.workspace_snapshot import (
    collections_from_document, collections_to_document, request_from_dict,
)


def _workspace() -> Workspace:
    workspace = Workspace()
    collection = workspace.create_collection("Users API")
    request = workspace.create_request(collection.id, "List users", HttpMethod.POST)
    request.url = "https://api.example.com/users"
    create_row(request, TableKind.PARAMS, "page", "2")
    create_row(request, TableKind.BODY, "limit", "50")
    create_row(request, TableKind.BODY, "tags", '["a","b"]')
    request.record_response(
        '{"ok":true}', ResponseStatus.SUCCESS,
        clock=lambda: datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
    )
    workspace.create_collection("Empty")
    return workspace


def test_round_trip_is_lossless():
    collections = _workspace().collections
    document = collections_to_document(collections)
    assert collections_from_document(document) == collections


def test_document_survives_json_encoding():
    collections = _workspace().collections
    document = collections_to_document(collections)
    reloaded = collections_from_document(json.loads(json.dumps(document)))
    assert reloaded == collections


def test_body_value_document_shape():
    document = collections_to_document(_workspace().collections)
    body = document[0]["requests"][0]["body"]
    assert body[0]["value"] == {"type": "Number", "value": 50}
    assert body[1]["value"] == {"type": "Array", "value": ["a", "b"]}


def test_legacy_keys_and_missing_positions():
    request = request_from_dict({
        "id": "r1",
        "title": "Old",
        "typeReq": "PUT",
        "params": [{"key": "a", "value": "1", "isActive": True}, {"key": "b", "value": 2}],
        "body": [{"key": "n", "value": {"type": "Bool", "value": False}}],
    })
    assert request.id == "r1"
    assert request.method is HttpMethod.PUT
    assert request.params[0] == Record("a", "1", True, 0)
    assert request.params[1] == Record("b", "2", False, 1)
    assert request.body[0] == BodyRecord("n", BodyValue.boolean(False), False, 0)
    for kind in TableKind:
        assert table_is_normalized(request.table(kind))


def test_non_list_document_loads_empty():
    assert collections_from_document(None) == []
    assert collections_from_document({"collections": []}) == []

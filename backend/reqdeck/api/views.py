"""Response Views: JSON-safe dicts of engine state for the routes.

Invariants:
    - Pure projections: reading a view never mutates the session
    - Row dicts use the stored document shape (workspace_snapshot.row_to_dict) plus the
      flat editor text under "text"
"""

from reqdeck.core.clipboard import payload_to_dict
from reqdeck.core.coercion import row_text
from reqdeck.core.domain_types import TableKind
from reqdeck.core.drag_gesture import DragGesture
from reqdeck.core.request_models import Collection, Request, Row
from reqdeck.core.undo import UndoEntry
from reqdeck.core.workspace_snapshot import (
    collection_to_dict, request_to_dict, response_to_dict, row_to_dict,
)
from reqdeck.services.editor_session import EditorSession


def row_view(row: Row) -> dict:
    return {**row_to_dict(row), "text": row_text(row)}


def rows_view(rows: list[Row]) -> list[dict]:
    return [row_view(row) for row in rows]


def request_view(request: Request) -> dict:
    view = request_to_dict(request)
    for kind in TableKind:
        view[kind.value] = rows_view(request.table(kind))
    latest = request.latest_response
    view["latest_response"] = response_to_dict(latest) if latest else None
    return view


def collection_view(collection: Collection) -> dict:
    return collection_to_dict(collection)


def gesture_view(gesture: DragGesture) -> dict:
    payload = gesture.payload
    return {
        "phase": gesture.phase.value,
        "ending": gesture.ending,
        "last_outcome": gesture.last_outcome.value if gesture.last_outcome else None,
        "item_count": len(payload.items) if payload else 0,
        "source_kind": payload.source.table_kind.value if payload else None,
        "hovered_collection_id": gesture.hovered_collection_id,
        "hovered_request_id": gesture.hovered_request_id,
        "target_request_id": gesture.target_request_id,
        "target_tab": gesture.target_tab.value if gesture.target_tab else None,
    }


def selection_view(session: EditorSession) -> dict:
    request = session.workspace.active_request
    return {
        kind.value: (
            session.selection.of(kind).selected_indices(request.table(kind))
            if request else []
        )
        for kind in TableKind
    }


def undo_entry_view(entry: UndoEntry | None) -> dict | None:
    if entry is None:
        return None
    return {
        "kind": entry.kind.value,
        "collection_id": entry.collection_id,
        "request_id": entry.request_id,
        "index": entry.index,
        "field": entry.field.value if entry.field else None,
    }


def workspace_view(session: EditorSession) -> dict:
    workspace = session.workspace
    payload = session.clipboard.get()
    return {
        "collections": [collection_view(c) for c in workspace.collections],
        "active_collection_id": workspace.active_collection_id,
        "active_request_id": workspace.active_request_id,
        "selected_tab": workspace.selected_tab,
        "undo_depth": session.undo_stack.depth,
        "clipboard": payload_to_dict(payload) if payload else None,
        "gesture": gesture_view(session.gesture),
        "selection": selection_view(session),
        "is_saved": session.is_saved(),
    }

"""Workspace Routes: snapshot, tab selection, undo, reload, notifications, unsaved check.

Invariants:
    - GET endpoints drain due deferred callbacks first (each call is one input event)
    - Undo returns the popped entry, or null when the stack was empty
"""

import logging

from fastapi import APIRouter, Depends, Query

from reqdeck.api.dependencies import (
    get_editor_session, get_notifier, get_workspace_handlers,
)
from reqdeck.api.views import undo_entry_view, workspace_view
from reqdeck.core.domain_types import TableKind
from reqdeck.infrastructure.notifications import LoggingNotifier
from reqdeck.services.editor_session import EditorSession
from reqdeck.services.handle_workspace import WorkspaceHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/workspace", tags=["workspace"])


@router.get("")
async def get_workspace(session: EditorSession = Depends(get_editor_session)):
    """Full editor state: collections, active request, tab, clipboard, gesture."""
    session.tick()
    return workspace_view(session)


@router.put("/tab")
async def select_tab(
    kind: TableKind | None = Query(None),
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    """Switch the editor tab; no kind selects the response tab."""
    return {"selected_tab": handlers.select_tab(kind)}


@router.post("/undo")
async def undo(session: EditorSession = Depends(get_editor_session)):
    entry = await session.undo()
    return {"undone": undo_entry_view(entry), "undo_depth": session.undo_stack.depth}


@router.post("/reload")
async def reload(session: EditorSession = Depends(get_editor_session)):
    """Discard in-memory state and load the stored document."""
    await session.load()
    return workspace_view(session)


@router.get("/is-saved")
async def is_saved(
    request_id: str | None = Query(None),
    session: EditorSession = Depends(get_editor_session),
):
    session.tick()
    return {"request_id": request_id, "is_saved": session.is_saved(request_id)}


@router.get("/notifications")
async def recent_notifications(notifier: LoggingNotifier = Depends(get_notifier)):
    return {
        "notifications": [
            {
                "severity": n.severity.value,
                "message": n.message,
                "timestamp": n.timestamp.isoformat(),
            }
            for n in notifier.recent()
        ],
    }

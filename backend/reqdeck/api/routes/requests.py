"""Request Routes: view, activate, edit title/url/method, url query extraction,
response history and deletion.

Invariants:
    - DELETE requires confirm=true; without it nothing is removed
    - Title and url edits are undoable (POST /workspace/undo)
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from reqdeck.api.dependencies import get_editor_session, get_workspace_handlers
from reqdeck.api.views import request_view
from reqdeck.core.workspace_snapshot import response_to_dict
from reqdeck.infrastructure.confirmation import PresetConfirmation
from reqdeck.schemas.workspace import MethodUpdate, ResponseCreate, TitleUpdate, UrlUpdate
from reqdeck.services.editor_session import EditorSession
from reqdeck.services.handle_workspace import WorkspaceHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/requests", tags=["requests"])


@router.get("/{request_id}")
async def get_request(
    request_id: str, session: EditorSession = Depends(get_editor_session),
):
    session.tick()
    return request_view(session.workspace.require_request(request_id))


@router.post("/{request_id}/activate")
async def activate_request(
    request_id: str, handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    return request_view(handlers.activate(request_id))


@router.delete("/{request_id}")
async def delete_request(
    request_id: str,
    confirm: bool = Query(False),
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    deleted = await handlers.remove_request(request_id, PresetConfirmation(confirm))
    return {"id": request_id, "deleted": deleted}


@router.patch("/{request_id}/title")
async def rename_request(
    request_id: str,
    body: TitleUpdate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    return request_view(await handlers.rename_request(request_id, body.title))


@router.put("/{request_id}/url")
async def set_url(
    request_id: str,
    body: UrlUpdate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    return request_view(await handlers.set_url(request_id, body.url))


@router.put("/{request_id}/method")
async def set_method(
    request_id: str,
    body: MethodUpdate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    return request_view(await handlers.set_method(request_id, body.method))


@router.post("/{request_id}/parse-url")
async def parse_url(
    request_id: str, handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    """Move the url's query string into the params table."""
    extracted = await handlers.parse_url(request_id)
    return {
        "extracted": extracted,
        "request": request_view(handlers.workspace.require_request(request_id)),
    }


@router.post("/{request_id}/responses", status_code=status.HTTP_201_CREATED)
async def record_response(
    request_id: str,
    body: ResponseCreate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    entry = await handlers.record_response(request_id, body.data, body.status)
    history = handlers.workspace.require_request(request_id).responses
    return {"response": response_to_dict(entry), "history_size": len(history)}


@router.delete("/{request_id}/responses")
async def clear_responses(
    request_id: str, handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    await handlers.clear_responses(request_id)
    return {"id": request_id, "history_size": 0}

"""Collection Routes: create, rename, delete, reorder collections and add requests.

Invariants:
    - DELETE requires confirm=true; without it nothing is removed (200 with deleted=false)
    - Titles validated by schemas/workspace.py before reaching the handlers
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from reqdeck.api.dependencies import get_workspace_handlers
from reqdeck.api.views import collection_view, request_view
from reqdeck.infrastructure.confirmation import PresetConfirmation
from reqdeck.schemas.workspace import CollectionCreate, MoveItem, RequestCreate, TitleUpdate
from reqdeck.services.handle_workspace import WorkspaceHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/collections", tags=["collections"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_collection(
    body: CollectionCreate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    collection = await handlers.create_collection(body.title)
    return collection_view(collection)


@router.patch("/{collection_id}")
async def rename_collection(
    collection_id: str,
    body: TitleUpdate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    collection = await handlers.rename_collection(collection_id, body.title)
    return collection_view(collection)


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: str,
    confirm: bool = Query(False),
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    deleted = await handlers.remove_collection(collection_id, PresetConfirmation(confirm))
    return {"id": collection_id, "deleted": deleted}


@router.post("/move")
async def move_collection(
    body: MoveItem,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    collections = await handlers.move_collection(body.from_index, body.to_index)
    return {"order": [c.id for c in collections]}


@router.post("/{collection_id}/requests", status_code=status.HTTP_201_CREATED)
async def create_request(
    collection_id: str,
    body: RequestCreate,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    request = await handlers.create_request(collection_id, body.title, body.method)
    return request_view(request)


@router.post("/{collection_id}/requests/move")
async def move_request(
    collection_id: str,
    body: MoveItem,
    handlers: WorkspaceHandlers = Depends(get_workspace_handlers),
):
    requests = await handlers.move_request(collection_id, body.from_index, body.to_index)
    return {"order": [r.id for r in requests]}

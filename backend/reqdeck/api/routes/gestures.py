"""Drag Routes: row drag start/end/cancel, drop targets and hover notifications.

Invariants:
    - Every response carries the gesture state after the call
    - A drop without a gesture in progress is ignored (200, accepted=false)
"""

import logging

from fastapi import APIRouter, Depends

from reqdeck.api.dependencies import get_gesture_handlers
from reqdeck.api.views import gesture_view, request_view, rows_view
from reqdeck.schemas.gestures import DragStart, RequestDrop, TableDrop, TabTarget
from reqdeck.services.handle_gestures import GestureHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/drag", tags=["drag"])


def _state(handlers: GestureHandlers, **extra) -> dict:
    return {"gesture": gesture_view(handlers.gesture), **extra}


@router.post("/start")
async def start_drag(
    body: DragStart, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    payload = handlers.start_drag(body.kind, body.index)
    return _state(handlers, started=payload is not None)


@router.post("/end")
async def end_drag(handlers: GestureHandlers = Depends(get_gesture_handlers)):
    handlers.end_drag()
    return _state(handlers)


@router.post("/cancel")
async def cancel_drag(handlers: GestureHandlers = Depends(get_gesture_handlers)):
    handlers.cancel_drag()
    return _state(handlers)


# --- drop targets ---

@router.post("/drop/table")
async def drop_in_table(
    body: TableDrop, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    accepted = handlers.gesture.accepts_drop
    rows = await handlers.drop_in_table(body.kind, body.drop_index)
    return _state(handlers, accepted=accepted, rows=rows_view(rows))


@router.post("/drop/request/{request_id}")
async def drop_on_request(
    request_id: str, body: RequestDrop,
    handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    accepted = handlers.gesture.accepts_drop
    inserted = await handlers.drop_on_request(request_id, body.kind)
    return _state(handlers, accepted=accepted, inserted=rows_view(inserted))


@router.post("/drop/tab")
async def drop_on_tab(
    body: TabTarget, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    accepted = handlers.gesture.accepts_drop
    inserted = await handlers.drop_on_tab(body.kind)
    return _state(handlers, accepted=accepted, inserted=rows_view(inserted))


@router.post("/drop/collection/{collection_id}")
async def drop_on_collection(
    collection_id: str, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    accepted = handlers.gesture.accepts_drop
    request = await handlers.drop_on_collection(collection_id)
    return _state(
        handlers, accepted=accepted,
        request=request_view(request) if request is not None else None,
    )


# --- hover ---

@router.post("/hover/request/{request_id}")
async def hover_request(
    request_id: str, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    handlers.hover_request(request_id)
    return _state(handlers)


@router.post("/leave/request/{request_id}")
async def leave_request(
    request_id: str, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    handlers.leave_request(request_id)
    return _state(handlers)


@router.post("/hover/collection/{collection_id}")
async def hover_collection(
    collection_id: str, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    handlers.hover_collection(collection_id)
    return _state(handlers)


@router.post("/leave/collection/{collection_id}")
async def leave_collection(
    collection_id: str, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    handlers.leave_collection(collection_id)
    return _state(handlers)


@router.post("/hover/tab")
async def hover_tab(
    body: TabTarget, handlers: GestureHandlers = Depends(get_gesture_handlers),
):
    handlers.hover_tab(body.kind)
    return _state(handlers)

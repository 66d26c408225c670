"""Clipboard Routes: copy, paste, inspect, clear and import the engine clipboard.

Invariants:
    - Copy of nothing -> 400 NOTHING_SELECTED; paste of nothing -> 400 CLIPBOARD_EMPTY
    - A failed paste returns 422 with the destination table unchanged
"""

import logging

from fastapi import APIRouter, Depends

from reqdeck.api.dependencies import get_clipboard_handlers
from reqdeck.api.views import rows_view
from reqdeck.core.clipboard import payload_to_dict
from reqdeck.core.domain_types import TableKind
from reqdeck.schemas.clipboard import TableRowsCopy, TextImport
from reqdeck.services.handle_clipboard import ClipboardHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/clipboard", tags=["clipboard"])


@router.get("")
async def get_clipboard(handlers: ClipboardHandlers = Depends(get_clipboard_handlers)):
    payload = handlers.current()
    return {"payload": payload_to_dict(payload) if payload else None}


@router.post("/copy/{kind}")
async def copy_selected(
    kind: TableKind, handlers: ClipboardHandlers = Depends(get_clipboard_handlers),
):
    """Copy the selected rows of the displayed request's table."""
    payload = handlers.copy_selected(kind)
    return {
        "payload": payload_to_dict(payload),
        "fallback_text": handlers.session.clipboard.fallback_text,
    }


@router.post("/copy-rows")
async def copy_table_rows(
    body: TableRowsCopy, handlers: ClipboardHandlers = Depends(get_clipboard_handlers),
):
    """Copy rows of a generic table (e.g. a response rendered as a table)."""
    payload = handlers.copy_table_rows(
        [row.to_domain() for row in body.rows], body.headers, body.source,
    )
    return {
        "payload": payload_to_dict(payload),
        "fallback_text": handlers.session.clipboard.fallback_text,
    }


@router.post("/paste/{request_id}/{kind}")
async def paste(
    request_id: str, kind: TableKind,
    handlers: ClipboardHandlers = Depends(get_clipboard_handlers),
):
    inserted = await handlers.paste(request_id, kind)
    rows = handlers.session.workspace.require_request(request_id).table(kind)
    return {"inserted": rows_view(inserted), "rows": rows_view(rows)}


@router.post("/paste-rows")
async def paste_as_table_rows(handlers: ClipboardHandlers = Depends(get_clipboard_handlers)):
    """Clipboard content shaped for a generic table (e.g. a response table view)."""
    rows, headers = handlers.paste_as_table_rows()
    return {
        "headers": headers,
        "rows": [{"row_index": r.row_index, "columns": r.columns} for r in rows],
    }


@router.delete("")
async def clear_clipboard(handlers: ClipboardHandlers = Depends(get_clipboard_handlers)):
    handlers.clear()
    return {"payload": None}


@router.post("/import")
async def import_text(
    body: TextImport, handlers: ClipboardHandlers = Depends(get_clipboard_handlers),
):
    """Adopt OS clipboard text copied by another instance."""
    payload = handlers.import_text(body.text, body.source)
    return {"payload": payload_to_dict(payload) if payload else None}

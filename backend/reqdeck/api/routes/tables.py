"""Table Routes: rows, cells, active flags and the raw-JSON editor of one request table.

Invariants:
    - {kind} is one of params / headers / body (validated by TableKind)
    - Every response carries the whole table after the operation, sentinel included
    - Cell edits are undoable; every other table mutation is not
"""

import logging

from fastapi import APIRouter, Depends, status

from reqdeck.api.dependencies import get_table_handlers
from reqdeck.api.views import row_view, rows_view
from reqdeck.core.domain_types import TableKind
from reqdeck.schemas.tables import ActiveUpdate, CellEdit, RawTableUpdate, RowCreate
from reqdeck.services.handle_tables import TableHandlers

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/requests/{request_id}/tables/{kind}", tags=["tables"],
)


def _table(handlers: TableHandlers, request_id: str, kind: TableKind) -> dict:
    request = handlers.session.workspace.require_request(request_id)
    return {"request_id": request_id, "kind": kind.value, "rows": rows_view(request.table(kind))}


@router.get("")
async def get_table(
    request_id: str, kind: TableKind,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    handlers.session.tick()
    return _table(handlers, request_id, kind)


@router.post("/rows", status_code=status.HTTP_201_CREATED)
async def create_row(
    request_id: str, kind: TableKind, body: RowCreate,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    row = await handlers.create_row(request_id, kind, body.key, body.value)
    return {"row": row_view(row), **_table(handlers, request_id, kind)}


@router.delete("/rows/{index}")
async def delete_row(
    request_id: str, kind: TableKind, index: int,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    removed = await handlers.delete_row(request_id, kind, index)
    return {
        "removed": row_view(removed) if removed is not None else None,
        **_table(handlers, request_id, kind),
    }


@router.patch("/cells")
async def edit_cell(
    request_id: str, kind: TableKind, body: CellEdit,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    row = await handlers.edit_cell(request_id, kind, body.index, body.field, body.text)
    return {"row": row_view(row), **_table(handlers, request_id, kind)}


@router.put("/rows/{index}/active")
async def set_row_active(
    request_id: str, kind: TableKind, index: int, body: ActiveUpdate,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    await handlers.set_row_active(request_id, kind, index, body.is_active)
    return _table(handlers, request_id, kind)


@router.put("/active")
async def set_all_active(
    request_id: str, kind: TableKind, body: ActiveUpdate,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    """Header checkbox: set is_active on every row."""
    await handlers.set_all_active(request_id, kind, body.is_active)
    return _table(handlers, request_id, kind)


@router.get("/raw")
async def get_raw(
    request_id: str, kind: TableKind,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    return {"request_id": request_id, "kind": kind.value, "text": handlers.raw_json(request_id, kind)}


@router.put("/raw")
async def put_raw(
    request_id: str, kind: TableKind, body: RawTableUpdate,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    """Rebuild the table from raw JSON; malformed JSON is rejected with the table unchanged."""
    await handlers.replace_from_raw(request_id, kind, body.text)
    return _table(handlers, request_id, kind)

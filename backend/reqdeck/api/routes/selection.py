"""Selection Routes: row selection of the displayed request's tables."""

import logging

from fastapi import APIRouter, Depends

from reqdeck.api.dependencies import get_table_handlers
from reqdeck.api.views import selection_view
from reqdeck.core.domain_types import TableKind
from reqdeck.schemas.tables import SelectionToggle
from reqdeck.services.handle_tables import TableHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/selection", tags=["selection"])


@router.get("")
async def get_selection(handlers: TableHandlers = Depends(get_table_handlers)):
    handlers.session.tick()
    return selection_view(handlers.session)


@router.post("/{kind}/toggle")
async def toggle_row(
    kind: TableKind, body: SelectionToggle,
    handlers: TableHandlers = Depends(get_table_handlers),
):
    handlers.toggle_selected(kind, body.index)
    return selection_view(handlers.session)


@router.post("/{kind}/toggle-all")
async def toggle_all(
    kind: TableKind, handlers: TableHandlers = Depends(get_table_handlers),
):
    handlers.toggle_select_all(kind)
    return selection_view(handlers.session)


@router.delete("")
async def clear_selection(handlers: TableHandlers = Depends(get_table_handlers)):
    handlers.clear_selection()
    return selection_view(handlers.session)

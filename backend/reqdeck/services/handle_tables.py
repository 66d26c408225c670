"""Table Handlers: row CRUD, cell edits, active flags, raw-JSON editor and row selection.

Invariants:
    - Row operations address a request by id; selection always refers to the displayed request
    - Every table mutation is followed by session.save()
    - Only edit_cell feeds the undo stack
"""

import logging

from reqdeck.core.domain_types import RowField, TableKind
from reqdeck.core.raw_tables import table_to_json
from reqdeck.core.request_models import Request, Row
from reqdeck.core.selection import TableSelection
from reqdeck.core import table_edits
from reqdeck.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


class TableHandlers:
    """Editing of one request's params, headers and body tables."""

    def __init__(self, session: EditorSession):
        self.session = session

    def _request(self, request_id: str) -> Request:
        return self.session.workspace.require_request(request_id)

    # --- rows ---

    async def create_row(
        self, request_id: str, kind: TableKind, key: str = "", value: str = "",
    ) -> Row:
        with self.session.operation("create_row"):
            row = table_edits.create_row(self._request(request_id), kind, key, value)
            await self.session.save()
            return row

    async def delete_row(self, request_id: str, kind: TableKind, index: int) -> Row | None:
        with self.session.operation("delete_row"):
            removed = table_edits.delete_row(self._request(request_id), kind, index)
            if removed is not None:
                self.session.selection.of(kind).clear()
                await self.session.save()
            return removed

    async def edit_cell(
        self, request_id: str, kind: TableKind, index: int, field: RowField, text: str,
    ) -> Row:
        with self.session.operation("edit_cell"):
            row = table_edits.edit_cell(
                self._request(request_id), kind, index, field, text,
                self.session.undo_stack,
            )
            await self.session.save()
            return row

    async def set_row_active(
        self, request_id: str, kind: TableKind, index: int, is_active: bool,
    ) -> None:
        with self.session.operation("set_row_active"):
            table_edits.set_row_active(self._request(request_id), kind, index, is_active)
            await self.session.save()

    async def set_all_active(self, request_id: str, kind: TableKind, is_active: bool) -> None:
        with self.session.operation("set_all_active"):
            table_edits.set_all_active(self._request(request_id), kind, is_active)
            await self.session.save()

    # --- raw JSON editor ---

    def raw_json(self, request_id: str, kind: TableKind) -> str:
        with self.session.operation("raw_json"):
            request = self._request(request_id)
            return table_to_json(request.table(kind), kind)

    async def replace_from_raw(self, request_id: str, kind: TableKind, text: str) -> list[Row]:
        with self.session.operation("replace_from_raw"):
            rows = table_edits.replace_from_raw(self._request(request_id), kind, text)
            self.session.selection.of(kind).clear()
            logger.info(
                f"Rebuilt {kind.value} from raw JSON",
                extra={"request_id": request_id, "table_kind": kind.value, "row_count": len(rows) - 1},
            )
            await self.session.save()
            return rows

    # --- selection (displayed request) ---

    def toggle_selected(self, kind: TableKind, index: int) -> TableSelection:
        with self.session.operation("toggle_selected"):
            selection = self.session.selection.of(kind)
            selection.toggle(index)
            return selection

    def toggle_select_all(self, kind: TableKind) -> TableSelection:
        with self.session.operation("toggle_select_all"):
            request = self.session.workspace.require_active_request()
            selection = self.session.selection.of(kind)
            selection.toggle_all(request.table(kind))
            return selection

    def clear_selection(self) -> None:
        with self.session.operation("clear_selection"):
            self.session.selection.clear()

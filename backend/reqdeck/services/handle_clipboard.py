"""Clipboard Handlers: copy from tables, paste into tables, clear and import.

Invariants:
    - Copy of an empty selection raises NothingSelectedError (info) and leaves the payload alone
    - Paste raises EmptyClipboardError (info) when nothing was copied
    - Either payload variant pastes into a generic table; key/value items project to Key/Value columns
    - A failed paste leaves the destination table untouched (conversion runs on a scratch list)
    - Successful copies and pastes notify a success message with the item count
"""

import logging
from typing import Sequence

from reqdeck.core.clipboard import (
    ClipboardPayload, PasteTarget, TableRowData, paste_rows, payload_as_table_rows,
)
from reqdeck.core.domain_types import NotificationSeverity, TableKind
from reqdeck.core.errors import EmptyClipboardError, NothingSelectedError
from reqdeck.core.request_models import Row
from reqdeck.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


class ClipboardHandlers:
    """Copy/paste between tables, requests and app instances."""

    def __init__(self, session: EditorSession):
        self.session = session

    def _success(self, message: str) -> None:
        self.session.notifier.notify(NotificationSeverity.SUCCESS, message)

    # --- copy ---

    def copy_selected(self, kind: TableKind) -> ClipboardPayload:
        """Copy the selected rows of the displayed request's table."""
        with self.session.operation("copy_selected"):
            request = self.session.workspace.require_active_request()
            items = self.session.selection.of(kind).selected_rows(request.table(kind))
            if not items:
                raise NothingSelectedError("items")
            payload = self.session.clipboard.copy_key_value_pairs(items, f"{kind.value}-table")
            self._success(f"Copied {len(items)} item(s) to clipboard")
            return payload

    def copy_table_rows(
        self, rows: Sequence[TableRowData], headers: Sequence[str], source: str,
    ) -> ClipboardPayload:
        """Copy rows of a generic (read-only) table such as a parsed response."""
        with self.session.operation("copy_table_rows"):
            if not rows:
                raise NothingSelectedError("rows")
            payload = self.session.clipboard.copy_table_rows(rows, headers, source)
            self._success(f"Copied {len(rows)} row(s) to clipboard")
            return payload

    # --- paste ---

    async def paste(self, request_id: str, kind: TableKind) -> list[Row]:
        with self.session.operation("paste"):
            request = self.session.workspace.require_request(request_id)
            inserted = paste_rows(self.session.clipboard.get(), request.table(kind), kind)
            logger.info(
                f"Pasted {len(inserted)} rows",
                extra={"request_id": request_id, "table_kind": kind.value, "row_count": len(inserted)},
            )
            await self.session.save()
            self._success(f"Pasted {len(inserted)} item(s) from clipboard")
            return inserted

    def paste_as_table_rows(self) -> tuple[list[TableRowData], list[str]]:
        """Project the payload for a generic table; the engine keeps no such table."""
        with self.session.operation("paste_as_table_rows"):
            clipboard = self.session.clipboard
            if not clipboard.is_compatible_with(PasteTarget.TABLE):
                raise EmptyClipboardError()
            rows, headers = payload_as_table_rows(clipboard.get())
            self._success(f"Pasted {len(rows)} row(s) from clipboard")
            return rows, headers

    # --- buffer ---

    def current(self) -> ClipboardPayload | None:
        with self.session.operation("clipboard_current"):
            return self.session.clipboard.get()

    def clear(self) -> None:
        with self.session.operation("clipboard_clear"):
            self.session.clipboard.clear()

    def import_text(self, text: str, source: str = "system") -> ClipboardPayload | None:
        """Adopt text copied by another instance (JSON rows or TSV)."""
        with self.session.operation("clipboard_import"):
            return self.session.clipboard.load_text(text, source)

"""Gesture Handlers: row drag start/end, the four drop targets and hover previews.

Invariants:
    - Drops are honoured only while the gesture accepts them (dragging, not yet dropped);
      a drop after cleanup is ignored
    - end_drag clears the selection and defers cleanup by drag_cleanup_delay_ms, so a drop
      reported after the pointer release still sees the payload and hover targets
    - Hover previews are deferred by hover_preview_delay_ms and re-check that their request
      still exists before switching to it
    - Drops never push undo entries; every successful drop ends with session.save()

Design Decisions:
    - Drop inside a table moves rows (reorder or cross-table move with coercion); drops on a
      sidebar request, a tab or a collection copy them, leaving the source untouched
    - Sidebar request drops run without coercion: body <-> params/headers is rejected there
    - Each deferred cleanup carries the generation of its gesture, so a cleanup scheduled by
      an old gesture can't end a newer one
"""

import logging

from reqdeck.core.domain_types import HttpMethod, TableKind
from reqdeck.core.drag_gesture import DragPayload
from reqdeck.core.reorder import (
    append_rows, check_drop_compatible, move_across, move_item, move_selection,
)
from reqdeck.core.request_models import Request, Row
from reqdeck.core.workspace import DROP_REQUEST_HEADERS
from reqdeck.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


class GestureHandlers:
    """Pointer-driven row moves."""

    def __init__(self, session: EditorSession):
        self.session = session

    @property
    def gesture(self):
        return self.session.gesture

    # --- gesture lifecycle ---

    def start_drag(self, kind: TableKind, index: int) -> DragPayload | None:
        """Snapshot the row (or the selection) under the pointer."""
        with self.session.operation("start_drag"):
            request = self.session.workspace.require_active_request()
            rows = request.table(kind)
            selected = self.session.selection.of(kind).selected_indices(rows)
            payload = self.gesture.start(rows, index, selected, kind, request.id)
            if payload is not None:
                logger.debug(
                    f"Drag started with {len(payload.items)} rows",
                    extra={"table_kind": kind.value, "row_count": len(payload.items)},
                )
            return payload

    def end_drag(self) -> None:
        """Pointer released. Cleanup runs later, after any pending drop."""
        with self.session.operation("end_drag"):
            if not self.gesture.is_dragging and self.gesture.payload is None:
                return
            self.gesture.end()
            self.session.selection.clear()
            generation = self.gesture.generation
            self.session.deferred.schedule(
                self.session.drag_cleanup_delay_ms,
                lambda: self._cleanup(generation),
                "drag-cleanup",
            )

    def cancel_drag(self) -> None:
        with self.session.operation("cancel_drag"):
            self.gesture.cancel()
            self.session.selection.clear()

    def _cleanup(self, generation: int) -> None:
        outcome = self.gesture.cleanup(generation)
        if outcome is not None:
            logger.info(f"Drag gesture finished: {outcome.value}", extra={"gesture": generation})

    def _payload(self) -> DragPayload | None:
        if not self.gesture.accepts_drop:
            logger.debug("Drop ignored: no drag in progress")
            return None
        return self.gesture.payload

    async def _finish_drop(self, request: Request, kind: TableKind) -> None:
        self.gesture.mark_dropped()
        self.session.workspace.activate(request.id)
        self.session.workspace.select_tab(kind)
        self.session.selection.clear()
        await self.session.save()

    # --- drop targets ---

    async def drop_in_table(self, kind: TableKind, drop_index: int) -> list[Row]:
        """Drop on a row position of the displayed table. Returns that table."""
        with self.session.operation("drop_in_table"):
            payload = self._payload()
            if payload is None:
                return []
            dest = self.session.workspace.require_active_request()
            dest_rows = dest.table(kind)
            source = payload.source
            source_request = self.session.workspace.find_request(source.request_id)

            if source_request is dest and source.table_kind is kind:
                if payload.is_multi:
                    move_selection(dest_rows, source.indices, drop_index, kind)
                else:
                    move_item(dest_rows, source.index, drop_index, kind)
            else:
                source_rows = (
                    source_request.table(source.table_kind) if source_request is not None else []
                )
                move_across(
                    source_rows, dest_rows, payload.items, drop_index,
                    source.table_kind, kind,
                )
            await self._finish_drop(dest, kind)
            return dest_rows

    async def drop_on_request(
        self, request_id: str, kind: TableKind | None = None,
    ) -> list[Row]:
        """Drop on a sidebar request: copy the rows into its table (same kind by default)."""
        with self.session.operation("drop_on_request"):
            payload = self._payload()
            if payload is None:
                return []
            target = self.session.workspace.require_request(request_id)
            source_kind = payload.source.table_kind
            dest_kind = kind or source_kind
            check_drop_compatible(source_kind, dest_kind, coercion_supported=False)
            inserted = append_rows(target.table(dest_kind), payload.items, source_kind, dest_kind)
            await self._finish_drop(target, dest_kind)
            return inserted

    async def drop_on_tab(self, kind: TableKind) -> list[Row]:
        """Drop on a tab header: copy the rows into that table of the displayed request."""
        with self.session.operation("drop_on_tab"):
            payload = self._payload()
            if payload is None:
                return []
            target = self.session.workspace.require_active_request()
            inserted = append_rows(
                target.table(kind), payload.items, payload.source.table_kind, kind,
            )
            await self._finish_drop(target, kind)
            return inserted

    async def drop_on_collection(self, collection_id: str) -> Request | None:
        """Drop on a collection: a new POST request holding the dragged rows."""
        with self.session.operation("drop_on_collection"):
            payload = self._payload()
            if payload is None:
                return None
            kind = payload.source.table_kind
            request = self.session.workspace.create_request(
                collection_id, method=HttpMethod.POST, headers=DROP_REQUEST_HEADERS,
            )
            append_rows(request.table(kind), payload.items, kind, kind)
            await self._finish_drop(request, kind)
            return request

    # --- hover ---

    def hover_request(self, request_id: str) -> None:
        with self.session.operation("hover_request"):
            self.gesture.hovered_request_id = request_id
            if not self.gesture.is_dragging:
                return
            self.gesture.target_request_id = request_id
            self.session.deferred.schedule(
                self.session.hover_preview_delay_ms,
                lambda: self._preview_request(request_id),
                "request-preview",
            )

    def _preview_request(self, request_id: str) -> None:
        if self.session.workspace.find_request(request_id) is None:
            logger.debug(f"Preview skipped, request {request_id} is gone")
            return
        self.session.workspace.activate(request_id)

    def leave_request(self, request_id: str) -> None:
        with self.session.operation("leave_request"):
            if self.gesture.hovered_request_id == request_id:
                self.gesture.hovered_request_id = None

    def hover_collection(self, collection_id: str) -> None:
        with self.session.operation("hover_collection"):
            if self.gesture.is_dragging:
                self.gesture.hovered_collection_id = collection_id

    def leave_collection(self, collection_id: str) -> None:
        with self.session.operation("leave_collection"):
            if self.gesture.hovered_collection_id == collection_id:
                self.gesture.hovered_collection_id = None

    def hover_tab(self, kind: TableKind) -> None:
        with self.session.operation("hover_tab"):
            if not self.gesture.is_dragging:
                return
            self.gesture.target_tab = kind
            self.session.deferred.schedule(
                self.session.hover_preview_delay_ms,
                lambda: self.session.workspace.select_tab(kind),
                "tab-preview",
            )

"""Editor Session: engine root owning the workspace and every piece of editing context.

Invariants:
    - One Workspace, Clipboard, UndoStack, DragGesture, SelectionSet and DeferredQueue per
      session; nothing is module-global, tests build a fresh session each
    - operation() drains due deferred callbacks before the handler body runs
    - A ReqDeckError leaving operation() has already been sent to the notifier
    - save() failures are notified and logged; in-memory state is never rolled back
    - is_saved() compares against the document of the last successful load or save

Design Decisions:
    - Boundary services injected through the constructor (Protocols), so tests pass fakes
    - Timings and the history capacity are constructor arguments; main.py feeds them
      from Settings
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from reqdeck.core.boundary_protocols import (
    ClipboardBridge, ConfirmationPrompt, NotificationService, PersistenceService,
)
from reqdeck.core.clipboard import Clipboard
from reqdeck.core.deferred_queue import DeferredQueue, monotonic_ms
from reqdeck.core.domain_types import NotificationSeverity, RESPONSE_HISTORY_CAPACITY
from reqdeck.core.drag_gesture import DragGesture
from reqdeck.core.errors import ErrorSeverity, PersistenceFailure, ReqDeckError
from reqdeck.core.selection import SelectionSet
from reqdeck.core.undo import UndoEntry, UndoStack
from reqdeck.core.workspace import Workspace, apply_undo
from reqdeck.core.workspace_snapshot import collections_to_document, request_to_dict

logger = logging.getLogger(__name__)

_NOTIFY_SEVERITY = {
    ErrorSeverity.INFO: NotificationSeverity.INFO,
    ErrorSeverity.WARNING: NotificationSeverity.WARNING,
    ErrorSeverity.ERROR: NotificationSeverity.ERROR,
    ErrorSeverity.CRITICAL: NotificationSeverity.ERROR,
}


class DenyConfirmation:
    """Default prompt when none is injected: destructive deletes are refused."""

    async def confirm(self, message: str, title: str) -> bool:
        return False


class EditorSession:
    """Shared editing state plus the boundary services it talks to."""

    def __init__(
        self,
        persistence: PersistenceService,
        notifier: NotificationService,
        bridge: ClipboardBridge | None = None,
        confirmation: ConfirmationPrompt | None = None,
        response_history_capacity: int = RESPONSE_HISTORY_CAPACITY,
        drag_cleanup_delay_ms: int = 100,
        hover_preview_delay_ms: int = 200,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self.persistence = persistence
        self.notifier = notifier
        self.confirmation: ConfirmationPrompt = confirmation or DenyConfirmation()
        self.response_history_capacity = response_history_capacity
        self.drag_cleanup_delay_ms = drag_cleanup_delay_ms
        self.hover_preview_delay_ms = hover_preview_delay_ms

        self.workspace = Workspace()
        self.clipboard = Clipboard(bridge)
        self.undo_stack = UndoStack()
        self.gesture = DragGesture()
        self.selection = SelectionSet()
        self.deferred = DeferredQueue(clock)
        self._saved_document: list[dict] = []

    # --- lifecycle ---

    async def load(self) -> None:
        """Replace the workspace with the stored document."""
        try:
            collections = await self.persistence.load()
        except PersistenceFailure as e:
            self.report(e)
            return
        self.workspace = Workspace(collections=collections)
        self.undo_stack.clear()
        self.selection.clear()
        self._saved_document = collections_to_document(collections)
        logger.info(f"Session loaded with {len(collections)} collections")

    async def save(self) -> bool:
        """Persist the full document. False (after notifying) when storage failed."""
        document = collections_to_document(self.workspace.collections)
        try:
            await self.persistence.save(self.workspace.collections)
        except PersistenceFailure as e:
            self.report(e)
            return False
        self._saved_document = document
        return True

    def is_saved(self, request_id: str | None = None) -> bool:
        """True when the request (default: the whole workspace) matches the last save."""
        if request_id is None:
            return collections_to_document(self.workspace.collections) == self._saved_document
        request = self.workspace.find_request(request_id)
        if request is None:
            return True
        stored = next(
            (
                r for c in self._saved_document for r in c.get("requests", [])
                if r.get("id") == request_id
            ),
            None,
        )
        return stored == request_to_dict(request)

    # --- event plumbing ---

    def tick(self) -> int:
        """Run deferred callbacks that have come due."""
        return self.deferred.run_due()

    def report(self, error: ReqDeckError) -> None:
        logger.warning(
            f"{error.code}: {error.message}",
            extra={
                "error_code": error.code,
                "request_id": error.context.request_id,
                "table_kind": error.context.table_kind,
            },
        )
        self.notifier.notify(_NOTIFY_SEVERITY[error.severity], error.message)

    @contextmanager
    def operation(self, name: str) -> Iterator["EditorSession"]:
        """Wrap one input event: drain due callbacks, notify errors on the way out."""
        self.tick()
        try:
            yield self
        except ReqDeckError as e:
            logger.debug(f"Operation {name} rejected", extra={"operation": name})
            self.report(e)
            raise

    # --- undo ---

    async def undo(self) -> UndoEntry | None:
        """Pop one entry and write its old value back. Returns the entry, if any."""
        with self.operation("undo"):
            entry = self.undo_stack.pop()
            if entry is None:
                return None
            if apply_undo(self.workspace, entry):
                await self.save()
            else:
                logger.info(f"Undo target gone, dropped {entry.kind.value} entry")
            return entry

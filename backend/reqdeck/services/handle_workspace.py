"""Workspace Handlers: collections, requests, titles, urls and the response history.

Invariants:
    - Deletes ask the ConfirmationPrompt first; a False answer changes nothing
    - Activating a request clears the row selection (it belongs to the displayed tables)
    - Every mutation that survives a reload ends with session.save()
    - Recording a response switches the editor to the response tab
"""

import logging

from reqdeck.core.boundary_protocols import ConfirmationPrompt
from reqdeck.core.domain_types import (
    HttpMethod, NotificationSeverity, ResponseStatus, TableKind,
)
from reqdeck.core.request_models import Collection, Request, ResponseEntry
from reqdeck.core.table_edits import parse_url
from reqdeck.core.workspace import Workspace
from reqdeck.services.editor_session import EditorSession

logger = logging.getLogger(__name__)


class WorkspaceHandlers:
    """Sidebar and request-header operations."""

    def __init__(self, session: EditorSession):
        self.session = session

    @property
    def workspace(self) -> Workspace:
        return self.session.workspace

    # --- collections ---

    async def create_collection(self, title: str | None = None) -> Collection:
        with self.session.operation("create_collection"):
            collection = self.workspace.create_collection(title)
            await self.session.save()
            return collection

    async def remove_collection(
        self, collection_id: str, prompt: ConfirmationPrompt | None = None,
    ) -> bool:
        with self.session.operation("remove_collection"):
            collection = self.workspace.require_collection(collection_id)
            confirmed = await (prompt or self.session.confirmation).confirm(
                f'Are you sure you want to delete the collection "{collection.title}"? '
                "This action cannot be undone.",
                "Delete collection",
            )
            if not confirmed:
                return False
            self.workspace.remove_collection(collection_id)
            await self.session.save()
            return True

    async def rename_collection(self, collection_id: str, title: str) -> Collection:
        with self.session.operation("rename_collection"):
            collection = self.workspace.rename_collection(
                collection_id, title, self.session.undo_stack,
            )
            await self.session.save()
            return collection

    async def move_collection(self, from_index: int, to_index: int) -> list[Collection]:
        with self.session.operation("move_collection"):
            collections = self.workspace.move_collection(from_index, to_index)
            await self.session.save()
            return collections

    # --- requests ---

    async def create_request(
        self,
        collection_id: str,
        title: str | None = None,
        method: HttpMethod = HttpMethod.GET,
    ) -> Request:
        with self.session.operation("create_request"):
            request = self.workspace.create_request(collection_id, title, method)
            self.session.selection.clear()
            await self.session.save()
            return request

    async def remove_request(
        self, request_id: str, prompt: ConfirmationPrompt | None = None,
    ) -> bool:
        with self.session.operation("remove_request"):
            request = self.workspace.require_request(request_id)
            confirmed = await (prompt or self.session.confirmation).confirm(
                f'Are you sure you want to delete the request "{request.title}"? '
                "This action cannot be undone.",
                "Delete request",
            )
            if not confirmed:
                return False
            self.workspace.remove_request(request_id)
            await self.session.save()
            return True

    async def move_request(
        self, collection_id: str, from_index: int, to_index: int,
    ) -> list[Request]:
        with self.session.operation("move_request"):
            requests = self.workspace.move_request(collection_id, from_index, to_index)
            await self.session.save()
            return requests

    def activate(self, request_id: str) -> Request:
        with self.session.operation("activate"):
            request = self.workspace.activate(request_id)
            self.session.selection.clear()
            return request

    def select_tab(self, kind: TableKind | None) -> int:
        with self.session.operation("select_tab"):
            return self.workspace.select_tab(kind)

    # --- request fields ---

    async def rename_request(self, request_id: str, title: str) -> Request:
        with self.session.operation("rename_request"):
            request = self.workspace.rename_request(
                request_id, title, self.session.undo_stack,
            )
            await self.session.save()
            return request

    async def set_url(self, request_id: str, url: str) -> Request:
        with self.session.operation("set_url"):
            request = self.workspace.set_url(request_id, url, self.session.undo_stack)
            await self.session.save()
            return request

    async def set_method(self, request_id: str, method: HttpMethod) -> Request:
        with self.session.operation("set_method"):
            request = self.workspace.set_method(request_id, method)
            await self.session.save()
            return request

    async def parse_url(self, request_id: str) -> bool:
        """Move the url's query string into params. False when there was none."""
        with self.session.operation("parse_url"):
            request = self.workspace.require_request(request_id)
            typed = request.url
            extracted = parse_url(request, self.session.undo_stack)
            if extracted:
                logger.info(
                    f"Extracted {len(request.params) - 1} params from url",
                    extra={"request_id": request.id, "row_count": len(request.params) - 1},
                )
            if extracted or request.url != typed:
                await self.session.save()
            return extracted

    # --- response history ---

    async def record_response(
        self, request_id: str, data: str, status: ResponseStatus,
    ) -> ResponseEntry:
        with self.session.operation("record_response"):
            request = self.workspace.require_request(request_id)
            entry = request.record_response(
                data, status, capacity=self.session.response_history_capacity,
            )
            self.workspace.select_tab(None)
            await self.session.save()
            return entry

    async def clear_responses(self, request_id: str) -> None:
        with self.session.operation("clear_responses"):
            request = self.workspace.require_request(request_id)
            request.clear_responses()
            await self.session.save()
            self.session.notifier.notify(
                NotificationSeverity.SUCCESS, "Response history cleared",
            )

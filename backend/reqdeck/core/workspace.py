"""Workspace: the ordered collections plus which request and tab the editor displays.

Invariants:
    - active_request_id, when set, names a request inside active_collection_id
    - Deleting the displayed request (or its collection) clears the active pointers
    - Title and url edits push one UndoEntry before the new value is committed
    - apply_undo re-resolves its target by id; a stale address changes nothing

Design Decisions:
    - Mutable dataclass with methods, like the other engine state holders: the session owns
      exactly one Workspace and mutates it in place
    - New requests get the default header set; requests created by a drop on a collection
      get the short POST header set
    - Lookups that the HTTP surface needs raise ResourceNotFoundError (require_*); the
      engine's own lookups return None (find_*)
"""

import logging
from dataclasses import dataclass, field

from reqdeck.core.domain_types import (
    RESPONSE_TAB_INDEX, TAB_INDEX, HttpMethod, TableKind,
)
from reqdeck.core.errors import NoActiveRequestError, ResourceNotFoundError
from reqdeck.core.reorder import move_in_list
from reqdeck.core.request_models import Collection, Record, Request
from reqdeck.core.table_edits import restore_cell
from reqdeck.core.table_invariants import normalize_table
from reqdeck.core.undo import UndoEntry, UndoKind, UndoStack

logger = logging.getLogger(__name__)


# ─── Defaults ────────────────────────────────────────────────────

DEFAULT_HEADERS: list[tuple[str, str, bool]] = [
    ("Accept", "*/*", True),
    ("Accept-Encoding", "utf-8", False),
    ("Content-Type", "application/json", True),
    ("Connection", "keep-alive", True),
    ("User-Agent", "PostmanRuntime/7.43.0", True),
]

DROP_REQUEST_HEADERS: list[tuple[str, str, bool]] = [
    ("Accept", "*/*", True),
    ("Content-Type", "application/json", True),
]


def new_request(
    title: str,
    method: HttpMethod = HttpMethod.GET,
    headers: list[tuple[str, str, bool]] = DEFAULT_HEADERS,
) -> Request:
    """A request with normalized tables and the given header set."""
    request = Request(title=title, method=method)
    request.headers.extend(
        Record(key=key, value=value, is_active=active) for key, value, active in headers
    )
    for kind in TableKind:
        normalize_table(request.table(kind), kind)
    return request


# ─── Workspace ───────────────────────────────────────────────────

@dataclass
class Workspace:
    """Collections in display order and the editor's current view."""

    collections: list[Collection] = field(default_factory=list)
    active_collection_id: str | None = None
    active_request_id: str | None = None
    selected_tab: int = TAB_INDEX[TableKind.PARAMS]

    # --- lookups ---

    def find_collection(self, collection_id: str) -> Collection | None:
        return next((c for c in self.collections if c.id == collection_id), None)

    def find_request(self, request_id: str | None) -> Request | None:
        if request_id is None:
            return None
        for collection in self.collections:
            request = collection.find_request(request_id)
            if request is not None:
                return request
        return None

    def collection_of(self, request_id: str) -> Collection | None:
        return next(
            (c for c in self.collections if c.find_request(request_id) is not None), None,
        )

    def require_collection(self, collection_id: str) -> Collection:
        collection = self.find_collection(collection_id)
        if collection is None:
            raise ResourceNotFoundError("Collection", collection_id)
        return collection

    def require_request(self, request_id: str) -> Request:
        request = self.find_request(request_id)
        if request is None:
            raise ResourceNotFoundError("Request", request_id)
        return request

    @property
    def active_request(self) -> Request | None:
        return self.find_request(self.active_request_id)

    def require_active_request(self) -> Request:
        request = self.active_request
        if request is None:
            raise NoActiveRequestError()
        return request

    # --- view ---

    def activate(self, request_id: str) -> Request:
        """Display a request. Keeps the selected tab."""
        collection = self.collection_of(request_id)
        if collection is None:
            raise ResourceNotFoundError("Request", request_id)
        self.active_collection_id = collection.id
        self.active_request_id = request_id
        return self.require_request(request_id)

    def select_tab(self, kind: TableKind | None) -> int:
        """Switch the editor tab; None selects the response tab."""
        self.selected_tab = RESPONSE_TAB_INDEX if kind is None else TAB_INDEX[kind]
        return self.selected_tab

    def _forget_active(self, request_ids: set[str]) -> None:
        if self.active_request_id in request_ids:
            self.active_request_id = None
            self.active_collection_id = None

    # --- collections ---

    def create_collection(self, title: str | None = None) -> Collection:
        collection = Collection(title=title or f"New collection {len(self.collections) + 1}")
        self.collections.append(collection)
        logger.info(
            f"Collection created: {collection.title}",
            extra={"collection_id": collection.id},
        )
        return collection

    def remove_collection(self, collection_id: str) -> Collection:
        collection = self.require_collection(collection_id)
        self.collections.remove(collection)
        self._forget_active({r.id for r in collection.requests})
        if self.active_collection_id == collection_id:
            self.active_collection_id = None
        return collection

    def rename_collection(self, collection_id: str, title: str, undo: UndoStack) -> Collection:
        collection = self.require_collection(collection_id)
        undo.push(UndoEntry.collection_title_change(collection.id, collection.title, title))
        collection.title = title
        return collection

    def move_collection(self, from_index: int, to_index: int) -> list[Collection]:
        return move_in_list(self.collections, from_index, to_index)

    # --- requests ---

    def create_request(
        self,
        collection_id: str,
        title: str | None = None,
        method: HttpMethod = HttpMethod.GET,
        headers: list[tuple[str, str, bool]] = DEFAULT_HEADERS,
    ) -> Request:
        """Append a request to a collection and display it."""
        collection = self.require_collection(collection_id)
        request = new_request(
            title or f"New request {len(collection.requests) + 1}", method, headers,
        )
        collection.requests.append(request)
        self.activate(request.id)
        logger.info(
            f"Request created: {request.title}",
            extra={"collection_id": collection.id, "request_id": request.id},
        )
        return request

    def remove_request(self, request_id: str) -> Request:
        collection = self.collection_of(request_id)
        if collection is None:
            raise ResourceNotFoundError("Request", request_id)
        request = self.require_request(request_id)
        collection.requests.remove(request)
        self._forget_active({request_id})
        return request

    def rename_request(self, request_id: str, title: str, undo: UndoStack) -> Request:
        request = self.require_request(request_id)
        undo.push(UndoEntry.request_title_change(request.id, request.title, title))
        request.title = title
        return request

    def set_url(self, request_id: str, url: str, undo: UndoStack) -> Request:
        request = self.require_request(request_id)
        undo.push(UndoEntry.url_change(request.id, request.url, url))
        request.url = url
        return request

    def set_method(self, request_id: str, method: HttpMethod) -> Request:
        request = self.require_request(request_id)
        request.method = method
        return request

    def move_request(self, collection_id: str, from_index: int, to_index: int) -> list[Request]:
        collection = self.require_collection(collection_id)
        return move_in_list(collection.requests, from_index, to_index)


# ─── Undo application ────────────────────────────────────────────

def apply_undo(workspace: Workspace, entry: UndoEntry) -> bool:
    """Write an entry's old value back. False when its target no longer exists."""
    if entry.kind is UndoKind.COLLECTION_TITLE:
        collection = workspace.find_collection(entry.collection_id or "")
        if collection is None:
            return False
        collection.title = entry.old_value
        return True

    request = workspace.find_request(entry.request_id)
    if request is None:
        return False
    if entry.kind is UndoKind.URL:
        request.url = entry.old_value
        return True
    if entry.kind is UndoKind.REQUEST_TITLE:
        request.title = entry.old_value
        return True

    kind = entry.table_kind
    if kind is None or entry.index is None or entry.field is None:
        return False
    return restore_cell(request, kind, entry.index, entry.field, entry.old_value)

"""Document Store: PersistenceService backed by one JSON row in a SQL database.

Invariants:
    - load() of an empty database returns [] (first run), never raises for a missing row
    - save() replaces the whole document; version increments by one per save
    - SQLAlchemy failures surface as PersistenceFailure (via DatabaseSessionManager)

Design Decisions:
    - Full-document writes: the editor saves after every mutation and the document is small
    - Serialization lives in core/workspace_snapshot.py; this module only moves dicts
"""

import logging
from datetime import datetime, timezone

from reqdeck.core.request_models import Collection
from reqdeck.core.workspace_snapshot import collections_from_document, collections_to_document
from reqdeck.infrastructure.database import DatabaseSessionManager
from reqdeck.models.workspace_document import DEFAULT_SLOT, WorkspaceDocument

logger = logging.getLogger(__name__)


class SqlDocumentStore:
    """Loads and saves the workspace document."""

    def __init__(self, manager: DatabaseSessionManager, slot: str = DEFAULT_SLOT):
        self._manager = manager
        self._slot = slot

    async def load(self) -> list[Collection]:
        async with self._manager.session() as db:
            row = await db.get(WorkspaceDocument, self._slot)
            if row is None:
                logger.info(f"No stored workspace in slot {self._slot}")
                return []
            collections = collections_from_document(row.document)
        logger.info(f"Workspace loaded: {len(collections)} collections (v{row.version})")
        return collections

    async def save(self, collections: list[Collection]) -> None:
        document = collections_to_document(collections)
        async with self._manager.session() as db:
            row = await db.get(WorkspaceDocument, self._slot)
            if row is None:
                row = WorkspaceDocument(id=self._slot, document=document, version=1)
                db.add(row)
            else:
                row.document = document
                row.version += 1
                row.updated_at = datetime.now(timezone.utc)
            await db.commit()
        logger.debug(f"Workspace saved (v{row.version})")

"""Service test fixtures: in-memory persistence, fake clock, seeded session, API client.

Invariants:
    - Every test gets a fresh EditorSession; nothing leaks between tests
    - The deferred queue runs on a FakeClock, tests advance time explicitly
    - get_editor_session / get_notifier overridden so routes use the test session

Design Decisions:
    - FakePersistence keeps the serialized document, so a reload goes through the
      same snapshot code as the SQL store
    - ASGITransport does not run the lifespan: the client fixture never touches a database
"""

import pytest
from httpx import ASGITransport, AsyncClient

from reqdeck.api.dependencies import get_editor_session, get_notifier
from reqdeck.core.domain_types import TableKind
from reqdeck.core.errors import PersistenceFailure
from reqdeck.core.table_edits import create_row
from reqdeck.core.workspace_snapshot import collections_from_document, collections_to_document
from reqdeck.infrastructure.notifications import LoggingNotifier
from reqdeck.main import app
from reqdeck.services.editor_session import EditorSession


class FakePersistence:
    """PersistenceService holding the document in memory."""

    def __init__(self, document: list[dict] | None = None):
        self.document = document or []
        self.saves = 0
        self.fail_saves = False
        self.fail_loads = False

    async def load(self):
        if self.fail_loads:
            raise PersistenceFailure("disk unavailable", "load")
        return collections_from_document(self.document)

    async def save(self, collections):
        if self.fail_saves:
            raise PersistenceFailure("disk full", "save")
        self.document = collections_to_document(collections)
        self.saves += 1


class FakeBridge:
    def __init__(self, result: bool = True):
        self.result = result
        self.writes: list[str] = []

    def write(self, text: str) -> bool:
        self.writes.append(text)
        return self.result


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def persistence():
    return FakePersistence()


@pytest.fixture
def notifier():
    return LoggingNotifier(buffer_size=50)


@pytest.fixture
def bridge():
    return FakeBridge()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(persistence, notifier, bridge, clock):
    return EditorSession(
        persistence=persistence,
        notifier=notifier,
        bridge=bridge,
        clock=clock,
    )


@pytest.fixture
async def seeded(session):
    """One collection with two requests; the first is displayed.

    Returns a dict with the collection and both requests. The first request
    has params a=1, b=2, c=3 and a body row n=5; the second has no rows.
    """
    workspace = session.workspace
    collection = workspace.create_collection("API")
    first = workspace.create_request(collection.id, "First")
    for key, value in (("a", "1"), ("b", "2"), ("c", "3")):
        create_row(first, TableKind.PARAMS, key, value)
    create_row(first, TableKind.BODY, "n", "5")
    second = workspace.create_request(collection.id, "Second")
    workspace.activate(first.id)
    await session.save()
    return {"collection": collection, "first": first, "second": second}


@pytest.fixture
async def client(session, notifier):
    """FastAPI test client bound to the test session."""
    app.dependency_overrides[get_editor_session] = lambda: session
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

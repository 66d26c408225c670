"""Route Dependencies: the process-wide EditorSession and per-call handler groups.

Invariants:
    - One EditorSession per app, created in the lifespan and kept on app.state
    - Handler groups are built per request around that session

Design Decisions:
    - app.state over a module-level dict: tests swap the session with dependency_overrides
"""

from fastapi import Depends, Request

from reqdeck.infrastructure.notifications import LoggingNotifier
from reqdeck.services.editor_session import EditorSession
from reqdeck.services.handle_clipboard import ClipboardHandlers
from reqdeck.services.handle_gestures import GestureHandlers
from reqdeck.services.handle_tables import TableHandlers
from reqdeck.services.handle_workspace import WorkspaceHandlers


def get_editor_session(request: Request) -> EditorSession:
    session = getattr(request.app.state, "editor", None)
    if session is None:
        raise RuntimeError("Editor session not initialized")
    return session


def get_workspace_handlers(
    session: EditorSession = Depends(get_editor_session),
) -> WorkspaceHandlers:
    return WorkspaceHandlers(session)


def get_table_handlers(
    session: EditorSession = Depends(get_editor_session),
) -> TableHandlers:
    return TableHandlers(session)


def get_gesture_handlers(
    session: EditorSession = Depends(get_editor_session),
) -> GestureHandlers:
    return GestureHandlers(session)


def get_clipboard_handlers(
    session: EditorSession = Depends(get_editor_session),
) -> ClipboardHandlers:
    return ClipboardHandlers(session)


def get_notifier(request: Request) -> LoggingNotifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        raise RuntimeError("Notifier not initialized")
    return notifier

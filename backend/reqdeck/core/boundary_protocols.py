"""Boundary Protocols: contracts between the editing core and the shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO (storage, OS clipboard, prompts, user notifications) goes through these Protocols
    - Implementations provided by the shell via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - load/save and confirm are async because implementations do IO; notify and the
      clipboard write are fire-and-forget and stay synchronous
"""

from typing import Protocol

from reqdeck.core.domain_types import NotificationSeverity
from reqdeck.core.request_models import Collection


class PersistenceService(Protocol):
    """Full-document storage of the workspace."""
    async def load(self) -> list[Collection]: ...
    async def save(self, collections: list[Collection]) -> None: ...


class NotificationService(Protocol):
    """User-facing messages. Never blocks, never alters engine state."""
    def notify(self, severity: NotificationSeverity, message: str) -> None: ...


class ClipboardBridge(Protocol):
    """Best-effort OS clipboard write. False (or an exception) means it failed."""
    def write(self, text: str) -> bool: ...


class ConfirmationPrompt(Protocol):
    """Yes/no question asked before destructive deletes."""
    async def confirm(self, message: str, title: str) -> bool: ...

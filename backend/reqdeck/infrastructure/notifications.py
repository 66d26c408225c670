"""Logging Notifier: NotificationService that logs and keeps the most recent messages.

Invariants:
    - notify() never raises and never blocks
    - recent() returns at most buffer_size entries, oldest first
    - Severity maps to a log level (error -> ERROR, warning -> WARNING, else INFO)
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from reqdeck.core.domain_types import NotificationSeverity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    NotificationSeverity.ERROR: logging.ERROR,
    NotificationSeverity.WARNING: logging.WARNING,
    NotificationSeverity.SUCCESS: logging.INFO,
    NotificationSeverity.INFO: logging.INFO,
}


@dataclass(frozen=True)
class Notification:
    severity: NotificationSeverity
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class LoggingNotifier:
    """Bounded in-memory notification feed for the API."""

    def __init__(self, buffer_size: int = 50):
        self._recent: deque[Notification] = deque(maxlen=buffer_size)

    def notify(self, severity: NotificationSeverity, message: str) -> None:
        self._recent.append(Notification(severity, message))
        logger.log(_LOG_LEVELS[severity], f"[notify:{severity.value}] {message}")

    def recent(self) -> list[Notification]:
        return list(self._recent)

    def clear(self) -> None:
        self._recent.clear()

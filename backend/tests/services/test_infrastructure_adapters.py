"""Infrastructure adapters: notifier feed, OS clipboard bridge, JSON logs, settings.

Invariants:
    - LoggingNotifier keeps only the newest buffer_size messages
    - PyperclipBridge reports failure instead of raising
    - JSONFormatter surfaces the editor's extra fields
    - sqlite:// urls get the async driver
"""

import json
import logging

import pyperclip

from reqdeck.config import Settings
from reqdeck.core.domain_types import NotificationSeverity
from reqdeck.infrastructure.confirmation import PresetConfirmation
from reqdeck.infrastructure.notifications import LoggingNotifier
from reqdeck.infrastructure.observability import JSONFormatter
from reqdeck.infrastructure.system_clipboard import PyperclipBridge


# --- notifier ---

def test_notifier_buffer_keeps_newest():
    notifier = LoggingNotifier(buffer_size=2)
    for n in range(3):
        notifier.notify(NotificationSeverity.INFO, f"m{n}")
    assert [n.message for n in notifier.recent()] == ["m1", "m2"]
    notifier.clear()
    assert notifier.recent() == []


def test_notifier_logs_at_severity_level(caplog):
    with caplog.at_level(logging.INFO, logger="reqdeck.infrastructure.notifications"):
        LoggingNotifier().notify(NotificationSeverity.ERROR, "boom")
    assert caplog.records[-1].levelno == logging.ERROR


# --- clipboard bridge ---

def test_bridge_copies_text(monkeypatch):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    assert PyperclipBridge().write("héllo") is True
    assert copied == ["héllo"]


def test_bridge_without_mechanism_returns_false(monkeypatch):
    calls = []

    def unavailable(text):
        calls.append(text)
        raise pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(pyperclip, "copy", unavailable)
    bridge = PyperclipBridge()
    assert bridge.write("x") is False
    assert bridge.write("y") is False
    assert calls == ["x"]


# --- confirmation ---

async def test_preset_confirmation():
    assert await PresetConfirmation(True).confirm("sure?", "Delete") is True
    assert await PresetConfirmation(False).confirm("sure?", "Delete") is False


# --- logging ---

def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("reqdeck.test", logging.INFO, __file__, 1, "moved", None, None)
    record.table_kind = "params"
    record.row_count = 2
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "moved"
    assert (data["table_kind"], data["row_count"]) == ("params", 2)
    assert "request_id" not in data


# --- settings ---

def test_sqlite_url_gets_async_driver():
    settings = Settings(database_url="sqlite:///./x.db")
    assert settings.database_url == "sqlite+aiosqlite:///./x.db"


def test_editor_timing_defaults(monkeypatch):
    monkeypatch.delenv("DRAG_CLEANUP_DELAY_MS", raising=False)
    monkeypatch.delenv("HOVER_PREVIEW_DELAY_MS", raising=False)
    settings = Settings(_env_file=None)
    assert (settings.drag_cleanup_delay_ms, settings.hover_preview_delay_ms) == (100, 200)

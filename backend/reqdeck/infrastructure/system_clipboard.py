"""System Clipboard: ClipboardBridge backed by pyperclip.

Invariants:
    - write() returns False (never raises) when the platform has no clipboard mechanism
    - Once pyperclip reports no mechanism the bridge stops trying for its lifetime
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


class PyperclipBridge:
    """Writes copied rows to the OS clipboard so other applications can paste them."""

    def __init__(self):
        self._available = True

    def write(self, text: str) -> bool:
        if not self._available:
            return False
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            self._available = False
            logger.info(f"System clipboard unavailable: {e}")
            return False
        return True

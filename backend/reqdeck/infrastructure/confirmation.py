"""Preset Confirmation: ConfirmationPrompt answered ahead of time by the caller.

The HTTP surface cannot open a dialog, so the client asks the user first and
passes the answer along with the delete (the ``confirm`` query flag).
"""

import logging

logger = logging.getLogger(__name__)


class PresetConfirmation:
    def __init__(self, answer: bool):
        self._answer = answer

    async def confirm(self, message: str, title: str) -> bool:
        logger.debug(f"Confirmation '{title}': {message} -> {self._answer}")
        return self._answer

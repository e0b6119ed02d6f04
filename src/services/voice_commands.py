"""Dispatch of recognised voice commands ("left", "right", "cancel") to the score service."""

import logging

from src.api.models import AdjustmentRequest
from src.core.shared_types import AdjustmentOutcome, Side
from src.services.score_service import ScoreService

logger = logging.getLogger(__name__)

SIDE_COMMANDS: dict[str, Side] = {"left": Side.LEFT, "right": Side.RIGHT}
UNDO_COMMAND = "cancel"


class VoiceCommandHandler:
    def __init__(self, service: ScoreService) -> None:
        self.service = service

    def handle_command(self, command: str) -> bool:
        """Returns False for text that is not a known command (or a point that could not be staged)."""
        normalized = command.strip().lower()

        if normalized in SIDE_COMMANDS:
            side = SIDE_COMMANDS[normalized]
            outcome = self.service.request_adjustment(AdjustmentRequest(side=side, delta=1))
            logger.info("Voice command %r: %s", normalized, outcome)
            return outcome == AdjustmentOutcome.STAGED

        if normalized == UNDO_COMMAND:
            undone = self.service.undo_last_action()
            logger.info("Voice command %r: undone=%s", normalized, undone)
            return undone

        logger.warning("Unknown voice command: %r", command)
        return False

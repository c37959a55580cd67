"""Phase tracking and win detection for a single-player match."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from battleship_offline.errors import InvalidPhaseError

from .attacks import AttackRecord, remaining_ships
from .ship import Ship

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    SELECTION = "selection"
    IN_PROGRESS = "in_progress"
    HUMAN_WIN = "human_win"
    AI_WIN = "ai_win"

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.HUMAN_WIN, GamePhase.AI_WIN)


def evaluate_phase(
    human_ships: Sequence[Ship],
    ai_ships: Sequence[Ship],
    attacks_by_human_on_ai: AttackRecord,
    attacks_by_ai_on_human: AttackRecord,
) -> GamePhase:
    """Derive the phase of a started game from its fleets and attack records.

    The AI fleet is checked first, so a step that sinks both fleets is a
    human win.
    """
    if remaining_ships(ai_ships, attacks_by_human_on_ai.hits) == 0:
        return GamePhase.HUMAN_WIN
    if remaining_ships(human_ships, attacks_by_ai_on_human.hits) == 0:
        return GamePhase.AI_WIN
    return GamePhase.IN_PROGRESS


class GameStateMachine:
    """Holds the current phase and enforces the allowed transitions."""

    def __init__(self) -> None:
        self.phase = GamePhase.SELECTION

    def require(self, *allowed: GamePhase, action: str) -> None:
        """Raise InvalidPhaseError unless the current phase is one of ``allowed``."""
        if self.phase not in allowed:
            logger.error(
                "action_rejected_invalid_phase",
                extra={"action": action, "phase": self.phase.value},
            )
            raise InvalidPhaseError(
                f"Cannot {action} while the game is in phase {self.phase.value!r}."
            )

    def start(self) -> GamePhase:
        self.require(GamePhase.SELECTION, action="start a game")
        self.phase = GamePhase.IN_PROGRESS
        logger.info("phase_changed", extra={"phase": self.phase.value})
        return self.phase

    def advance(
        self,
        human_ships: Sequence[Ship],
        ai_ships: Sequence[Ship],
        attacks_by_human_on_ai: AttackRecord,
        attacks_by_ai_on_human: AttackRecord,
    ) -> GamePhase:
        """Recompute the phase after a resolved pair of attacks."""
        self.require(GamePhase.IN_PROGRESS, action="advance the game")
        new_phase = evaluate_phase(
            human_ships, ai_ships, attacks_by_human_on_ai, attacks_by_ai_on_human
        )
        if new_phase is not self.phase:
            logger.info("phase_changed", extra={"phase": new_phase.value})
        self.phase = new_phase
        return self.phase

    def reset(self) -> GamePhase:
        self.phase = GamePhase.SELECTION
        return self.phase

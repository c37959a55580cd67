"""Exception hierarchy raised by the offline Battleship engine."""

from __future__ import annotations


class BattleshipError(Exception):
    """Base class for every error the engine raises on purpose."""


class InvalidPositionError(BattleshipError, ValueError):
    """Position text could not be parsed."""


class OutOfBoundsError(InvalidPositionError):
    """Row or column lies outside the board."""


class LayoutError(BattleshipError, ValueError):
    """A submitted fleet layout is malformed or overlapping."""


class PlacementError(BattleshipError, RuntimeError):
    """The AI fleet could not be placed within the attempt budget."""


class InvalidPhaseError(BattleshipError, RuntimeError):
    """Operation is not permitted in the current game phase."""


class TargetingError(BattleshipError, RuntimeError):
    """No untried cell remains for the AI to attack."""

"""Board geometry and position encoding for the Battleship engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from battleship_offline.errors import InvalidPositionError, OutOfBoundsError

BOARD_SIZE = 10
ROW_LABELS = "ABCDEFGHIJ"

_NEIGHBOUR_DELTAS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def in_bounds(row: int, col: int) -> bool:
    """Check whether a row/column pair lies inside the board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


@dataclass(frozen=True, order=True)
class Position:
    """Immutable board cell, compared and hashed by coordinate."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if not in_bounds(self.row, self.col):
            raise OutOfBoundsError(
                f"Position ({self.row}, {self.col}) is outside the {BOARD_SIZE}x{BOARD_SIZE} board."
            )

    @property
    def code(self) -> str:
        """Return the textual code, e.g. ``A1`` for ``(0, 0)``."""
        return f"{ROW_LABELS[self.row]}{self.col + 1}"

    def __str__(self) -> str:
        return self.code


def to_position(row: int, col: int) -> Position:
    """Build a Position from zero-based row and column indices."""
    return Position(row, col)


def from_position(text: str) -> Position:
    """Parse a code such as ``B7`` or ``j10`` into a Position."""
    if not isinstance(text, str):
        raise InvalidPositionError(f"Position must be text, got {type(text).__name__}.")
    cleaned = text.strip().upper()
    if len(cleaned) < 2:
        raise InvalidPositionError(f"Position {text!r} is too short.")

    letter, digits = cleaned[0], cleaned[1:]
    if not ("A" <= letter <= "Z"):
        raise InvalidPositionError(f"Position {text!r} must start with a row letter.")
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidPositionError(f"Position {text!r} must end with a column number.")

    row = ord(letter) - ord("A")
    col = int(digits) - 1
    return to_position(row, col)


def orthogonal_neighbors(pos: Position) -> set[Position]:
    """Return the up-to-four cells sharing an edge with ``pos``."""
    neighbours: set[Position] = set()
    for delta_row, delta_col in _NEIGHBOUR_DELTAS:
        row, col = pos.row + delta_row, pos.col + delta_col
        if in_bounds(row, col):
            neighbours.add(Position(row, col))
    return neighbours


def all_positions() -> Iterator[Position]:
    """Yield every board cell in row-major order."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            yield Position(row, col)

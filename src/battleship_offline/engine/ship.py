"""Ship domain model for the Battleship engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from battleship_offline.errors import LayoutError

from .board import Position, from_position, in_bounds


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def fits(row: int, col: int, length: int, orientation: Orientation) -> bool:
    """Check whether a ship of ``length`` starting at (row, col) stays on the board."""
    if orientation is Orientation.HORIZONTAL:
        return in_bounds(row, col) and in_bounds(row, col + length - 1)
    return in_bounds(row, col) and in_bounds(row + length - 1, col)


@dataclass(frozen=True)
class Ship:
    """A contiguous, immutable run of board cells."""

    positions: tuple[Position, ...]
    _position_set: frozenset[Position] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        positions = tuple(self.positions)
        if not positions:
            raise LayoutError("A ship needs at least one tile.")
        if len(set(positions)) != len(positions):
            raise LayoutError("Ship tiles must be distinct.")
        if _orientation_of(positions) is None and len(positions) > 1:
            raise LayoutError(
                "Ship tiles must form a straight contiguous line: "
                + ", ".join(pos.code for pos in positions)
            )
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "_position_set", frozenset(positions))

    @classmethod
    def from_start(cls, start: Position, length: int, orientation: Orientation) -> Ship:
        """Lay out ``length`` tiles from ``start`` in the given orientation."""
        if orientation is Orientation.HORIZONTAL:
            coords = [Position(start.row, start.col + offset) for offset in range(length)]
        else:
            coords = [Position(start.row + offset, start.col) for offset in range(length)]
        return cls(tuple(coords))

    @classmethod
    def from_codes(cls, codes: Iterable[str]) -> Ship:
        """Build a ship from text codes such as ``["A1", "A2"]``."""
        return cls(tuple(from_position(code) for code in codes))

    @property
    def length(self) -> int:
        """Number of tiles the ship covers."""
        return len(self.positions)

    @property
    def orientation(self) -> Orientation | None:
        """Orientation of the ship, ``None`` for a single tile."""
        return _orientation_of(self.positions)

    def occupies(self, pos: Position) -> bool:
        """Return True if ``pos`` is one of the ship's tiles."""
        return pos in self._position_set

    def overlaps(self, other: Ship) -> bool:
        """Return True if any tile is shared with another ship."""
        return bool(self._position_set & other._position_set)

    def is_sunk(self, hits: Iterable[Position]) -> bool:
        """Determine whether every tile appears in ``hits``."""
        hit_set = hits if isinstance(hits, (set, frozenset)) else set(hits)
        return self._position_set.issubset(hit_set)

    def codes(self) -> list[str]:
        """Return the ship's tiles as text codes, in order."""
        return [pos.code for pos in self.positions]


def _orientation_of(positions: Sequence[Position]) -> Orientation | None:
    if len(positions) < 2:
        return None
    ordered = sorted(positions)
    rows = {pos.row for pos in ordered}
    cols = {pos.col for pos in ordered}
    if len(rows) == 1 and [pos.col for pos in ordered] == list(
        range(ordered[0].col, ordered[0].col + len(ordered))
    ):
        return Orientation.HORIZONTAL
    if len(cols) == 1 and [pos.row for pos in ordered] == list(
        range(ordered[0].row, ordered[0].row + len(ordered))
    ):
        return Orientation.VERTICAL
    return None

"""Random, non-overlapping fleet placement for the AI side."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from battleship_offline.config import DEFAULT_PLACEMENT_ATTEMPTS
from battleship_offline.errors import PlacementError
from battleship_offline.telemetry import get_meter, get_tracer

from .board import BOARD_SIZE, Position
from .ship import Orientation, Ship, fits

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_offline.engine.placement")
meter = get_meter("battleship_offline.engine.placement")

PLACEMENT_COUNTER = meter.create_counter(
    "battleship_engine_ship_placements",
    unit="1",
    description="Ships placed by the planner, split by how the slot was found",
)

ORIENTATIONS: tuple[Orientation, ...] = tuple(Orientation)


def fleet_lengths(ship_count: int) -> list[int]:
    """Lengths assigned to an AI fleet mirroring ``ship_count`` human ships.

    Only the count is mirrored: ships get lengths 1, 2, ... ship_count.
    """
    if ship_count < 0:
        raise ValueError("Ship count cannot be negative.")
    return list(range(1, ship_count + 1))


class ShipPlacementPlanner:
    """Places ships one at a time by sampling random starts and orientations."""

    def __init__(
        self,
        rng: random.Random,
        max_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
        owner: str = "ai",
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self._rng = rng
        self.max_attempts = max_attempts
        self.owner = owner

    def plan(self, ship_count: int) -> list[Ship]:
        """Place a fleet with as many ships as the opponent fielded."""
        return self.place_fleet(fleet_lengths(ship_count))

    def place_fleet(self, lengths: Sequence[int]) -> list[Ship]:
        """Place one ship per entry of ``lengths`` on an empty board."""
        with tracer.start_as_current_span("placement.place_fleet") as span:
            span.set_attribute("fleet.size", len(lengths))
            span.set_attribute("board.owner", self.owner)
            placed: list[Ship] = []
            for length in lengths:
                if not 1 <= length <= BOARD_SIZE:
                    raise PlacementError(f"Ship length {length} cannot fit on the board.")
                placed.append(self._place_one(length, placed))
            return placed

    @staticmethod
    def can_place(candidate: Ship, placed: Sequence[Ship]) -> bool:
        """Check that ``candidate`` does not collide with any ship in ``placed``."""
        return not any(candidate.overlaps(existing) for existing in placed)

    def _place_one(self, length: int, placed: Sequence[Ship]) -> Ship:
        for attempt in range(1, self.max_attempts + 1):
            orientation = self._rng.choice(ORIENTATIONS)
            row = self._rng.randrange(BOARD_SIZE)
            col = self._rng.randrange(BOARD_SIZE)
            if not fits(row, col, length, orientation):
                continue
            candidate = Ship.from_start(Position(row, col), length, orientation)
            if self.can_place(candidate, placed):
                PLACEMENT_COUNTER.add(1, attributes={"method": "random", "owner": self.owner})
                logger.debug(
                    "random_ship_placed",
                    extra={"length": length, "attempts": attempt, "owner": self.owner},
                )
                return candidate

        logger.warning(
            "random_placement_exhausted",
            extra={"length": length, "attempts": self.max_attempts, "owner": self.owner},
        )
        candidate = self._first_fit(length, placed)
        if candidate is None:
            PLACEMENT_COUNTER.add(1, attributes={"method": "failed", "owner": self.owner})
            logger.error(
                "ship_placement_failed",
                extra={"length": length, "placed": len(placed), "owner": self.owner},
            )
            raise PlacementError(
                f"No free slot for a ship of length {length} after placing {len(placed)} ships."
            )
        PLACEMENT_COUNTER.add(1, attributes={"method": "first_fit", "owner": self.owner})
        return candidate

    def _first_fit(self, length: int, placed: Sequence[Ship]) -> Ship | None:
        """Scan row-major, horizontal before vertical, for the first open slot."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                for orientation in ORIENTATIONS:
                    if not fits(row, col, length, orientation):
                        continue
                    candidate = Ship.from_start(Position(row, col), length, orientation)
                    if self.can_place(candidate, placed):
                        return candidate
        return None

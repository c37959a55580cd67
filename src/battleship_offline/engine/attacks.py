"""Attack resolution and per-side shot bookkeeping."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Sequence

from battleship_offline.telemetry import get_meter, get_tracer

from .board import Position
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_offline.engine.attacks")
meter = get_meter("battleship_offline.engine.attacks")

SHOT_COUNTER = meter.create_counter(
    "battleship_engine_shots",
    unit="1",
    description="Attacks resolved against a fleet",
)


class ShotOutcome(Enum):
    """Result of resolving a single attack."""

    HIT = "hit"
    MISS = "miss"
    REPEAT = "repeat"


class AttackRecord:
    """Hits and misses made by one side against the other side's board.

    Both collections keep insertion order. A position lands in at most one of
    them and is never removed except by :meth:`clear`, which the session only
    calls when the whole game is discarded.
    """

    def __init__(self, owner: str = "unknown") -> None:
        self.owner = owner
        self._hits: dict[Position, None] = {}
        self._misses: dict[Position, None] = {}

    @property
    def hits(self) -> tuple[Position, ...]:
        return tuple(self._hits)

    @property
    def misses(self) -> tuple[Position, ...]:
        return tuple(self._misses)

    def tried(self) -> frozenset[Position]:
        """Every position this side has already attacked."""
        return frozenset(self._hits) | frozenset(self._misses)

    def __contains__(self, pos: object) -> bool:
        return pos in self._hits or pos in self._misses

    def __len__(self) -> int:
        return len(self._hits) + len(self._misses)

    def is_empty(self) -> bool:
        return not self._hits and not self._misses

    def clear(self) -> None:
        self._hits.clear()
        self._misses.clear()

    def _add_hit(self, pos: Position) -> None:
        self._hits[pos] = None

    def _add_miss(self, pos: Position) -> None:
        self._misses[pos] = None

    def __repr__(self) -> str:
        return (
            f"AttackRecord(owner={self.owner!r}, hits={[p.code for p in self._hits]}, "
            f"misses={[p.code for p in self._misses]})"
        )


def ship_at(ships: Iterable[Ship], pos: Position) -> Ship | None:
    """Return the ship occupying ``pos``, if any."""
    for ship in ships:
        if ship.occupies(pos):
            return ship
    return None


def resolve_attack(target: Position, ships: Sequence[Ship], record: AttackRecord) -> ShotOutcome:
    """Register an attack on ``target`` in ``record`` and return its outcome.

    Attacking an already resolved cell is a no-op that reports ``REPEAT``.
    """
    with tracer.start_as_current_span("attacks.resolve_attack") as span:
        span.set_attribute("shot.row", target.row)
        span.set_attribute("shot.col", target.col)
        span.set_attribute("attacker", record.owner)

        if target in record:
            span.set_attribute("shot.outcome", ShotOutcome.REPEAT.value)
            logger.info(
                "shot_repeat_ignored",
                extra={"position": target.code, "attacker": record.owner},
            )
            return ShotOutcome.REPEAT

        ship = ship_at(ships, target)
        if ship is not None:
            record._add_hit(target)
            outcome = ShotOutcome.HIT
        else:
            record._add_miss(target)
            outcome = ShotOutcome.MISS

        span.set_attribute("shot.outcome", outcome.value)
        SHOT_COUNTER.add(1, attributes={"outcome": outcome.value, "attacker": record.owner})
        logger.info(
            f"shot_{outcome.value}",
            extra={
                "position": target.code,
                "attacker": record.owner,
                "ship_length": ship.length if ship is not None else 0,
            },
        )
        return outcome


def remaining_ships(ships: Iterable[Ship], hits: Iterable[Position]) -> int:
    """Count ships with at least one tile not yet hit."""
    hit_set = frozenset(hits)
    return sum(1 for ship in ships if not ship.is_sunk(hit_set))


def healthy_tiles(ships: Iterable[Ship], hits: Iterable[Position]) -> set[Position]:
    """Return every ship tile that has not been hit."""
    hit_set = frozenset(hits)
    return {pos for ship in ships for pos in ship.positions if pos not in hit_set}


def sunk_tiles(ships: Iterable[Ship], hits: Iterable[Position]) -> set[Position]:
    """Return the tiles of ships that are fully sunk."""
    hit_set = frozenset(hits)
    return {pos for ship in ships if ship.is_sunk(hit_set) for pos in ship.positions}

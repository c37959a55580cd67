"""Targeting tactics for the AI opponent, one per difficulty tier."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Sequence

from battleship_offline.engine.attacks import (
    AttackRecord,
    healthy_tiles,
    sunk_tiles,
)
from battleship_offline.engine.board import (
    Position,
    all_positions,
    in_bounds,
    orthogonal_neighbors,
)
from battleship_offline.engine.ship import Ship
from battleship_offline.errors import TargetingError
from battleship_offline.telemetry import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_offline.ai.strategies")


class Difficulty(Enum):
    """AI tiers, valued by the tokens the lobby sends."""

    UNSET = "0"
    EASY = "1"
    MEDIUM = "2"
    HARD = "3"

    @classmethod
    def from_token(cls, token: Difficulty | str | int | None) -> Difficulty:
        """Map a lobby token, tier name or number to a tier; unknown values give UNSET."""
        if isinstance(token, Difficulty):
            return token
        if token is None or isinstance(token, bool):
            return cls.UNSET
        text = str(token).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        logger.warning("difficulty_token_unrecognised", extra={"token": text})
        return cls.UNSET


@dataclass(frozen=True)
class TargetingContext:
    """Everything a tactic may look at when choosing the next shot.

    ``hits`` keeps the order the shots were recorded in. ``healthy_tiles``
    reveals the opponent's surviving ship tiles and is only consulted by the
    hard tier.
    """

    hits: tuple[Position, ...]
    misses: frozenset[Position]
    sunk_tiles: frozenset[Position]
    healthy_tiles: frozenset[Position]

    @classmethod
    def from_record(cls, record: AttackRecord, defending_ships: Sequence[Ship]) -> TargetingContext:
        hits = record.hits
        return cls(
            hits=hits,
            misses=frozenset(record.misses),
            sunk_tiles=frozenset(sunk_tiles(defending_ships, hits)),
            healthy_tiles=frozenset(healthy_tiles(defending_ships, hits)),
        )

    @property
    def tried(self) -> frozenset[Position]:
        return frozenset(self.hits) | self.misses

    def untried(self) -> list[Position]:
        tried = self.tried
        return [pos for pos in all_positions() if pos not in tried]


def _pick(rng: random.Random, candidates: Iterable[Position]) -> Position:
    """Uniform choice over a sorted candidate list so seeded runs repeat."""
    ordered = sorted(candidates)
    if not ordered:
        raise TargetingError("No candidate positions to choose from.")
    return rng.choice(ordered)


class TargetingStrategy(ABC):
    """Chooses one untried position to attack."""

    name: str = "base"

    @abstractmethod
    def choose(self, context: TargetingContext, rng: random.Random) -> Position:
        """Return the next position to attack."""


class RandomTargeting(TargetingStrategy):
    """Easy tier: uniform over every untried cell."""

    name = "easy"

    def choose(self, context: TargetingContext, rng: random.Random) -> Position:
        untried = context.untried()
        if not untried:
            raise TargetingError("Every cell has already been attacked.")
        return _pick(rng, untried)


class HuntTargetTargeting(TargetingStrategy):
    """Medium tier: chase the latest hit on a ship that is still afloat.

    Follows a line of two hits straight through when the cell beyond is open,
    otherwise probes a random untried neighbour. With nothing to chase it
    falls back to the easy tier.
    """

    name = "medium"

    def __init__(self, fallback: TargetingStrategy | None = None) -> None:
        self._fallback = fallback or RandomTargeting()

    def choose(self, context: TargetingContext, rng: random.Random) -> Position:
        lead = self.latest_open_hit(context)
        if lead is None:
            return self._fallback.choose(context, rng)

        tried = context.tried
        open_neighbours = {pos for pos in orthogonal_neighbors(lead) if pos not in tried}
        if not open_neighbours:
            return self._fallback.choose(context, rng)

        adjacent = self.latest_adjacent_hit(context, lead)
        if adjacent is None or adjacent in context.sunk_tiles:
            return _pick(rng, open_neighbours)

        row = 2 * lead.row - adjacent.row
        col = 2 * lead.col - adjacent.col
        if in_bounds(row, col):
            extension = Position(row, col)
            if extension not in tried:
                return extension
        return _pick(rng, open_neighbours)

    @staticmethod
    def latest_open_hit(context: TargetingContext) -> Position | None:
        """Most recently recorded hit that belongs to a ship not yet sunk."""
        for pos in reversed(context.hits):
            if pos not in context.sunk_tiles:
                return pos
        return None

    @staticmethod
    def latest_adjacent_hit(context: TargetingContext, lead: Position) -> Position | None:
        """Most recently recorded hit sharing an edge with ``lead``."""
        neighbours = orthogonal_neighbors(lead)
        for pos in reversed(context.hits):
            if pos in neighbours:
                return pos
        return None


class OmniscientTargeting(TargetingStrategy):
    """Hard tier: fire at a surviving ship tile, read straight off the board."""

    name = "hard"

    def __init__(self, fallback: TargetingStrategy | None = None) -> None:
        self._fallback = fallback or RandomTargeting()

    def choose(self, context: TargetingContext, rng: random.Random) -> Position:
        targets = context.healthy_tiles - context.tried
        if not targets:
            return self._fallback.choose(context, rng)
        return _pick(rng, targets)


STRATEGIES: Mapping[Difficulty, TargetingStrategy] = {
    Difficulty.UNSET: RandomTargeting(),
    Difficulty.EASY: RandomTargeting(),
    Difficulty.MEDIUM: HuntTargetTargeting(),
    Difficulty.HARD: OmniscientTargeting(),
}


def strategy_for(difficulty: Difficulty) -> TargetingStrategy:
    """Return the tactic registered for ``difficulty``."""
    return STRATEGIES[difficulty]


def choose_target(
    difficulty: Difficulty,
    record: AttackRecord,
    defending_ships: Sequence[Ship],
    rng: random.Random,
) -> Position:
    """Pick the AI's next shot against ``defending_ships``."""
    strategy = strategy_for(difficulty)
    with tracer.start_as_current_span("ai.choose_target") as span:
        span.set_attribute("ai.difficulty", difficulty.name)
        span.set_attribute("ai.strategy", strategy.name)
        context = TargetingContext.from_record(record, defending_ships)
        target = strategy.choose(context, rng)
        span.set_attribute("ai.target", target.code)
        logger.debug(
            "ai_target_chosen",
            extra={"difficulty": difficulty.name, "strategy": strategy.name, "position": target.code},
        )
        return target

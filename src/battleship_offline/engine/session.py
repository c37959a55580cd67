"""Single-player game session against the AI opponent."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from battleship_offline.ai.strategies import Difficulty, choose_target
from battleship_offline.config import EngineSettings, load_settings
from battleship_offline.errors import LayoutError
from battleship_offline.telemetry import get_meter, get_tracer

from .attacks import AttackRecord, ShotOutcome, healthy_tiles, remaining_ships, resolve_attack
from .board import Position, from_position
from .placement import ShipPlacementPlanner
from .ship import Ship
from .state_machine import GamePhase, GameStateMachine

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_offline.engine.session")
meter = get_meter("battleship_offline.engine.session")

MOVE_COUNTER = meter.create_counter(
    "battleship_engine_moves",
    unit="1",
    description="Moves played in a GameSession",
)

MAX_SHIP_SLOTS = 5

ShipLayout = Union[Mapping[Any, Sequence[str]], Sequence[Sequence[str]]]


class Side(Enum):
    """The two sides of an offline match."""

    HUMAN = "p1"
    AI = "p2"


@dataclass(frozen=True)
class SideState:
    """One side's view of the match: its own shots and its own surviving tiles."""

    attack_hits: tuple[Position, ...]
    attack_misses: tuple[Position, ...]
    remaining_opponent_ships: int
    surviving_tiles: tuple[Position, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "attack_hits": [pos.code for pos in self.attack_hits],
            "attack_misses": [pos.code for pos in self.attack_misses],
            "remaining_opponent_ships": self.remaining_opponent_ships,
            "surviving_tiles": [pos.code for pos in self.surviving_tiles],
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session as seen by ``viewer``."""

    phase: GamePhase
    active_turn: Side
    difficulty: Difficulty
    viewer: Side
    state: SideState | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "active_turn": self.active_turn.value,
            "difficulty": self.difficulty.value,
            "viewer": self.viewer.value,
            "state": self.state.to_dict() if self.state is not None else None,
        }


@dataclass(frozen=True)
class MoveReport:
    """Outcome of one ``make_move`` call: the human shot and the AI reply."""

    human_target: Position
    human_outcome: ShotOutcome
    ai_target: Position
    ai_outcome: ShotOutcome
    phase: GamePhase


def parse_layout(layout: ShipLayout) -> list[Ship]:
    """Turn a slot layout into validated ships.

    ``layout`` maps slot ids to lists of position codes (or is a plain list
    of such lists). Empty slots are dropped; at most ``MAX_SHIP_SLOTS`` may
    be filled and ships may not share tiles.
    """
    if isinstance(layout, Mapping):
        slots = [layout[key] for key in sorted(layout, key=str)]
    elif isinstance(layout, (str, bytes)):
        raise LayoutError("Layout must be a collection of ship slots, not text.")
    else:
        slots = list(layout)

    filled = [slot for slot in slots if slot]
    if not filled:
        raise LayoutError("Layout must contain at least one ship.")
    if len(filled) > MAX_SHIP_SLOTS:
        raise LayoutError(f"Layout has {len(filled)} ships; at most {MAX_SHIP_SLOTS} are allowed.")

    ships: list[Ship] = []
    for slot in filled:
        if isinstance(slot, (str, bytes)) or not isinstance(slot, Sequence):
            raise LayoutError(f"Ship slot {slot!r} must be a list of position codes.")
        ship = Ship.from_codes(slot)
        for existing in ships:
            if ship.overlaps(existing):
                raise LayoutError(
                    f"Ship {ship.codes()} overlaps ship {existing.codes()}."
                )
        ships.append(ship)
    return ships


class GameSession:
    """Offline match between the human player and the AI.

    The session owns both fleets, the two attack records and the phase.
    ``make_move`` resolves the human shot and the AI reply as one step.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        rng_seed: int | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        seed = rng_seed if rng_seed is not None else self.settings.rng_seed
        self._rng = rng or random.Random(seed)
        self._machine = GameStateMachine()
        self.human_ships: list[Ship] = []
        self.ai_ships: list[Ship] = []
        self.attacks_by_human_on_ai = AttackRecord(owner=Side.HUMAN.value)
        self.attacks_by_ai_on_human = AttackRecord(owner=Side.AI.value)
        self.active_turn = Side.HUMAN
        self.difficulty = Difficulty.UNSET

    @property
    def phase(self) -> GamePhase:
        return self._machine.phase

    def initialize_game_session(self, difficulty: Difficulty | str | int | None) -> Difficulty:
        """Select the AI tier; allowed any number of times before the game starts."""
        self._machine.require(GamePhase.SELECTION, action="change difficulty")
        self.difficulty = Difficulty.from_token(difficulty)
        logger.info("difficulty_selected", extra={"difficulty": self.difficulty.name})
        return self.difficulty

    def start_game(self, layout: ShipLayout) -> SessionSnapshot:
        """Validate the human fleet, place the AI fleet and begin play."""
        with tracer.start_as_current_span("session.start_game") as span:
            self._machine.require(GamePhase.SELECTION, action="start a game")
            try:
                human_ships = parse_layout(layout)
            except ValueError as exc:
                logger.warning("layout_rejected", extra={"reason": str(exc)})
                raise

            planner = ShipPlacementPlanner(
                self._rng, max_attempts=self.settings.placement_attempts
            )
            ai_ships = planner.plan(len(human_ships))

            self.human_ships = human_ships
            self.ai_ships = ai_ships
            self.attacks_by_human_on_ai.clear()
            self.attacks_by_ai_on_human.clear()
            self.active_turn = Side.HUMAN
            self._machine.start()

            span.set_attribute("fleet.size", len(human_ships))
            span.set_attribute("ai.difficulty", self.difficulty.name)
            logger.info(
                "game_started",
                extra={"ships": len(human_ships), "difficulty": self.difficulty.name},
            )
            return self.get_session()

    def make_move(self, target: Position | str) -> MoveReport:
        """Fire at ``target`` on the AI board, then let the AI fire back once."""
        with tracer.start_as_current_span("session.make_move") as span:
            self._machine.require(GamePhase.IN_PROGRESS, action="make a move")
            if isinstance(target, Position):
                position = target
            else:
                try:
                    position = from_position(target)
                except ValueError as exc:
                    logger.warning("move_rejected_bad_position", extra={"target": str(target)})
                    span.record_exception(exc)
                    raise
            span.set_attribute("human.target", position.code)

            human_outcome = resolve_attack(position, self.ai_ships, self.attacks_by_human_on_ai)

            self.active_turn = Side.AI
            try:
                ai_target = choose_target(
                    self.difficulty, self.attacks_by_ai_on_human, self.human_ships, self._rng
                )
                ai_outcome = resolve_attack(ai_target, self.human_ships, self.attacks_by_ai_on_human)
            finally:
                self.active_turn = Side.HUMAN
            span.set_attribute("ai.target", ai_target.code)

            phase = self._machine.advance(
                self.human_ships,
                self.ai_ships,
                self.attacks_by_human_on_ai,
                self.attacks_by_ai_on_human,
            )
            span.set_attribute("game.phase", phase.value)
            MOVE_COUNTER.add(
                1,
                attributes={
                    "human_outcome": human_outcome.value,
                    "ai_outcome": ai_outcome.value,
                    "difficulty": self.difficulty.name,
                },
            )
            if phase.is_terminal:
                logger.info("game_finished", extra={"phase": phase.value})
            return MoveReport(
                human_target=position,
                human_outcome=human_outcome,
                ai_target=ai_target,
                ai_outcome=ai_outcome,
                phase=phase,
            )

    def forfeit_game(self) -> None:
        """Discard the match and return to the initial empty state."""
        previous = self.phase
        self.human_ships = []
        self.ai_ships = []
        self.attacks_by_human_on_ai.clear()
        self.attacks_by_ai_on_human.clear()
        self.active_turn = Side.HUMAN
        self.difficulty = Difficulty.UNSET
        self._machine.reset()
        logger.info("game_forfeited", extra={"previous_phase": previous.value})

    def get_session(self, viewer: Side | str = Side.HUMAN) -> SessionSnapshot:
        """Return an immutable view holding only what ``viewer`` may see.

        ``viewer`` is a Side or its turn token (``"p1"``, ``"p2"``).
        """
        viewer = Side(viewer)
        state: SideState | None = None
        if self.phase is not GamePhase.SELECTION:
            if viewer is Side.HUMAN:
                own_ships, opponent_ships = self.human_ships, self.ai_ships
                made, received = self.attacks_by_human_on_ai, self.attacks_by_ai_on_human
            else:
                own_ships, opponent_ships = self.ai_ships, self.human_ships
                made, received = self.attacks_by_ai_on_human, self.attacks_by_human_on_ai
            state = SideState(
                attack_hits=made.hits,
                attack_misses=made.misses,
                remaining_opponent_ships=remaining_ships(opponent_ships, made.hits),
                surviving_tiles=tuple(sorted(healthy_tiles(own_ships, received.hits))),
            )
        return SessionSnapshot(
            phase=self.phase,
            active_turn=self.active_turn,
            difficulty=self.difficulty,
            viewer=viewer,
            state=state,
        )

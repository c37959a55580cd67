"""Command-line driver for playing Battleship against the offline AI."""

from __future__ import annotations

import argparse
import logging
import random
import re
from typing import Callable, Mapping, Sequence

from battleship_offline.ai import Difficulty
from battleship_offline.config import EngineSettings, load_settings
from battleship_offline.engine.attacks import ShotOutcome
from battleship_offline.engine.board import BOARD_SIZE, ROW_LABELS, Position
from battleship_offline.engine.instrumented_session import InstrumentedGameSession
from battleship_offline.engine.placement import ShipPlacementPlanner
from battleship_offline.engine.session import MAX_SHIP_SLOTS, MoveReport, SessionSnapshot
from battleship_offline.engine.state_machine import GamePhase
from battleship_offline.errors import BattleshipError
from battleship_offline.telemetry import configure_console_logging, init_telemetry, shutdown_tracing

DEFAULT_FLEET_LENGTHS = (5, 4, 3, 3, 2)

_SEPARATORS = re.compile(r"[\s,;]+")


def _split_codes(text: str) -> list[str]:
    """Split ``"A1 A2,A3"`` into ``["A1", "A2", "A3"]``."""
    return [part for part in _SEPARATORS.split(text.strip()) if part]


def _format_grid(marks: Mapping[Position, str]) -> str:
    header = "    " + " ".join(f"{col + 1:>2}" for col in range(BOARD_SIZE))
    rows = [header]
    for row in range(BOARD_SIZE):
        symbols = [f"{marks.get(Position(row, col), '.'):>2}" for col in range(BOARD_SIZE)]
        rows.append(f"{ROW_LABELS[row]} |" + " ".join(symbols))
    return "\n".join(rows)


def _format_snapshot(snapshot: SessionSnapshot) -> str:
    state = snapshot.state
    if state is None:
        return f"Phase: {snapshot.phase.value}"
    enemy: dict[Position, str] = {pos: "X" for pos in state.attack_hits}
    enemy.update({pos: "o" for pos in state.attack_misses})
    fleet = {pos: "S" for pos in state.surviving_tiles}
    return "\n".join(
        [
            "Your surviving ships:",
            _format_grid(fleet),
            "",
            f"Enemy waters ({state.remaining_opponent_ships} ships left):",
            _format_grid(enemy),
        ]
    )


def _describe_move(report: MoveReport) -> str:
    lines = []
    if report.human_outcome is ShotOutcome.REPEAT:
        lines.append(f"You already fired at {report.human_target}; the shot is wasted.")
    else:
        lines.append(f"You fired at {report.human_target}: {report.human_outcome.value}")
    lines.append(f"The AI fired at {report.ai_target}: {report.ai_outcome.value}")
    return "\n".join(lines)


def _auto_layout(rng: random.Random, settings: EngineSettings) -> dict[int, list[str]]:
    planner = ShipPlacementPlanner(rng, max_attempts=settings.placement_attempts, owner="human")
    ships = planner.place_fleet(DEFAULT_FLEET_LENGTHS)
    return {slot: ship.codes() for slot, ship in enumerate(ships, start=1)}


def _prompt_layout() -> dict[int, list[str]]:
    print(
        f"Enter up to {MAX_SHIP_SLOTS} ships, one per line, as tiles in a straight line "
        "(e.g. 'A1 A2 A3'). Press Enter on an empty line when done."
    )
    layout: dict[int, list[str]] = {}
    for slot in range(1, MAX_SHIP_SLOTS + 1):
        raw = input(f"Ship {slot}: ")
        codes = _split_codes(raw)
        if not codes:
            break
        layout[slot] = codes
    return layout


def _prompt_difficulty() -> Difficulty:
    while True:
        raw = input("Choose an opponent: [1] Easy  [2] Medium  [3] Hard: ").strip()
        difficulty = Difficulty.from_token(raw or "1")
        if difficulty is not Difficulty.UNSET:
            return difficulty
        print("Please enter 1, 2 or 3.")


def _start(
    session: InstrumentedGameSession, layout_source: Callable[[], dict[int, list[str]]]
) -> SessionSnapshot:
    while True:
        layout = layout_source()
        try:
            return session.start_game(layout)
        except BattleshipError as exc:
            print(f"That layout was rejected: {exc}")


def play_game(
    seed: int | None = None,
    difficulty: Difficulty | None = None,
    auto_place: bool = False,
) -> GamePhase:
    print("Welcome to Battleship!\n")
    settings = load_settings()
    if seed is not None:
        settings = settings.model_copy(update={"rng_seed": seed})
    rng = random.Random(settings.rng_seed)
    session = InstrumentedGameSession(rng=rng, settings=settings)

    session.initialize_game_session(difficulty or _prompt_difficulty())
    if auto_place:
        snapshot = _start(session, lambda: _auto_layout(rng, settings))
        print("\nYour ships have been positioned automatically.")
    else:
        snapshot = _start(session, _prompt_layout)

    while snapshot.phase is GamePhase.IN_PROGRESS:
        print()
        print(_format_snapshot(snapshot))
        raw = input("\nEnter target coordinate (e.g., A5) or 'q' to forfeit: ").strip()
        if raw.lower() == "q":
            session.forfeit_game()
            print("You forfeited the game.")
            return session.phase
        try:
            report = session.make_move(raw)
        except BattleshipError as exc:
            print(f"Invalid input: {exc}")
            continue
        print(_describe_move(report))
        snapshot = session.get_session()

    print()
    print(_format_snapshot(snapshot))
    if snapshot.phase is GamePhase.HUMAN_WIN:
        print("\nCongratulations, you won!")
    else:
        print("\nThe AI won this time. Better luck next battle!")
    return snapshot.phase


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Battleship against the offline AI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--difficulty",
        choices=["easy", "medium", "hard"],
        default=None,
        help="AI tier; prompted for when omitted.",
    )
    parser.add_argument(
        "--auto-place", action="store_true", help="Place your fleet randomly."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Print engine log lines to the console."
    )
    args = parser.parse_args(argv)

    configure_console_logging(logging.INFO if args.verbose else logging.WARNING)
    init_telemetry()
    try:
        play_game(
            seed=args.seed,
            difficulty=Difficulty.from_token(args.difficulty) if args.difficulty else None,
            auto_place=args.auto_place,
        )
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()

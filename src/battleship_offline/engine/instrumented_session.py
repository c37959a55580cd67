"""GameSession with game-level metrics and logging."""

from __future__ import annotations

import time

from battleship_offline.errors import BattleshipError
from battleship_offline.telemetry import (
    get_logger,
    get_tracer,
    record_game_duration,
    record_game_metric,
)

from .board import Position
from .session import GameSession, MoveReport, SessionSnapshot, ShipLayout


class InstrumentedGameSession(GameSession):
    """Wraps GameSession with per-game counters, durations and log lines."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("battleship_offline.session")
        self._tracer = get_tracer("battleship_offline.session")
        self._game_start_time: float | None = None
        self._turns = 0
        self.games_played = 0

    def start_game(self, layout: ShipLayout) -> SessionSnapshot:
        snapshot = super().start_game(layout)
        self._game_start_time = time.perf_counter()
        self._turns = 0
        self.games_played += 1
        record_game_metric(
            "battleship_games_started_total",
            1,
            {"difficulty": self.difficulty.name, "ships": len(self.human_ships)},
        )
        self._logger.info(
            "Game %d started difficulty=%s ships=%d",
            self.games_played,
            self.difficulty.name,
            len(self.human_ships),
        )
        return snapshot

    def make_move(self, target: Position | str) -> MoveReport:
        try:
            report = super().make_move(target)
        except BattleshipError as exc:
            record_game_metric(
                "battleship_invalid_moves_total",
                1,
                {"reason": type(exc).__name__},
            )
            self._logger.error("Rejected move %r: %s", target, exc)
            raise

        self._turns += 1
        record_game_metric(
            "battleship_shots_by_result_total",
            1,
            {"side": "human", "result": report.human_outcome.value},
        )
        record_game_metric(
            "battleship_shots_by_result_total",
            1,
            {"side": "ai", "result": report.ai_outcome.value},
        )
        if report.phase.is_terminal:
            self._finish_game(report)
        return report

    def forfeit_game(self) -> None:
        was_running = self._game_start_time is not None
        super().forfeit_game()
        if was_running:
            record_game_metric("battleship_games_forfeited_total", 1)
            self._logger.info("Game %d forfeited after %d turns", self.games_played, self._turns)
        self._game_start_time = None
        self._turns = 0

    def _finish_game(self, report: MoveReport) -> None:
        duration = (
            time.perf_counter() - self._game_start_time if self._game_start_time is not None else 0.0
        )
        winner = report.phase.value
        attrs = {"winner": winner, "difficulty": self.difficulty.name}
        record_game_metric("battleship_games_completed_total", 1, attrs)
        record_game_duration("battleship_game_duration_seconds", duration, attrs)

        with self._tracer.start_as_current_span("battleship_offline.session.game_complete") as span:
            span.set_attribute("winner", winner)
            span.set_attribute("turns", self._turns)
            span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Game %d finished. Winner=%s turns=%d duration_s=%.3f",
            self.games_played,
            winner,
            self._turns,
            duration,
        )
        self._game_start_time = None

"""Tests for the terminal driver."""

from __future__ import annotations

from typing import Iterator

import pytest
from battleship_offline import cli
from battleship_offline.ai import Difficulty
from battleship_offline.config import EngineSettings
from battleship_offline.engine.board import Position
from battleship_offline.engine.ship import Ship
from battleship_offline.engine.state_machine import GamePhase


def _feed(monkeypatch: pytest.MonkeyPatch, answers: list[str]) -> Iterator[str]:
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))
    return replies


@pytest.fixture(autouse=True)
def fixed_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "load_settings", lambda: EngineSettings())


def test_split_codes_accepts_mixed_separators() -> None:
    assert cli._split_codes(" a1 A2,A3;  a4 ") == ["a1", "A2", "A3", "a4"]
    assert cli._split_codes("   ") == []


def test_format_grid_marks_cells() -> None:
    grid = cli._format_grid({Position(0, 0): "X", Position(9, 9): "o"})
    lines = grid.splitlines()
    assert len(lines) == 11
    assert lines[1].startswith("A |")
    assert lines[1].split("|")[1].split()[0] == "X"
    assert lines[10].split()[-1] == "o"


def test_forfeit_from_the_prompt(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _feed(monkeypatch, ["Z99", "q"])
    phase = cli.play_game(seed=4, difficulty=Difficulty.EASY, auto_place=True)
    out = capsys.readouterr().out
    assert phase is GamePhase.SELECTION
    assert "Invalid input" in out
    assert "You forfeited the game." in out


def test_manual_layout_is_reprompted_until_valid(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _feed(
        monkeypatch,
        [
            "A1 B2",
            "",
            "A1 A2",
            "",
            "q",
        ],
    )
    phase = cli.play_game(seed=1, difficulty=Difficulty.MEDIUM)
    out = capsys.readouterr().out
    assert "That layout was rejected" in out
    assert phase is GamePhase.SELECTION


def test_difficulty_prompt_retries_on_bad_input(monkeypatch: pytest.MonkeyPatch) -> None:
    _feed(monkeypatch, ["9", "hard"])
    assert cli._prompt_difficulty() is Difficulty.HARD


def test_hard_ai_beats_a_lone_ship(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    _feed(monkeypatch, ["C3", "", "J1"])
    monkeypatch.setattr(
        cli.ShipPlacementPlanner, "plan", lambda self, count: [Ship.from_codes(["A1"])]
    )
    phase = cli.play_game(seed=2, difficulty=Difficulty.HARD)
    out = capsys.readouterr().out
    assert phase is GamePhase.AI_WIN
    assert "The AI won this time" in out
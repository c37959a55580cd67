"""Tests for the AI fleet placement planner."""

import random

import pytest
from battleship_offline.engine.board import Position
from battleship_offline.engine.placement import ShipPlacementPlanner, fleet_lengths
from battleship_offline.errors import PlacementError


class CornerRandom(random.Random):
    """Always proposes a horizontal ship starting at the bottom-right cell."""

    def choice(self, seq):
        return seq[0]

    def randrange(self, start, stop=None, step=1):
        return (start if stop is None else stop) - 1


def _all_tiles(ships):
    return [pos for ship in ships for pos in ship.positions]


def test_fleet_lengths_mirror_only_the_count() -> None:
    assert fleet_lengths(0) == []
    assert fleet_lengths(3) == [1, 2, 3]
    assert fleet_lengths(5) == [1, 2, 3, 4, 5]


def test_plan_places_non_overlapping_fleet() -> None:
    planner = ShipPlacementPlanner(random.Random(123))
    ships = planner.plan(5)
    assert [ship.length for ship in ships] == [1, 2, 3, 4, 5]
    tiles = _all_tiles(ships)
    assert len(tiles) == len(set(tiles)), "Ships should not overlap"


def test_plan_is_reproducible_with_a_seed() -> None:
    first = ShipPlacementPlanner(random.Random(7)).plan(4)
    second = ShipPlacementPlanner(random.Random(7)).plan(4)
    assert first == second


def test_exhausted_random_attempts_fall_back_to_first_fit() -> None:
    planner = ShipPlacementPlanner(CornerRandom(), max_attempts=3)
    ships = planner.place_fleet([2, 3])
    assert ships[0].positions == (Position(0, 0), Position(0, 1))
    assert ships[1].positions == (Position(0, 2), Position(0, 3), Position(0, 4))


def test_unplaceable_fleet_raises_instead_of_looping() -> None:
    planner = ShipPlacementPlanner(random.Random(3), max_attempts=20)
    with pytest.raises(PlacementError):
        planner.place_fleet([10] * 11)


def test_length_longer_than_board_is_rejected() -> None:
    planner = ShipPlacementPlanner(random.Random(3))
    with pytest.raises(PlacementError):
        planner.place_fleet([11])


def test_attempt_budget_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ShipPlacementPlanner(random.Random(), max_attempts=0)

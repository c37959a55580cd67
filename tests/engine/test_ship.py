"""Tests for Ship domain logic."""

import pytest
from battleship_offline.engine.board import Position
from battleship_offline.engine.ship import Orientation, Ship
from battleship_offline.errors import LayoutError, OutOfBoundsError


def test_ship_from_codes_horizontal() -> None:
    ship = Ship.from_codes(["A1", "A2", "A3"])
    assert ship.length == 3
    assert ship.orientation is Orientation.HORIZONTAL
    assert ship.codes() == ["A1", "A2", "A3"]


def test_ship_from_codes_vertical() -> None:
    ship = Ship.from_codes(["B2", "C2"])
    assert ship.orientation is Orientation.VERTICAL


def test_single_tile_ship_has_no_orientation() -> None:
    ship = Ship.from_codes(["E5"])
    assert ship.length == 1
    assert ship.orientation is None


@pytest.mark.parametrize(
    "codes",
    [[], ["A1", "A3"], ["A1", "B2"], ["A1", "A1"], ["A1", "A2", "B2"]],
)
def test_malformed_ships_are_rejected(codes: list[str]) -> None:
    with pytest.raises(LayoutError):
        Ship.from_codes(codes)


def test_from_start_lays_out_tiles() -> None:
    ship = Ship.from_start(Position(2, 3), 3, Orientation.VERTICAL)
    assert ship.positions == (Position(2, 3), Position(3, 3), Position(4, 3))


def test_from_start_off_the_board_fails() -> None:
    with pytest.raises(OutOfBoundsError):
        Ship.from_start(Position(0, 8), 3, Orientation.HORIZONTAL)


def test_ship_overlap_and_sinking() -> None:
    first = Ship.from_codes(["C1", "C2", "C3"])
    crossing = Ship.from_codes(["B2", "C2", "D2"])
    apart = Ship.from_codes(["F1", "F2"])
    assert first.overlaps(crossing)
    assert not first.overlaps(apart)

    assert not first.is_sunk({Position(2, 0), Position(2, 1)})
    assert first.is_sunk({Position(2, 0), Position(2, 1), Position(2, 2), Position(9, 9)})


def test_ships_compare_by_tiles() -> None:
    assert Ship.from_codes(["A1"]) == Ship((Position(0, 0),))
    assert len({Ship.from_codes(["A1", "A2"]), Ship.from_codes(["A1", "A2"])}) == 1

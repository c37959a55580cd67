"""Tests for attack resolution and fleet accounting."""

import random

from battleship_offline.engine.attacks import (
    AttackRecord,
    ShotOutcome,
    healthy_tiles,
    remaining_ships,
    resolve_attack,
    ship_at,
    sunk_tiles,
)
from battleship_offline.engine.board import Position, all_positions, from_position
from battleship_offline.engine.ship import Ship


def _fleet() -> list[Ship]:
    return [Ship.from_codes(["A1", "A2"]), Ship.from_codes(["C3", "D3", "E3"])]


def test_hits_and_misses_are_recorded() -> None:
    ships = _fleet()
    record = AttackRecord(owner="p1")

    assert resolve_attack(from_position("A1"), ships, record) is ShotOutcome.HIT
    assert resolve_attack(from_position("J10"), ships, record) is ShotOutcome.MISS

    assert record.hits == (Position(0, 0),)
    assert record.misses == (Position(9, 9),)
    assert Position(0, 0) in record
    assert len(record) == 2


def test_repeat_attack_is_a_noop() -> None:
    ships = _fleet()
    record = AttackRecord()
    resolve_attack(from_position("A1"), ships, record)
    resolve_attack(from_position("B1"), ships, record)

    assert resolve_attack(from_position("A1"), ships, record) is ShotOutcome.REPEAT
    assert resolve_attack(from_position("B1"), ships, record) is ShotOutcome.REPEAT
    assert record.hits == (Position(0, 0),)
    assert record.misses == (Position(1, 0),)


def test_hits_keep_insertion_order() -> None:
    ships = _fleet()
    record = AttackRecord()
    for code in ["E3", "A2", "C3"]:
        resolve_attack(from_position(code), ships, record)
    assert [pos.code for pos in record.hits] == ["E3", "A2", "C3"]


def test_remaining_and_healthy_tiles() -> None:
    ships = _fleet()
    record = AttackRecord()
    assert remaining_ships(ships, record.hits) == 2
    assert len(healthy_tiles(ships, record.hits)) == 5

    resolve_attack(from_position("A1"), ships, record)
    resolve_attack(from_position("A2"), ships, record)
    resolve_attack(from_position("D3"), ships, record)

    assert remaining_ships(ships, record.hits) == 1
    assert healthy_tiles(ships, record.hits) == {Position(2, 2), Position(4, 2)}
    assert sunk_tiles(ships, record.hits) == {Position(0, 0), Position(0, 1)}


def test_ship_at_finds_owner() -> None:
    ships = _fleet()
    assert ship_at(ships, from_position("D3")) is ships[1]
    assert ship_at(ships, from_position("J1")) is None


def test_random_barrage_keeps_records_consistent() -> None:
    rng = random.Random(11)
    ships = _fleet()
    tiles = {pos for ship in ships for pos in ship.positions}
    record = AttackRecord()
    cells = list(all_positions())

    for _ in range(150):
        resolve_attack(rng.choice(cells), ships, record)
        hits, misses = set(record.hits), set(record.misses)
        assert not hits & misses
        assert hits <= tiles
        assert not misses & tiles
        all_sunk = tiles <= hits
        assert (remaining_ships(ships, record.hits) == 0) is all_sunk


def test_clear_empties_both_sets() -> None:
    ships = _fleet()
    record = AttackRecord()
    resolve_attack(from_position("A1"), ships, record)
    resolve_attack(from_position("B1"), ships, record)
    record.clear()
    assert record.is_empty()
    assert record.tried() == frozenset()

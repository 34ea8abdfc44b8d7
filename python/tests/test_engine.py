"""Game engine tests — shifts, merges, spawns, undo, status and snapshots.

Boards are built by hand and spawns are made deterministic with a seeded
``random.Random`` (and, where the spawned value matters, a fixed
``four_probability``).
"""

from __future__ import annotations

import io
import json
import random

import pytest

from backend.engine.gameplay import Twenty48Game
from backend.engine.gameplay.game import _collapse
from backend.models.board import Board, Direction, GameStatus
from backend.models.errors import CorruptSnapshotError
from backend.models.settings import GameSettings


# -- helpers ------------------------------------------------------------------


def _game(
    rows: int,
    columns: int,
    flat: list[int],
    winning_value: int = 2048,
    four_probability: float = 0.0,
    seed: int = 0,
) -> Twenty48Game:
    board = Board.from_flat(rows, columns, flat)
    settings = GameSettings(
        rows=rows,
        columns=columns,
        winning_value=winning_value,
        four_probability=four_probability,
    )
    return Twenty48Game.from_board(board, settings, rng=random.Random(seed))


def _cells(game: Twenty48Game) -> list[list[int]]:
    return [
        [game.get_cell_value(r, c) for c in range(game.columns)]
        for r in range(game.rows)
    ]


def _tile_count(game: Twenty48Game) -> int:
    return sum(1 for row in _cells(game) for v in row if v)


# -- line collapse ------------------------------------------------------------


@pytest.mark.parametrize(
    ("line", "expected", "points"),
    [
        ([2, 2, 2, 2], [4, 4, 0, 0], 8),
        ([2, 0, 2, 4], [4, 4, 0, 0], 4),
        ([4, 4, 8, 0], [8, 8, 0, 0], 8),
        ([0, 0, 0, 2], [2, 0, 0, 0], 0),
        ([2, 4, 8, 16], [2, 4, 8, 16], 0),
        ([8, 8, 8, 0], [16, 8, 0, 0], 16),
    ],
)
def test_collapse(line: list[int], expected: list[int], points: int) -> None:
    assert _collapse(line) == (expected, points)


# -- moves --------------------------------------------------------------------


def test_new_game_spawns_two_tiles() -> None:
    game = Twenty48Game(GameSettings(rows=4, columns=4), rng=random.Random(7))
    assert _tile_count(game) == 2
    assert game.get_score() == 0
    assert game.get_move_count() == 0
    assert not game.is_undo_possible()


def test_move_left_merges_and_scores() -> None:
    game = _game(4, 4, [2, 2, 2, 2] + [0] * 12)

    assert game.move_left()
    assert _cells(game)[0][:2] == [4, 4]
    assert game.get_score() == 8
    assert game.get_move_count() == 1
    assert _tile_count(game) == 3  # two merged tiles plus one spawn


def test_each_direction_pushes_to_its_edge() -> None:
    game = _game(4, 4, [2, 2] + [0] * 14)
    assert game.move_right()
    assert _cells(game)[0][3] == 4

    game = _game(4, 4, [2, 0, 0, 0, 2] + [0] * 11)
    assert game.move_down()
    assert _cells(game)[3][0] == 4

    game = _game(4, 4, [0] * 12 + [0, 0, 0, 8])
    assert game.move_up()
    assert _cells(game)[0][3] == 8


def test_no_op_moves_change_nothing() -> None:
    game = _game(2, 2, [2, 4, 4, 2])
    before = _cells(game)

    for direction in Direction:
        assert not game.move(direction)

    assert _cells(game) == before
    assert game.get_score() == 0
    assert game.get_move_count() == 0
    assert not game.is_undo_possible()


def test_blocked_direction_is_a_no_op() -> None:
    game = _game(4, 4, [2] + [0] * 15)
    assert not game.move_left()
    assert not game.move_up()
    assert _tile_count(game) == 1
    assert game.get_move_count() == 0


@pytest.mark.parametrize(("probability", "value"), [(0.0, 2), (1.0, 4)])
def test_spawned_tile_value(probability: float, value: int) -> None:
    game = _game(2, 2, [2, 0, 0, 0], four_probability=probability)
    assert game.move_right()
    values = sorted(v for row in _cells(game) for v in row if v)
    assert values == sorted([2, value])


# -- undo ---------------------------------------------------------------------


def test_undo_restores_pre_move_state_once() -> None:
    game = _game(4, 4, [2, 2, 4, 4] + [0] * 12, seed=3)
    before = _cells(game)

    assert game.move_left()
    assert game.is_undo_possible()

    assert game.undo()
    assert _cells(game) == before
    assert game.get_score() == 0
    assert game.get_move_count() == 0
    assert not game.is_undo_possible()
    assert not game.undo()


def test_undo_only_reaches_back_one_move() -> None:
    game = _game(4, 4, [2, 0, 0, 0] + [0] * 12, seed=1)
    assert game.move_right()
    after_first = _cells(game)
    assert game.move_down()

    assert game.undo()
    assert _cells(game) == after_first
    assert game.get_move_count() == 1
    assert not game.undo()


# -- status -------------------------------------------------------------------


def test_locked_board_is_lost() -> None:
    assert _game(2, 2, [2, 4, 4, 2]).get_game_status() is GameStatus.LOST


def test_open_board_is_playing() -> None:
    assert _game(2, 2, [2, 2, 4, 8]).get_game_status() is GameStatus.PLAYING


def test_win_is_reported_until_acknowledged() -> None:
    game = _game(2, 2, [8, 0, 0, 0], winning_value=8)
    assert game.get_game_status() is GameStatus.WIN
    assert game.get_game_status() is GameStatus.WIN

    game.keep_playing()
    assert game.get_game_status() is GameStatus.PLAYING


def test_locked_board_after_win_is_won_but_unplayable() -> None:
    game = _game(2, 2, [8, 4, 4, 8], winning_value=8)
    assert game.get_game_status() is GameStatus.WIN

    game.keep_playing()
    assert game.get_game_status() is GameStatus.WON_BUT_UNPLAYABLE


def test_move_into_locked_board_reports_lost() -> None:
    game = _game(2, 2, [2, 4, 0, 8])
    assert game.move_left()
    assert _cells(game) == [[2, 4], [8, 2]]
    assert game.get_game_status() is GameStatus.LOST


# -- snapshots ----------------------------------------------------------------


def _played_game() -> Twenty48Game:
    game = _game(4, 4, [2, 2, 4, 0, 0, 4, 0, 0] + [0] * 8, four_probability=0.1, seed=11)
    assert game.move_left()
    for direction in (Direction.UP, Direction.RIGHT, Direction.DOWN):
        game.move(direction)
    return game


def test_snapshot_round_trip() -> None:
    game = _played_game()
    restored = Twenty48Game.from_snapshot(game.to_snapshot())

    assert restored.get_score() == game.get_score()
    assert restored.get_move_count() == game.get_move_count()
    assert _cells(restored) == _cells(game)
    assert restored.is_undo_possible() == game.is_undo_possible()

    assert restored.undo() and game.undo()
    assert _cells(restored) == _cells(game)
    assert restored.get_score() == game.get_score()


def test_serialize_to_stream_matches_snapshot() -> None:
    game = _played_game()
    sink = io.BytesIO()
    game.serialize_to_stream(sink)
    assert sink.getvalue() == game.to_snapshot()


def test_snapshot_keeps_win_acknowledgement() -> None:
    game = _game(2, 2, [8, 0, 0, 0], winning_value=8)
    game.keep_playing()
    restored = Twenty48Game.from_snapshot(game.to_snapshot())
    assert restored.get_game_status() is GameStatus.PLAYING


def _mangled(**changes: object) -> bytes:
    payload = json.loads(_played_game().to_snapshot())
    for dotted, value in changes.items():
        target = payload
        *parents, leaf = dotted.split("__")
        for key in parents:
            target = target[key]
        target[leaf] = value
    return json.dumps(payload).encode("utf-8")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"not json at all",
        b"\xff\xfe",
        b"[]",
        b"{}",
        _mangled(format="something-else"),
        _mangled(version=99),
        _mangled(settings__rows="four"),
        _mangled(settings__rows=4.0),
        _mangled(settings__columns=4.0),
        _mangled(settings__four_probability="often"),
        _mangled(settings__winning_value=True),
        _mangled(settings__winning_value=100),
        _mangled(state__cells=[[0, 0], [0, 0]]),
        _mangled(state__cells=[[3, 0, 0, 0]] * 4),
        _mangled(state__score=-1),
        _mangled(state__moves=True),
        _mangled(state__win_acknowledged="no"),
        _mangled(undo=[1, 2, 3]),
    ],
)
def test_corrupt_snapshot_is_rejected(data: bytes) -> None:
    with pytest.raises(CorruptSnapshotError):
        Twenty48Game.from_snapshot(data)


# -- settings -----------------------------------------------------------------


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rows": 1},
        {"rows": 4.0},
        {"columns": True},
        {"four_probability": None},
        {"columns": 0},
        {"winning_value": 100},
        {"winning_value": 2},
        {"four_probability": 1.5},
    ],
)
def test_invalid_settings(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        GameSettings(**kwargs)


def test_board_from_flat_rejects_wrong_length() -> None:
    with pytest.raises(ValueError):
        Board.from_flat(2, 2, [2, 4, 8])

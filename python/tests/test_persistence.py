"""Session persistence tests — atomic saves and distinct load failures."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from backend.engine.gameplay import Twenty48Game
from backend.models.board import Board
from backend.models.errors import CorruptSnapshotError, LoadFailedError, SaveFailedError
from backend.persistence import fs
from backend.persistence.fs import atomic_write_bytes
from backend.persistence.session_store import load_session, save_session


def _game() -> Twenty48Game:
    board = Board.from_flat(4, 4, [2, 2, 0, 0, 0, 4, 0, 4] + [0] * 8)
    game = Twenty48Game.from_board(board, rng=random.Random(2))
    assert game.move_left()
    return game


def test_save_then_load(tmp_path: Path) -> None:
    game = _game()
    dest = tmp_path / "game.dat"

    save_session(game, dest)
    loaded = load_session(dest)

    assert loaded.to_snapshot() == game.to_snapshot()
    assert loaded.is_undo_possible()


def test_save_overwrites_existing_file(tmp_path: Path) -> None:
    dest = tmp_path / "game.dat"
    dest.write_bytes(b"old")
    save_session(_game(), dest)
    assert dest.read_bytes() == _game().to_snapshot()


def test_failed_save_leaves_existing_file_untouched(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    dest = tmp_path / "game.dat"
    original = b"previous saved game"
    dest.write_bytes(original)

    def _fail(fd: int) -> None:
        raise OSError("device went away")

    monkeypatch.setattr(fs.os, "fsync", _fail)

    with pytest.raises(SaveFailedError):
        save_session(_game(), dest)

    assert dest.read_bytes() == original
    assert sorted(p.name for p in tmp_path.iterdir()) == ["game.dat"]


def test_save_into_unwritable_location_fails(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file")
    with pytest.raises(SaveFailedError):
        save_session(_game(), blocker / "game.dat")


def test_missing_file_is_a_load_failure_not_corruption(tmp_path: Path) -> None:
    with pytest.raises(LoadFailedError) as info:
        load_session(tmp_path / "nope.dat")
    assert not isinstance(info.value, CorruptSnapshotError)


def test_corrupt_file_is_reported_as_corrupt(tmp_path: Path) -> None:
    src = tmp_path / "game.dat"
    src.write_bytes(_game().to_snapshot()[:40])
    with pytest.raises(CorruptSnapshotError):
        load_session(src)


def test_atomic_write_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "record.bin"
    atomic_write_bytes(target, b"\x00\x00\x00\x07")
    assert target.read_bytes() == b"\x00\x00\x00\x07"

"""Core gameplay logic — shifts, merges, single-level undo and status checks."""

from __future__ import annotations

import json
import random
from typing import Any, BinaryIO

from backend.engine.gamegenerator import TileSpawner
from backend.engine.gamestate import GameState
from backend.models.board import Board, Direction, GameStatus
from backend.models.errors import CorruptSnapshotError
from backend.models.settings import GameSettings

SNAPSHOT_FORMAT = "twenty48-snapshot"
SNAPSHOT_VERSION = 1


class Twenty48Game:
    """Orchestrates the board of a single game of 2048."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.rows = self.settings.rows
        self.columns = self.settings.columns
        self._spawner = TileSpawner(self.settings.four_probability, rng)
        self.state = GameState(self._spawner.generate(self.settings))
        self._undo_state: GameState | None = None

    @classmethod
    def from_board(
        cls,
        board: Board,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        score: int = 0,
        moves: int = 0,
    ) -> Twenty48Game:
        """Create a game from an existing board (no tiles are spawned)."""
        base = settings or GameSettings()
        settings = GameSettings(
            rows=board.rows,
            columns=board.columns,
            winning_value=base.winning_value,
            four_probability=base.four_probability,
        )
        return cls._restore(settings, GameState(board, score=score, moves=moves), None, rng)

    @classmethod
    def _restore(
        cls,
        settings: GameSettings,
        state: GameState,
        undo_state: GameState | None,
        rng: random.Random | None,
    ) -> Twenty48Game:
        obj = object.__new__(cls)
        obj.settings = settings
        obj.rows = settings.rows
        obj.columns = settings.columns
        obj._spawner = TileSpawner(settings.four_probability, rng)
        obj.state = state
        obj._undo_state = undo_state
        return obj

    # -- movement -------------------------------------------------------------

    def move(self, direction: Direction) -> bool:
        """Push every tile towards *direction*, merging equal neighbours once.

        Returns True if anything moved or merged.  Only then is the undo
        snapshot replaced, the move counted and a new tile spawned.
        """
        before = self.state.copy()
        board = self.state.board
        changed = False
        gained = 0

        for line in _lines(board, direction):
            values = [board.cells[r][c] for r, c in line]
            merged, points = _collapse(values)
            if merged != values:
                changed = True
                for (r, c), val in zip(line, merged):
                    board.cells[r][c] = val
            gained += points

        if not changed:
            return False

        self._undo_state = before
        self.state.record_move(gained)
        self._spawner.spawn(board)
        return True

    def move_up(self) -> bool:
        return self.move(Direction.UP)

    def move_down(self) -> bool:
        return self.move(Direction.DOWN)

    def move_left(self) -> bool:
        return self.move(Direction.LEFT)

    def move_right(self) -> bool:
        return self.move(Direction.RIGHT)

    # -- undo -----------------------------------------------------------------

    def undo(self) -> bool:
        if self._undo_state is None:
            return False
        self.state = self._undo_state
        self._undo_state = None
        return True

    def is_undo_possible(self) -> bool:
        return self._undo_state is not None

    # -- queries --------------------------------------------------------------

    def get_score(self) -> int:
        return self.state.score

    def get_move_count(self) -> int:
        return self.state.moves

    def get_cell_value(self, row: int, column: int) -> int:
        return self.state.board.get_cell(row, column)

    def get_game_status(self) -> GameStatus:
        board = self.state.board
        if (
            not self.state.win_acknowledged
            and board.max_tile() >= self.settings.winning_value
        ):
            return GameStatus.WIN
        if board.has_moves():
            return GameStatus.PLAYING
        if self.state.win_acknowledged:
            return GameStatus.WON_BUT_UNPLAYABLE
        return GameStatus.LOST

    def keep_playing(self) -> None:
        """Acknowledge the win so play can continue past the winning tile."""
        self.state.win_acknowledged = True

    # -- snapshots ------------------------------------------------------------

    def to_snapshot(self) -> bytes:
        payload: dict[str, Any] = {
            "format": SNAPSHOT_FORMAT,
            "version": SNAPSHOT_VERSION,
            "settings": self.settings.to_dict(),
            "state": self.state.to_dict(),
            "undo": self._undo_state.to_dict() if self._undo_state else None,
        }
        return (json.dumps(payload, indent=2) + "\n").encode("utf-8")

    def serialize_to_stream(self, sink: BinaryIO) -> None:
        sink.write(self.to_snapshot())

    @classmethod
    def from_snapshot(cls, data: bytes, rng: random.Random | None = None) -> Twenty48Game:
        """Restore a game written by ``to_snapshot``.

        Raises ``CorruptSnapshotError`` if *data* is not a complete snapshot
        of a supported version.
        """
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptSnapshotError(f"snapshot is not valid JSON: {exc}") from exc

        if not isinstance(payload, dict) or payload.get("format") != SNAPSHOT_FORMAT:
            raise CorruptSnapshotError("not a 2048 saved game")
        if payload.get("version") != SNAPSHOT_VERSION:
            raise CorruptSnapshotError(
                f"unsupported snapshot version {payload.get('version')!r}"
            )

        raw_settings = payload.get("settings")
        if not isinstance(raw_settings, dict):
            raise CorruptSnapshotError("settings must be an object")
        try:
            settings = GameSettings(**raw_settings)
        except (TypeError, ValueError) as exc:
            raise CorruptSnapshotError(f"invalid settings: {exc}") from exc

        state = GameState.from_dict(payload.get("state"), settings.rows, settings.columns)
        raw_undo = payload.get("undo")
        undo_state = (
            None
            if raw_undo is None
            else GameState.from_dict(raw_undo, settings.rows, settings.columns)
        )
        return cls._restore(settings, state, undo_state, rng)


# -- helpers ------------------------------------------------------------------


def _lines(board: Board, direction: Direction) -> list[list[tuple[int, int]]]:
    """Cell coordinates of each row/column, ordered from the edge tiles move towards."""
    rows = range(board.rows)
    cols = range(board.columns)
    if direction is Direction.LEFT:
        return [[(r, c) for c in cols] for r in rows]
    if direction is Direction.RIGHT:
        return [[(r, c) for c in reversed(cols)] for r in rows]
    if direction is Direction.UP:
        return [[(r, c) for r in rows] for c in cols]
    return [[(r, c) for r in reversed(rows)] for c in cols]


def _collapse(values: list[int]) -> tuple[list[int], int]:
    """Slide one line towards index 0. Returns the new line and points gained."""
    tiles = [v for v in values if v]
    merged: list[int] = []
    points = 0
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged.append(tiles[i] * 2)
            points += tiles[i] * 2
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    merged.extend([0] * (len(values) - len(merged)))
    return merged, points

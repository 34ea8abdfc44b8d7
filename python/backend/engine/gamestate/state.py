"""Tracks the mutable state of a game in progress and its snapshot codec."""

from __future__ import annotations

from typing import Any

from backend.models.board import Board
from backend.models.errors import CorruptSnapshotError


class GameState:
    """Holds the current board, score, move counter, and win latch."""

    def __init__(
        self,
        board: Board,
        score: int = 0,
        moves: int = 0,
        win_acknowledged: bool = False,
    ) -> None:
        self.board = board
        self.score = score
        self.moves = moves
        # Set once the player chose to keep playing past the winning tile.
        self.win_acknowledged = win_acknowledged

    # -- moves ----------------------------------------------------------------

    def record_move(self, gained: int) -> None:
        self.moves += 1
        self.score += gained

    def copy(self) -> GameState:
        return GameState(
            board=self.board.copy(),
            score=self.score,
            moves=self.moves,
            win_acknowledged=self.win_acknowledged,
        )

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "cells": [row[:] for row in self.board.cells],
            "score": self.score,
            "moves": self.moves,
            "win_acknowledged": self.win_acknowledged,
        }

    @classmethod
    def from_dict(cls, data: Any, rows: int, columns: int) -> GameState:
        """Rebuild a state, raising ``CorruptSnapshotError`` on any mismatch."""
        if not isinstance(data, dict):
            raise CorruptSnapshotError("state must be an object")
        cells = data.get("cells")
        if not isinstance(cells, list) or len(cells) != rows:
            raise CorruptSnapshotError(f"expected {rows} rows of cells")
        for row in cells:
            if not isinstance(row, list) or len(row) != columns:
                raise CorruptSnapshotError(f"expected {columns} cells per row")
            for val in row:
                if not _is_tile(val):
                    raise CorruptSnapshotError(f"invalid cell value {val!r}")

        score = data.get("score")
        moves = data.get("moves")
        for name, val in (("score", score), ("moves", moves)):
            if not _is_int(val) or val < 0:
                raise CorruptSnapshotError(f"invalid {name} {val!r}")
        won = data.get("win_acknowledged")
        if not isinstance(won, bool):
            raise CorruptSnapshotError(f"invalid win_acknowledged {won!r}")

        board = Board(rows=rows, columns=columns, cells=[row[:] for row in cells])
        return cls(board=board, score=score, moves=moves, win_acknowledged=won)


def _is_int(val: Any) -> bool:
    return isinstance(val, int) and not isinstance(val, bool)


def _is_tile(val: Any) -> bool:
    if not _is_int(val):
        return False
    return val == 0 or (val >= 2 and val & (val - 1) == 0)

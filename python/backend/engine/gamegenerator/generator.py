"""Spawns new tiles onto 2048 boards."""

from __future__ import annotations

import random

from backend.models.board import Board
from backend.models.settings import GameSettings


class TileSpawner:
    """Places 2s (or, occasionally, 4s) on random empty cells."""

    def __init__(self, four_probability: float, rng: random.Random | None = None) -> None:
        self.four_probability = four_probability
        self.rng = rng or random.Random()

    def spawn(self, board: Board) -> tuple[int, int] | None:
        """Place one tile on *board* in-place.

        Returns the cell that was filled, or ``None`` if the board is full.
        """
        empty = board.empty_cells()
        if not empty:
            return None
        r, c = self.rng.choice(empty)
        board.cells[r][c] = 4 if self.rng.random() < self.four_probability else 2
        return r, c

    def generate(self, settings: GameSettings) -> Board:
        """Return a fresh board with the two starting tiles."""
        board = Board.empty(settings.rows, settings.columns)
        self.spawn(board)
        self.spawn(board)
        return board

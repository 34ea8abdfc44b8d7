"""Board model for the 2048 game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class GameStatus(StrEnum):
    PLAYING = "playing"
    WIN = "win"
    LOST = "lost"
    WON_BUT_UNPLAYABLE = "won_but_unplayable"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.LOST, GameStatus.WON_BUT_UNPLAYABLE)


@dataclass
class Board:
    """Represents the 2048 grid.

    Cells are stored as a 2D list of ints. 0 represents an empty cell.
    """

    rows: int
    columns: int
    cells: list[list[int]]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def empty(cls, rows: int, columns: int) -> Board:
        return cls(rows=rows, columns=columns, cells=[[0] * columns for _ in range(rows)])

    @classmethod
    def from_flat(cls, rows: int, columns: int, flat: list[int]) -> Board:
        """Create a board from a flat row-major cell list.

        Example::

            Board.from_flat(2, 2, [2, 0, 0, 4])
        """
        if len(flat) != rows * columns:
            raise ValueError(
                f"Expected {rows * columns} cells for a {rows}×{columns} board, "
                f"got {len(flat)}."
            )
        cells = [list(flat[r * columns : (r + 1) * columns]) for r in range(rows)]
        return cls(rows=rows, columns=columns, cells=cells)

    # -- queries --------------------------------------------------------------

    def get_cell(self, row: int, col: int) -> int:
        return self.cells[row][col]

    def empty_cells(self) -> list[tuple[int, int]]:
        return [
            (r, c)
            for r in range(self.rows)
            for c in range(self.columns)
            if self.cells[r][c] == 0
        ]

    def max_tile(self) -> int:
        return max(max(row) for row in self.cells)

    def has_moves(self) -> bool:
        """Check if any direction would change the board."""
        for r in range(self.rows):
            for c in range(self.columns):
                val = self.cells[r][c]
                if val == 0:
                    return True
                if c + 1 < self.columns and self.cells[r][c + 1] == val:
                    return True
                if r + 1 < self.rows and self.cells[r + 1][c] == val:
                    return True
        return False

    def copy(self) -> Board:
        return Board(
            rows=self.rows,
            columns=self.columns,
            cells=[row[:] for row in self.cells],
        )

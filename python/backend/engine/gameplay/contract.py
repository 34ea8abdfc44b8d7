"""The surface a game engine exposes to the session controller."""

from __future__ import annotations

from typing import BinaryIO, Protocol

from backend.models.board import Direction, GameStatus


class GameEngine(Protocol):
    rows: int
    columns: int

    def move(self, direction: Direction) -> bool: ...

    def undo(self) -> bool: ...

    def is_undo_possible(self) -> bool: ...

    def keep_playing(self) -> None: ...

    def get_score(self) -> int: ...

    def get_move_count(self) -> int: ...

    def get_cell_value(self, row: int, column: int) -> int: ...

    def get_game_status(self) -> GameStatus: ...

    def serialize_to_stream(self, sink: BinaryIO) -> None: ...

    def to_snapshot(self) -> bytes: ...

"""Game settings shared by the engine, the session and the CLI."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SIZE = 4
DEFAULT_WINNING_VALUE = 2048
DEFAULT_FOUR_PROBABILITY = 0.1


@dataclass(frozen=True)
class GameSettings:
    rows: int = DEFAULT_SIZE
    columns: int = DEFAULT_SIZE
    winning_value: int = DEFAULT_WINNING_VALUE
    four_probability: float = DEFAULT_FOUR_PROBABILITY

    def __post_init__(self) -> None:
        for name in ("rows", "columns", "winning_value"):
            val = getattr(self, name)
            if not isinstance(val, int) or isinstance(val, bool):
                raise ValueError(f"{name} must be an integer, got {val!r}.")
        if not isinstance(self.four_probability, (int, float)) or isinstance(
            self.four_probability, bool
        ):
            raise ValueError(f"four_probability must be a number, got {self.four_probability!r}.")
        if self.rows < 2 or self.columns < 2:
            raise ValueError(
                f"A board needs at least 2 rows and 2 columns, got {self.rows}×{self.columns}."
            )
        if self.winning_value < 4 or self.winning_value & (self.winning_value - 1):
            raise ValueError(
                f"Winning value must be a power of two of at least 4, got {self.winning_value}."
            )
        if not 0.0 <= self.four_probability <= 1.0:
            raise ValueError(
                f"Spawn probability must lie in [0, 1], got {self.four_probability}."
            )

    def to_dict(self) -> dict[str, int | float]:
        return {
            "rows": self.rows,
            "columns": self.columns,
            "winning_value": self.winning_value,
            "four_probability": self.four_probability,
        }

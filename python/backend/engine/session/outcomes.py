"""Values the session controller hands back to a frontend."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from backend.models.board import GameStatus


class ProtocolState(StrEnum):
    ACTIVE = "active"
    RESOLVING = "resolving"
    CLOSED = "closed"


class DecisionKind(StrEnum):
    CONTINUE_AFTER_WIN = "continue_after_win"
    UNDO_AFTER_TERMINATION = "undo_after_termination"


@dataclass(frozen=True)
class DecisionRequest:
    """A question the frontend must answer before play can go on."""

    kind: DecisionKind
    high_score_was_just_set: bool = False


class Outcome(StrEnum):
    OK = "ok"
    IGNORED = "ignored"
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"
    CORRUPT_SNAPSHOT = "corrupt_snapshot"


@dataclass(frozen=True)
class IntentResult:
    outcome: Outcome
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class SessionView:
    """Everything a frontend needs to draw the session."""

    cells: tuple[tuple[int, ...], ...]
    score: int
    move_count: int
    high_score: int
    undo_available: bool
    state: ProtocolState
    status: GameStatus | None
    pending_decision: DecisionRequest | None

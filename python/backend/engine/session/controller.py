"""Session controller — turn sequencing, undo negotiation and end-of-game resolution.

A frontend feeds discrete intents in (move, undo, save, load, close, help)
and draws whatever ``view()`` reports.  When a move ends the game the
controller does not close by itself: it first records the high score, then
asks the frontend whether the fatal move should be taken back.

Decision points are answered with ``decide_continue`` / ``decide_undo``.
Each one resolves exactly once; a repeated answer is ignored, and no move
is accepted while a question is outstanding.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

from backend.engine.gameplay import GameEngine, Twenty48Game
from backend.engine.session.outcomes import (
    DecisionKind,
    DecisionRequest,
    IntentResult,
    Outcome,
    ProtocolState,
    SessionView,
)
from backend.models.board import Direction, GameStatus
from backend.models.errors import CorruptSnapshotError, LoadFailedError, SaveFailedError
from backend.models.highscore import HighScoreStore
from backend.models.settings import GameSettings
from backend.persistence.session_store import load_session, save_session

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "The goal of 2048 is to combine tiles of the same value until you reach 2048. "
    "When the game starts two random tiles are spawned. "
    "Each move shifts every tile up, down, left or right. "
    "Two neighbouring tiles of the same value in the direction of movement "
    "combine into one tile. "
    "After every move a 2 or a 4 is spawned on a random empty cell.\n"
    "On every move other options exist:\n"
    "\t- Undo your last move with U or Ctrl + Z.\n"
    "\t- Show this help with H.\n"
    "\t- Save the current game with P.\n"
    "\t- Load a previously saved game with L.\n"
    "\t- Quit with Q.\n"
    "Enjoy the game and good luck!"
)


class SessionController:
    """Owns the current game and decides when the session ends."""

    def __init__(self, engine: GameEngine | None, store: HighScoreStore) -> None:
        self._engine = engine
        self._store = store
        self.state = ProtocolState.ACTIVE
        self.pending_decision: DecisionRequest | None = None
        self.pending_undo_offer = False
        self.high_score = store.value
        self.high_score_was_just_set = False
        self._sync_high_score()

    @classmethod
    def new_game(
        cls,
        store: HighScoreStore,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> SessionController:
        return cls(Twenty48Game(settings, rng), store)

    @classmethod
    def from_file(
        cls,
        source: Path,
        store: HighScoreStore,
        rng: random.Random | None = None,
    ) -> SessionController:
        """Start a session from a saved game. Load errors propagate.

        A saved game that is already won or over opens its decision point
        straight away, as if its last move had just been played.
        """
        controller = cls(load_session(source, rng=rng), store)
        controller.evaluate_after_move()
        return controller

    # -- queries --------------------------------------------------------------

    @property
    def engine(self) -> GameEngine | None:
        return self._engine

    @property
    def score(self) -> int:
        return self._engine.get_score() if self._engine else 0

    @property
    def move_count(self) -> int:
        return self._engine.get_move_count() if self._engine else 0

    @property
    def undo_available(self) -> bool:
        return self._engine is not None and self._engine.is_undo_possible()

    @property
    def is_closed(self) -> bool:
        return self.state is ProtocolState.CLOSED

    def view(self) -> SessionView:
        engine = self._engine
        if engine is None:
            cells: tuple[tuple[int, ...], ...] = ()
            status = None
        else:
            cells = tuple(
                tuple(engine.get_cell_value(r, c) for c in range(engine.columns))
                for r in range(engine.rows)
            )
            status = engine.get_game_status()
        return SessionView(
            cells=cells,
            score=self.score,
            move_count=self.move_count,
            high_score=self.high_score,
            undo_available=self.undo_available,
            state=self.state,
            status=status,
            pending_decision=self.pending_decision,
        )

    def request_help(self) -> str:
        return HELP_TEXT

    # -- play -----------------------------------------------------------------

    def attempt_move(self, direction: Direction) -> bool:
        """Forward a move to the engine. Returns True if the board changed."""
        if self._engine is None or not self._accepting_intents:
            return False
        if not self._engine.move(direction):
            return False
        self.pending_undo_offer = False
        self._sync_high_score()
        self.evaluate_after_move()
        return True

    def attempt_undo(self) -> bool:
        if self._engine is None or not self._accepting_intents:
            return False
        if not self._engine.undo():
            return False
        self.pending_undo_offer = False
        return True

    def evaluate_after_move(self) -> DecisionRequest | None:
        """Check the game status and open a decision point if one is due."""
        if self._engine is None or self.state is not ProtocolState.ACTIVE:
            return None
        status = self._engine.get_game_status()
        if status is GameStatus.WIN:
            self.pending_decision = DecisionRequest(DecisionKind.CONTINUE_AFTER_WIN)
            logger.debug("Winning tile reached; asking whether to continue")
            return self.pending_decision
        if status.is_terminal:
            self.pending_undo_offer = True
            logger.debug("Move ended the game (%s)", status)
            return self._resolve()
        return None

    # -- decisions ------------------------------------------------------------

    def decide_continue(self, keep_playing: bool) -> DecisionRequest | None:
        """Answer the continue-after-win question.

        Stopping closes the session without an undo offer.  Continuing
        re-checks the board, which may already be unplayable.
        """
        if not self._awaiting(DecisionKind.CONTINUE_AFTER_WIN):
            return None
        self.pending_decision = None
        if not keep_playing:
            self.pending_undo_offer = False
            return self._resolve()
        self._engine.keep_playing()
        return self.evaluate_after_move()

    def decide_undo(self, accept: bool) -> bool:
        """Answer the undo offer. Returns True if play resumed."""
        if not self._awaiting(DecisionKind.UNDO_AFTER_TERMINATION):
            return False
        self.pending_decision = None
        self.pending_undo_offer = False
        if accept and self._engine.undo():
            self.state = ProtocolState.ACTIVE
            logger.debug("Fatal move undone; session resumed")
            return True
        self._close()
        return False

    def request_close(self) -> DecisionRequest | None:
        """Every close goes through resolution so no undo offer is skipped."""
        if self.state is ProtocolState.CLOSED:
            return None
        if self.pending_decision is not None:
            return self.pending_decision
        return self._resolve()

    # -- persistence ----------------------------------------------------------

    def save(self, destination: Path) -> IntentResult:
        if self._engine is None or self.state is ProtocolState.CLOSED:
            return IntentResult(Outcome.IGNORED)
        try:
            save_session(self._engine, destination)
        except SaveFailedError as exc:
            return IntentResult(Outcome.SAVE_FAILED, str(exc))
        return IntentResult(Outcome.OK, f"Game saved to {destination}")

    def load(self, source: Path) -> IntentResult:
        """Replace the current game with a saved one; unchanged on failure."""
        if not self._accepting_intents:
            return IntentResult(Outcome.IGNORED)
        try:
            engine = load_session(source)
        except CorruptSnapshotError as exc:
            return IntentResult(Outcome.CORRUPT_SNAPSHOT, f"The saved game is corrupted: {exc}")
        except LoadFailedError as exc:
            return IntentResult(Outcome.LOAD_FAILED, str(exc))
        self._engine = engine
        self.pending_undo_offer = False
        self._sync_high_score()
        self.evaluate_after_move()
        return IntentResult(Outcome.OK, f"Game loaded from {source}")

    # -- helpers --------------------------------------------------------------

    @property
    def _accepting_intents(self) -> bool:
        return self.state is ProtocolState.ACTIVE and self.pending_decision is None

    def _awaiting(self, kind: DecisionKind) -> bool:
        return self.pending_decision is not None and self.pending_decision.kind is kind

    def _sync_high_score(self) -> None:
        if self.score > self.high_score:
            self.high_score = self.score

    def _resolve(self) -> DecisionRequest | None:
        # The record is written before any undo offer so declining never loses it.
        self.state = ProtocolState.RESOLVING
        self.high_score_was_just_set = self._store.record_if_higher(self.high_score)
        if self.pending_undo_offer and self.undo_available:
            self.pending_decision = DecisionRequest(
                DecisionKind.UNDO_AFTER_TERMINATION,
                high_score_was_just_set=self.high_score_was_just_set,
            )
            logger.debug("Offering to undo the last move")
            return self.pending_decision
        self.pending_undo_offer = False
        self._close()
        return None

    def _close(self) -> None:
        self.state = ProtocolState.CLOSED
        logger.debug("Session closed at score %d after %d moves", self.score, self.move_count)

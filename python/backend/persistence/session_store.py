"""Save and load complete games to user-chosen files."""

from __future__ import annotations

import logging
import random
from pathlib import Path

from backend.engine.gameplay import GameEngine, Twenty48Game
from backend.models.errors import LoadFailedError, SaveFailedError
from backend.persistence.fs import atomic_write_bytes

logger = logging.getLogger(__name__)

SAVE_SUFFIX = ".dat"


def save_session(engine: GameEngine, destination: Path) -> None:
    """Write *engine*'s snapshot to *destination* as one atomic unit.

    Raises ``SaveFailedError``; a pre-existing file is never truncated.
    """
    destination = Path(destination)
    try:
        atomic_write_bytes(destination, engine.to_snapshot())
    except OSError as exc:
        logger.warning("Could not save game to %s: %s", destination, exc)
        raise SaveFailedError(f"The game could not be saved to {destination}") from exc
    logger.debug("Saved game to %s", destination)


def load_session(source: Path, rng: random.Random | None = None) -> Twenty48Game:
    """Read a game saved by ``save_session``.

    Raises ``LoadFailedError`` if the file cannot be read and
    ``CorruptSnapshotError`` if its content is not a valid snapshot.
    """
    source = Path(source)
    try:
        data = source.read_bytes()
    except OSError as exc:
        logger.warning("Could not read saved game %s: %s", source, exc)
        raise LoadFailedError(f"The saved game {source} is missing or unreadable") from exc
    engine = Twenty48Game.from_snapshot(data, rng=rng)
    logger.debug("Loaded game from %s", source)
    return engine

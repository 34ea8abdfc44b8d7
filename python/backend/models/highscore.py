"""High score persistence.

The record is a single 4-byte big-endian signed integer.  A missing file
means "no record yet" and reads as 0.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

from backend.models.errors import HighScoreError
from backend.persistence.fs import atomic_write_bytes

logger = logging.getLogger(__name__)

HIGHSCORE_FILENAME = "HighScore.dat"

_RECORD = struct.Struct(">i")


def encode_record(value: int) -> bytes:
    return _RECORD.pack(value)


def decode_record(data: bytes) -> int:
    if len(data) != _RECORD.size:
        raise HighScoreError(f"expected {_RECORD.size} bytes, got {len(data)}")
    (value,) = _RECORD.unpack(data)
    if value < 0:
        raise HighScoreError(f"negative high score {value}")
    return value


class HighScoreStore:
    """Loads and records the single best score.

    Read and write failures never propagate: they are logged, kept in
    ``last_warning`` and the store carries on with its in-memory value.
    Concurrent sessions sharing one file are last-writer-wins.
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath
        self.value: int = 0
        self.last_warning: str | None = None
        self.load()

    # -- persistence ----------------------------------------------------------

    def load(self) -> int:
        self.value = 0
        if not self.filepath.exists():
            return self.value
        try:
            self.value = decode_record(self.filepath.read_bytes())
        except (OSError, HighScoreError) as exc:
            self._warn(f"Failed to load the high score from {self.filepath}: {exc}")
        return self.value

    def record_if_higher(self, candidate: int) -> bool:
        """Persist *candidate* if it beats the current record.

        Returns True when a new record was set, even if writing it to disk
        failed.
        """
        if candidate <= self.value:
            return False
        self.value = candidate
        try:
            atomic_write_bytes(self.filepath, encode_record(candidate))
        except (OSError, struct.error) as exc:
            self._warn(f"Failed to save the high score to {self.filepath}: {exc}")
        else:
            logger.debug("New high score %d written to %s", candidate, self.filepath)
        return True

    # -- helpers --------------------------------------------------------------

    def _warn(self, message: str) -> None:
        self.last_warning = message
        logger.warning(message)

"""Exceptions raised by the persistence layer and the engine codec."""


class Twenty48Error(Exception):
    """Base exception for the game backend."""


class PersistenceError(Twenty48Error):
    """Base exception for save/load errors."""


class SaveFailedError(PersistenceError):
    """Raised when a game could not be written. Any existing file is left intact."""


class LoadFailedError(PersistenceError):
    """Raised when a saved game is missing or cannot be read."""


class CorruptSnapshotError(LoadFailedError):
    """Raised when snapshot data does not match the expected structure or version."""


class HighScoreError(PersistenceError):
    """Raised when the high-score record cannot be decoded."""

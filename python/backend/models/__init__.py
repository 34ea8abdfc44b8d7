from backend.models.board import Board, Direction, GameStatus
from backend.models.highscore import HighScoreStore
from backend.models.settings import GameSettings

__all__ = ["Board", "Direction", "GameSettings", "GameStatus", "HighScoreStore"]

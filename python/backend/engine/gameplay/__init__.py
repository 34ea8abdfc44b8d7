from backend.engine.gameplay.contract import GameEngine
from backend.engine.gameplay.game import Twenty48Game

__all__ = ["GameEngine", "Twenty48Game"]

"""Classic Snake: core game engine."""

from classic_snake.engine import GameEngine, GameState
from classic_snake.food import Food
from classic_snake.grid import GamePiece, Grid
from classic_snake.settings import Settings
from classic_snake.snake import Direction, Snake

__all__ = [
    "Direction",
    "Food",
    "GameEngine",
    "GamePiece",
    "GameState",
    "Grid",
    "Settings",
    "Snake",
]

"""Tick-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

import numpy as np

from classic_snake.food import Food
from classic_snake.grid import Grid
from classic_snake.settings import Settings
from classic_snake.snake import Direction, Snake
from classic_snake.surface import (
    GAME_OVER_FONT_SIZE,
    GAME_OVER_TEXT_COLOR,
    PANEL_COLOR,
)

if TYPE_CHECKING:
    from classic_snake.surface import Surface

logger = logging.getLogger(__name__)

# Buffered input is resolved in this order; later entries win ties.
_RESOLUTION_ORDER = (
    Direction.LEFT,
    Direction.RIGHT,
    Direction.UP,
    Direction.DOWN,
)

_PANEL_PADDING = 10


class GameState(str, enum.Enum):
    """Lifecycle states of a game."""

    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameEngine:
    """Single-player, tick-based snake engine.

    The engine is built once per drawing surface and stays inert
    (:attr:`GameState.GAME_OVER`) until :meth:`start_game` is called. Each
    call to :meth:`update` advances the game by one tick; the caller owns
    the timer and should re-read :attr:`speed` after every tick, since the
    interval shrinks as the score grows.
    """

    def __init__(
        self,
        surface_width: int,
        surface_height: int,
        settings: Settings | None = None,
        seed: int | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.surface_width = surface_width
        self.surface_height = surface_height
        self.grid = Grid.from_surface(surface_width, surface_height, self.settings)
        opening = Snake.from_settings(self.settings)
        if not all(self.grid.in_bounds(piece) for piece in opening.body):
            raise ValueError(
                f"A {surface_width}x{surface_height} px surface "
                f"({self.grid.columns}x{self.grid.rows} cells) cannot hold the "
                f"starting snake of length {len(opening)} at "
                f"({self.settings.start_x}, {self.settings.start_y}).",
            )
        self.rng = np.random.default_rng(seed)

        self.state = GameState.GAME_OVER
        self.score = 0
        self.high_score = 0
        self.speed = self.settings.initial_speed
        self.tick = 0
        self.snake: Snake | None = None
        self.food: Food | None = None
        self._pending: set[Direction] = set()

    @property
    def playing(self) -> bool:
        return self.state == GameState.PLAYING

    def start_game(self) -> None:
        """Begin a fresh game. Legal in any state."""
        self.score = 0
        self.speed = self.settings.initial_speed
        self.tick = 0
        self._pending.clear()

        self.snake = Snake.from_settings(self.settings)
        self.food = Food(rng=self.rng)
        self.food.generate(
            self.grid.max_width, self.grid.max_height, self.snake.body,
        )
        self.state = GameState.PLAYING
        logger.info(
            "Game started (grid=%dx%d, high score %d).",
            self.grid.columns, self.grid.rows, self.high_score,
        )

    def key_down(self, key: Direction | str) -> None:
        """Buffer a direction request until the next tick.

        Accepts a :class:`Direction` or its name. Unknown keys, and any
        input while the game is over, are ignored.
        """
        direction = key if isinstance(key, Direction) else Direction.from_name(key)
        if direction is None:
            logger.debug("Ignoring unrecognised key %r.", key)
            return
        if not self.playing:
            return
        self._pending.add(direction)

    def update(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict. Does nothing
        while the game is over.
        """
        if not self.playing:
            return self.get_state()
        assert self.snake is not None and self.food is not None  # noqa: S101

        # Each pending direction is checked against the heading as left by
        # the previous check, so e.g. LEFT+RIGHT while heading UP ends LEFT.
        for direction in _RESOLUTION_ORDER:
            if direction in self._pending:
                self.snake.set_direction(direction)
        self._pending.clear()

        self.snake.move()
        self.tick += 1
        head = self.snake.head

        if not self.grid.in_bounds(head):
            self._set_game_over("wall")
            return self.get_state()

        if self.snake.check_self_collision():
            self._set_game_over("self")
            return self.get_state()

        if head == self.food.position:
            self._eat_food()

        return self.get_state()

    def _eat_food(self) -> None:
        assert self.snake is not None and self.food is not None  # noqa: S101
        self.score += 1
        self.snake.grow()
        self.food.generate(
            self.grid.max_width, self.grid.max_height, self.snake.body,
        )
        self.speed = self.settings.next_speed(self.speed)

    def _set_game_over(self, cause: str) -> None:
        self.state = GameState.GAME_OVER
        if self.score > self.high_score:
            self.high_score = self.score
        logger.info(
            "Game over (%s collision) at tick %d with score %d.",
            cause, self.tick, self.score,
        )

    def game_over_text(self) -> str:
        return f"Game Over!\nScore: {self.score}\nPress Start to play again"

    def draw(self, surface: Surface) -> None:
        """Render food, snake, and (when over) the game-over panel."""
        if self.food is not None:
            self.food.draw(surface, self.settings)
        if self.snake is not None:
            self.snake.draw(surface, self.settings)

        if self.state != GameState.GAME_OVER:
            return

        text = self.game_over_text()
        text_w, text_h = surface.measure_text(text, GAME_OVER_FONT_SIZE)
        field_w, field_h = self.grid.pixel_size(self.settings)
        x = (field_w - text_w) // 2
        y = (field_h - text_h) // 2
        surface.fill_rect(
            (
                x - _PANEL_PADDING,
                y - _PANEL_PADDING,
                text_w + 2 * _PANEL_PADDING,
                text_h + 2 * _PANEL_PADDING,
            ),
            PANEL_COLOR,
        )
        surface.draw_text((x, y), text, GAME_OVER_TEXT_COLOR, GAME_OVER_FONT_SIZE)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "state": self.state.value,
            "score": self.score,
            "high_score": self.high_score,
            "speed": self.speed,
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict() if self.snake is not None else None,
            "food": self.food.to_dict() if self.food is not None else None,
        }

"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from typing import TYPE_CHECKING

from classic_snake.grid import GamePiece
from classic_snake.surface import BODY_COLOR, HEAD_COLOR

if TYPE_CHECKING:
    from classic_snake.settings import Settings
    from classic_snake.surface import Surface


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values in grid cells."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @classmethod
    def from_name(cls, name: str) -> Direction | None:
        """Look up a direction by case-insensitive name, or ``None``."""
        return cls.__members__.get(name.strip().upper())


# Pairs that would cause an instant 180° reversal.
OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of :class:`GamePiece` segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Every segment trails
    its predecessor by exactly one tick.
    """

    def __init__(
        self,
        start_x: int = 10,
        start_y: int = 5,
        direction: Direction = Direction.RIGHT,
        length: int = 6,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        self.body: deque[GamePiece] = deque(
            GamePiece(start_x - dx * i, start_y - dy * i) for i in range(length)
        )
        self.direction = direction

    @classmethod
    def from_settings(cls, settings: Settings) -> Snake:
        """Build the starting snake, heading right."""
        return cls(
            settings.start_x,
            settings.start_y,
            Direction.RIGHT,
            length=settings.initial_length,
        )

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> GamePiece:
        """Return the head coordinate."""
        return self.body[0]

    def set_direction(self, new_direction: Direction) -> None:
        """Change direction, ignoring 180° reversals."""
        if OPPOSITES[new_direction] != self.direction:
            self.direction = new_direction

    def next_head(self) -> GamePiece:
        """Compute the next head position without moving."""
        return self.head.shifted(*self.direction.value)

    def move(self) -> None:
        """Advance one cell in the current heading.

        Each follower takes its predecessor's old cell, which with a deque is
        a push at the head and a pop at the tail. Bounds are not checked.
        """
        self.body.appendleft(self.next_head())
        self.body.pop()

    def grow(self) -> None:
        """Append a segment on top of the tail; it separates on the next move."""
        self.body.append(self.body[-1])

    def occupies(self, piece: GamePiece) -> bool:
        """Check whether the snake occupies a given cell."""
        return piece in self.body

    def check_self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def draw(self, surface: Surface, settings: Settings) -> None:
        for i, seg in enumerate(self.body):
            color = HEAD_COLOR if i == 0 else BODY_COLOR
            surface.fill_ellipse(seg.to_pixels(settings), color)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [seg.to_list() for seg in self.body],
            "direction": self.direction.name.lower(),
        }

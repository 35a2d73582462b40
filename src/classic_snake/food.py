"""Food placement logic."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from classic_snake.grid import FOOD_MARGIN, GamePiece
from classic_snake.surface import FOOD_COLOR

if TYPE_CHECKING:
    from classic_snake.settings import Settings
    from classic_snake.surface import Surface


class Food:
    """A single food item.

    Uses a NumPy RNG so placement is reproducible when seeded.
    """

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position = GamePiece(0, 0)

    def generate(
        self,
        max_width: int,
        max_height: int,
        occupied: Iterable[GamePiece],
    ) -> GamePiece:
        """Move the food to a random free cell and return it.

        Samples ``x`` in ``[2, max_width)`` and ``y`` in ``[2, max_height)``
        until the cell is not in *occupied*. Assumes *occupied* never covers
        the whole sampling region; the grid is far larger than any snake
        reachable in play, so no retry cap is applied.
        """
        taken = set(occupied)
        while True:
            candidate = GamePiece(
                int(self.rng.integers(FOOD_MARGIN, max_width)),
                int(self.rng.integers(FOOD_MARGIN, max_height)),
            )
            if candidate not in taken:
                self.position = candidate
                return candidate

    def draw(self, surface: Surface, settings: Settings) -> None:
        surface.fill_ellipse(self.position.to_pixels(settings), FOOD_COLOR)

    def to_dict(self) -> dict:
        return {"position": self.position.to_list()}

"""Drawing-surface protocol and the game's fixed palette.

The engine only ever talks to a :class:`Surface`; any toolkit that can fill
an ellipse or rectangle and draw text can host the game.
"""

from __future__ import annotations

from typing import Protocol

Color = tuple[int, int, int] | tuple[int, int, int, int]
Box = tuple[int, int, int, int]

HEAD_COLOR: Color = (0, 0, 0)
BODY_COLOR: Color = (0, 100, 0)
FOOD_COLOR: Color = (139, 0, 0)
BACKGROUND_COLOR: Color = (255, 255, 255)
PANEL_COLOR: Color = (255, 255, 255, 200)
GAME_OVER_TEXT_COLOR: Color = (255, 0, 0)

GAME_OVER_FONT_SIZE = 16


class Surface(Protocol):
    """Minimal drawing capability the engine renders into.

    Boxes are ``(left, top, width, height)`` in pixels.
    """

    def fill_ellipse(self, box: Box, color: Color) -> None: ...

    def fill_rect(self, box: Box, color: Color) -> None: ...

    def draw_text(
        self, position: tuple[int, int], text: str, color: Color, size: int,
    ) -> None: ...

    def measure_text(self, text: str, size: int) -> tuple[int, int]: ...

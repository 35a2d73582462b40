"""Pillow-backed drawing surface and JPEG snapshot export.

:class:`PillowSurface` is the headless surface used for snapshots, the CLI
renderer, and the HTTP server.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from classic_snake.surface import BACKGROUND_COLOR, Box, Color

if TYPE_CHECKING:
    from classic_snake.engine import GameEngine

logger = logging.getLogger(__name__)

CAPTION_COLOR: Color = (128, 0, 128)
CAPTION_FONT_SIZE = 12
CAPTION_HEIGHT = 30


class PillowSurface:
    """:class:`Surface` backed by an RGB ``PIL.Image``.

    Drawing happens in RGBA mode so translucent fills blend with what is
    already on the image.
    """

    def __init__(
        self, width: int, height: int, background: Color = BACKGROUND_COLOR,
    ) -> None:
        self.image = Image.new("RGB", (width, height), background[:3])
        self._draw = ImageDraw.Draw(self.image, "RGBA")
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def _font(self, size: int):
        if size not in self._fonts:
            self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]

    def fill_ellipse(self, box: Box, color: Color) -> None:
        left, top, width, height = box
        self._draw.ellipse(
            (left, top, left + width - 1, top + height - 1), fill=color,
        )

    def fill_rect(self, box: Box, color: Color) -> None:
        left, top, width, height = box
        self._draw.rectangle(
            (left, top, left + width - 1, top + height - 1), fill=color,
        )

    def draw_text(
        self, position: tuple[int, int], text: str, color: Color, size: int,
    ) -> None:
        self._draw.multiline_text(
            position, text, fill=color, font=self._font(size), align="center",
        )

    def measure_text(self, text: str, size: int) -> tuple[int, int]:
        _, _, right, bottom = self._draw.multiline_textbbox(
            (0, 0), text, font=self._font(size), align="center",
        )
        return int(right), int(bottom)


def _render(engine: GameEngine) -> PillowSurface:
    surface = PillowSurface(engine.surface_width, engine.surface_height)
    engine.draw(surface)
    return surface


def render_frame(engine: GameEngine) -> Image.Image:
    """Render the engine's current scene at its surface size."""
    return _render(engine).image


def _captioned_frame(engine: GameEngine, caption: bool) -> Image.Image:
    surface = _render(engine)
    if caption:
        text = f"I scored: {engine.score} and my Highscore is {engine.high_score}"
        surface.fill_rect(
            (0, 0, engine.surface_width, CAPTION_HEIGHT), BACKGROUND_COLOR,
        )
        width, height = surface.measure_text(text, CAPTION_FONT_SIZE)
        surface.draw_text(
            (
                (engine.surface_width - width) // 2,
                (CAPTION_HEIGHT - height) // 2,
            ),
            text,
            CAPTION_COLOR,
            CAPTION_FONT_SIZE,
        )
    return surface.image


def snapshot_bytes(engine: GameEngine, caption: bool = True) -> bytes:
    """Encode the current scene as JPEG bytes."""
    buf = io.BytesIO()
    _captioned_frame(engine, caption).save(buf, format="JPEG")
    return buf.getvalue()


def save_snapshot(
    engine: GameEngine, path: str | Path, caption: bool = True,
) -> Path:
    """Write the current scene to a JPEG file and return its path."""
    p = Path(path)
    if not p.suffix:
        p = p.with_suffix(".jpg")
    p.parent.mkdir(parents=True, exist_ok=True)
    _captioned_frame(engine, caption).save(p, format="JPEG")
    logger.info("Snapshot saved to %s", p)
    return p

"""pygame window shell: timer, keyboard input, score labels, snapshots."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import pygame

from classic_snake.engine import GameEngine
from classic_snake.render import save_snapshot
from classic_snake.settings import Settings
from classic_snake.snake import Direction
from classic_snake.surface import BACKGROUND_COLOR, Box, Color

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[int, Direction] = {
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
}

_START_KEYS = (pygame.K_RETURN, pygame.K_SPACE)
_SNAPSHOT_KEYS = (pygame.K_F12, pygame.K_p)

_LABEL_HEIGHT = 40
_LABEL_FONT_SIZE = 24
_LABEL_COLOR: Color = (0, 0, 0)
_HIGH_SCORE_COLOR: Color = (128, 0, 0)
_FPS = 120


class PygameSurface:
    """Drawing surface backed by a ``pygame.Surface``."""

    def __init__(self, target: pygame.Surface) -> None:
        self.target = target
        self._fonts: dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def fill_ellipse(self, box: Box, color: Color) -> None:
        pygame.draw.ellipse(self.target, color, pygame.Rect(box))

    def fill_rect(self, box: Box, color: Color) -> None:
        if len(color) == 4:
            # pygame.draw ignores alpha, so blend through a temporary layer.
            layer = pygame.Surface(box[2:], pygame.SRCALPHA)
            layer.fill(color)
            self.target.blit(layer, box[:2])
        else:
            pygame.draw.rect(self.target, color, pygame.Rect(box))

    def draw_text(
        self, position: tuple[int, int], text: str, color: Color, size: int,
    ) -> None:
        font = self._font(size)
        block_w, _ = self.measure_text(text, size)
        x, y = position
        for line in text.split("\n"):
            rendered = font.render(line, True, color)
            self.target.blit(rendered, (x + (block_w - rendered.get_width()) // 2, y))
            y += font.get_linesize()

    def measure_text(self, text: str, size: int) -> tuple[int, int]:
        font = self._font(size)
        lines = text.split("\n")
        width = max(font.size(line)[0] for line in lines)
        return width, font.get_linesize() * len(lines)


class DesktopShell:
    """Window that owns the tick timer and forwards input to the engine.

    The timer is emulated with a millisecond accumulator that fires once
    per :attr:`GameEngine.speed` and is re-armed after each tick.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        settings: Settings | None = None,
        seed: int | None = None,
        snapshot_dir: str | Path = ".",
    ) -> None:
        self.width = width
        self.height = height
        self.engine = GameEngine(width, height, settings=settings, seed=seed)
        self.snapshot_dir = Path(snapshot_dir)
        self.running = False
        self._elapsed_ms = 0

    def handle_key(self, key: int) -> None:
        """Dispatch a pygame key code."""
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key in KEY_BINDINGS:
            self.engine.key_down(KEY_BINDINGS[key])
        elif key in _START_KEYS and not self.engine.playing:
            self.start()
        elif key in _SNAPSHOT_KEYS and not self.engine.playing:
            self.take_snapshot()

    def start(self) -> None:
        self.engine.start_game()
        self._elapsed_ms = 0

    def advance(self, elapsed_ms: int) -> bool:
        """Feed elapsed wall time to the timer. Returns True if a tick ran."""
        if not self.engine.playing:
            return False
        self._elapsed_ms += elapsed_ms
        if self._elapsed_ms < self.engine.speed:
            return False
        self._elapsed_ms = 0
        self.engine.update()
        return True

    def take_snapshot(self) -> Path:
        name = time.strftime("snake-snapshot-%Y%m%d-%H%M%S.jpg")
        return save_snapshot(self.engine, self.snapshot_dir / name)

    def render(self, canvas: PygameSurface) -> None:
        canvas.target.fill(BACKGROUND_COLOR)
        self.engine.draw(canvas)

        label_top = self.height + (_LABEL_HEIGHT - _LABEL_FONT_SIZE) // 2
        canvas.draw_text(
            (10, label_top), f"Score: {self.engine.score}",
            _LABEL_COLOR, _LABEL_FONT_SIZE,
        )
        high = f"High Score: {self.engine.high_score}"
        high_w, _ = canvas.measure_text(high, _LABEL_FONT_SIZE)
        canvas.draw_text(
            (self.width - high_w - 10, label_top), high,
            _HIGH_SCORE_COLOR, _LABEL_FONT_SIZE,
        )

    def run(self) -> None:
        """Open the window and block until it is closed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode(
                (self.width, self.height + _LABEL_HEIGHT),
            )
            pygame.display.set_caption("Classic Snake")
            clock = pygame.time.Clock()
            canvas = PygameSurface(screen)
            self.running = True
            logger.info("Window opened (%dx%d).", self.width, self.height)
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key(event.key)
                self.advance(clock.tick(_FPS))
                self.render(canvas)
                pygame.display.flip()
        finally:
            pygame.quit()

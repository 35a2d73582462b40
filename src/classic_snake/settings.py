"""Tunable constants for the snake game."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Cell size, speed progression, and starting snake layout.

    Speeds are tick intervals in milliseconds, so a *lower* value means a
    faster snake. Supports JSON serialization like any other config file.
    """

    # Geometry
    piece_width: int = 16
    piece_height: int = 16

    # Speed progression (ms per tick)
    initial_speed: int = 150
    speed_decrement: int = 5
    min_speed: int = 40

    # Starting snake
    start_x: int = 10
    start_y: int = 5
    initial_length: int = 6

    def __post_init__(self) -> None:
        if self.piece_width < 1 or self.piece_height < 1:
            raise ValueError("Piece dimensions must be at least 1 pixel.")
        if self.min_speed < 1:
            raise ValueError("min_speed must be at least 1 ms.")
        if self.initial_speed < self.min_speed:
            raise ValueError("initial_speed must not be below min_speed.")
        if self.speed_decrement < 0:
            raise ValueError("speed_decrement must be >= 0.")
        if self.initial_length < 1:
            raise ValueError("initial_length must be at least 1.")

    def next_speed(self, speed: int) -> int:
        """Return the tick interval after one food item, floored at min."""
        return max(self.min_speed, speed - self.speed_decrement)

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write settings to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Settings saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> Settings:
        """Load settings from a JSON file."""
        return cls(**json.loads(Path(path).read_text()))

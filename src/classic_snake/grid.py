"""Grid coordinates and playfield bounds."""

from __future__ import annotations

from dataclasses import dataclass

from classic_snake.settings import Settings

# Food never spawns closer to the top/left edge than this.
FOOD_MARGIN = 2


@dataclass(frozen=True)
class GamePiece:
    """A single grid cell, addressed as (x, y) in cells rather than pixels."""

    x: int
    y: int

    def shifted(self, dx: int, dy: int) -> GamePiece:
        return GamePiece(self.x + dx, self.y + dy)

    def to_pixels(self, settings: Settings) -> tuple[int, int, int, int]:
        """Return the (left, top, width, height) pixel box of this cell."""
        return (
            self.x * settings.piece_width,
            self.y * settings.piece_height,
            settings.piece_width,
            settings.piece_height,
        )

    def to_list(self) -> list[int]:
        return [self.x, self.y]


class Grid:
    """Playfield bounds derived from a drawing surface's pixel size.

    ``max_width`` and ``max_height`` are the largest *valid* head
    coordinates, so the playable area is ``[0, max_width] x [0, max_height]``.
    """

    def __init__(self, max_width: int, max_height: int) -> None:
        if max_width <= FOOD_MARGIN or max_height <= FOOD_MARGIN:
            raise ValueError(
                f"Grid must extend past {FOOD_MARGIN} cells in each "
                "direction to place food.",
            )
        self.max_width = max_width
        self.max_height = max_height

    @classmethod
    def from_surface(
        cls, width_px: int, height_px: int, settings: Settings,
    ) -> Grid:
        """Derive bounds from a surface of ``width_px`` x ``height_px``."""
        return cls(
            width_px // settings.piece_width - 1,
            height_px // settings.piece_height - 1,
        )

    @property
    def columns(self) -> int:
        return self.max_width + 1

    @property
    def rows(self) -> int:
        return self.max_height + 1

    def in_bounds(self, piece: GamePiece) -> bool:
        """Check whether a cell lies on the playfield."""
        return 0 <= piece.x <= self.max_width and 0 <= piece.y <= self.max_height

    def pixel_size(self, settings: Settings) -> tuple[int, int]:
        """Return the pixel extent covered by the playable cells."""
        return (
            self.columns * settings.piece_width,
            self.rows * settings.piece_height,
        )

    def to_dict(self) -> dict:
        return {"max_width": self.max_width, "max_height": self.max_height}

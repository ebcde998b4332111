"""Draw a stitch grid as X-shaped stitches on a fabric-colored canvas.

Layers, bottom to top: fabric fill, woven texture stipple, stitch shadows,
stitches, grid overlay. Nothing here changes the grid itself, so the stitch
count reported for a pattern is the same with or without the overlay.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from PIL import Image, ImageDraw

from text2stitch.config import (
    ACCENT_MIN_GRID_SIZE,
    GRID_TIERS,
    MAX_CANVAS_DIMENSION,
    MIN_STROKE_WIDTH,
    PATTERN_MARGIN,
    SHADOW_ALPHA,
    SHADOW_OFFSET,
    STITCH_INSET,
    TEXTURE_ALPHA,
    TEXTURE_DARKEN,
    TEXTURE_SPACING,
)
from text2stitch.converter import StitchGrid
from text2stitch.errors import PatternTooLargeError
from text2stitch.schema import PatternRequest
from text2stitch.utils import darken, parse_color, with_alpha

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderConfig:
    """Geometry and colors for one render, derived from a PatternRequest."""

    grid_size: int
    stitch_color: tuple[int, int, int]
    fabric_color: tuple[int, int, int]
    show_grid: bool = False
    texture: bool = True
    margin: int = PATTERN_MARGIN
    grid_tiers: tuple[tuple[int, str, int], ...] = GRID_TIERS

    @classmethod
    def from_request(cls, request: PatternRequest, *, texture: bool = True) -> RenderConfig:
        heaviest = max(width for _, _, width in GRID_TIERS)
        return cls(
            grid_size=request.grid_size,
            stitch_color=parse_color(request.stitch_color),
            fabric_color=parse_color(request.fabric_hex),
            show_grid=request.show_grid,
            texture=texture,
            margin=max(PATTERN_MARGIN, math.ceil(1.5 * heaviest)),
        )

    @property
    def stroke_width(self) -> float:
        """Stitch stroke width: max(1.5, grid_size / 6)."""
        return max(MIN_STROKE_WIDTH, self.grid_size / 6)

    @property
    def stroke_px(self) -> int:
        # Pillow only draws whole-pixel line widths
        return max(1, round(self.stroke_width))

    @property
    def accent_size(self) -> int:
        """Side of the center accent square, 0 when cells are too small for one."""
        if self.grid_size < ACCENT_MIN_GRID_SIZE:
            return 0
        return max(2, self.grid_size // 5)


@dataclass
class OutputSurface:
    """A rendered pattern image and the config that produced it."""

    image: Image.Image
    config: RenderConfig
    grid_width: int
    grid_height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def canvas_size(grid: StitchGrid, config: RenderConfig) -> tuple[int, int]:
    """Output size: pattern extent plus the margin on every side."""
    return (
        grid.width * config.grid_size + 2 * config.margin,
        grid.height * config.grid_size + 2 * config.margin,
    )


def _cell_origin(x: int, y: int, config: RenderConfig) -> tuple[int, int]:
    return (config.margin + x * config.grid_size, config.margin + y * config.grid_size)


def _x_segments(ox: int, oy: int, config: RenderConfig) -> list[tuple[int, int, int, int]]:
    near = STITCH_INSET
    far = config.grid_size - 1 - STITCH_INSET
    return [
        (ox + near, oy + near, ox + far, oy + far),
        (ox + far, oy + near, ox + near, oy + far),
    ]


def draw_texture(img: Image.Image, config: RenderConfig) -> None:
    """Stipple a faint woven dot pattern over the whole canvas, in place."""
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    color = with_alpha(darken(config.fabric_color, TEXTURE_DARKEN), TEXTURE_ALPHA)

    points: list[tuple[int, int]] = []
    for row, y in enumerate(range(0, img.height, TEXTURE_SPACING)):
        offset = (TEXTURE_SPACING // 2) if row % 2 else 0
        points.extend((x, y) for x in range(offset, img.width, TEXTURE_SPACING))
    draw.point(points, fill=color)
    img.alpha_composite(layer)


def draw_stitches(img: Image.Image, grid: StitchGrid, config: RenderConfig) -> None:
    """Draw every active cell as an X with a soft shadow and center accent."""
    shadow_layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    shadow_draw = ImageDraw.Draw(shadow_layer)
    shadow_color = (*darken(config.stitch_color, 0.5), SHADOW_ALPHA)

    draw = ImageDraw.Draw(img)
    stitch_color = (*config.stitch_color, 255)
    width = config.stroke_px
    accent = config.accent_size

    cells = grid.active_cells()
    for x, y in cells:
        ox, oy = _cell_origin(x, y, config)
        for x0, y0, x1, y1 in _x_segments(ox + SHADOW_OFFSET, oy + SHADOW_OFFSET, config):
            shadow_draw.line([(x0, y0), (x1, y1)], fill=shadow_color, width=width)

    img.alpha_composite(shadow_layer)

    for x, y in cells:
        ox, oy = _cell_origin(x, y, config)
        for x0, y0, x1, y1 in _x_segments(ox, oy, config):
            draw.line([(x0, y0), (x1, y1)], fill=stitch_color, width=width)
        if accent:
            cx = ox + config.grid_size / 2
            cy = oy + config.grid_size / 2
            half = accent / 2
            draw.rectangle(
                [round(cx - half), round(cy - half), round(cx + half) - 1, round(cy + half) - 1],
                fill=stitch_color,
            )


def _tier_steps(count: int, every: int) -> list[int]:
    # The closing border belongs to every tier, even when count is not a multiple
    return sorted(set(range(0, count + 1, every)) | {count})


def draw_grid(img: Image.Image, grid: StitchGrid, config: RenderConfig) -> None:
    """Overlay grid lines: every cell, every 10 cells, every 50 cells, plus the border."""
    draw = ImageDraw.Draw(img)
    m = config.margin
    gs = config.grid_size
    right = m + grid.width * gs
    bottom = m + grid.height * gs

    for every, color, width in config.grid_tiers:
        for col in _tier_steps(grid.width, every):
            x = m + col * gs
            draw.line([(x, m), (x, bottom)], fill=color, width=width)
        for row in _tier_steps(grid.height, every):
            y = m + row * gs
            draw.line([(m, y), (right, y)], fill=color, width=width)


def render_pattern(grid: StitchGrid, config: RenderConfig) -> OutputSurface:
    """Render a stitch grid onto a new RGB surface.

    Raises:
        PatternTooLargeError: If either canvas side exceeds MAX_CANVAS_DIMENSION.
    """
    width, height = canvas_size(grid, config)
    longest = max(width, height)
    if longest > MAX_CANVAS_DIMENSION:
        raise PatternTooLargeError("canvas side", longest, MAX_CANVAS_DIMENSION)

    img = Image.new("RGBA", (width, height), (*config.fabric_color, 255))
    if config.texture:
        draw_texture(img, config)
    draw_stitches(img, grid, config)
    if config.show_grid:
        draw_grid(img, grid, config)

    logger.info("Rendered %dx%d surface (grid=%s)", width, height, config.show_grid)
    return OutputSurface(
        image=img.convert("RGB"),
        config=config,
        grid_width=grid.width,
        grid_height=grid.height,
    )

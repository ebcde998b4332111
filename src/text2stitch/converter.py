"""Block sampling that turns an RGBA pixel buffer into a stitch grid.

The buffer is divided into scale_factor x scale_factor blocks; each block
becomes one stitch cell. Only samples with meaningful coverage
(alpha > SAMPLE_ALPHA_MIN) vote. A block is stitched when its voters are,
on average, opaque enough and dark enough. This drops faint anti-aliasing
fringe and near-white pixels that would otherwise show up as stray stitches.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from PIL import Image

from text2stitch.config import (
    ACTIVE_ALPHA_MEAN,
    ACTIVE_BRIGHTNESS_MAX,
    MAX_GRID_CELLS,
    SAMPLE_ALPHA_MIN,
    SCALE_DIVISOR,
)
from text2stitch.errors import PatternTooLargeError

logger = logging.getLogger(__name__)


@dataclass
class StitchGrid:
    """Boolean stitch cells, row-major: cells[y][x]."""

    width: int
    height: int
    cells: list[list[bool]]
    scale_factor: int = field(default=1)

    @property
    def stitch_count(self) -> int:
        return sum(row.count(True) for row in self.cells)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def is_active(self, x: int, y: int) -> bool:
        return self.cells[y][x]

    def active_cells(self) -> list[tuple[int, int]]:
        """(x, y) of every stitched cell, row by row."""
        return [(x, y) for y, row in enumerate(self.cells) for x, on in enumerate(row) if on]

    def to_rows(self) -> list[str]:
        """Rows as '0'/'1' strings, e.g. ["010", "111"]."""
        return ["".join("1" if on else "0" for on in row) for row in self.cells]

    @classmethod
    def empty(cls) -> StitchGrid:
        return cls(width=0, height=0, cells=[], scale_factor=1)

    @classmethod
    def from_rows(cls, rows: list[str], scale_factor: int = 1) -> StitchGrid:
        """Build a grid from '0'/'1' row strings."""
        width = len(rows[0]) if rows else 0
        for i, row in enumerate(rows):
            if len(row) != width:
                msg = f"Row {i} has length {len(row)}, expected {width}"
                raise ValueError(msg)
        cells = [[c == "1" for c in row] for row in rows]
        return cls(width=width, height=len(rows), cells=cells, scale_factor=scale_factor)


def scale_factor_for(grid_size: int) -> int:
    """Source pixels per stitch cell edge: max(1, round(grid_size / 8)).

    8 -> 1, 10 -> 1, 12 -> 2, 14 -> 2. Halves round up (20 -> 3).
    """
    return max(1, math.floor(grid_size / SCALE_DIVISOR + 0.5))


def grid_dimensions(width: int, height: int, scale_factor: int) -> tuple[int, int]:
    """Grid size for a buffer: (ceil(W / s), ceil(H / s))."""
    return (math.ceil(width / scale_factor), math.ceil(height / scale_factor))


def _block_is_active(pixels, x0: int, y0: int, x1: int, y1: int) -> bool:
    """Decide one block from the samples in [x0, x1) x [y0, y1)."""
    contributing = 0
    alpha_sum = 0
    brightness_sum = 0.0

    for py in range(y0, y1):
        for px in range(x0, x1):
            r, g, b, a = pixels[px, py]
            if a > SAMPLE_ALPHA_MIN:
                contributing += 1
                alpha_sum += a
                brightness_sum += (r + g + b) / 3

    if contributing == 0:
        return False
    return (
        alpha_sum / contributing > ACTIVE_ALPHA_MEAN
        and brightness_sum / contributing < ACTIVE_BRIGHTNESS_MAX
    )


def convert_to_grid(img: Image.Image, scale_factor: int) -> StitchGrid:
    """Downsample an RGBA buffer into a StitchGrid.

    Args:
        img: Pixel buffer; converted to RGBA if it is in another mode.
        scale_factor: Block edge length in source pixels (>= 1).

    Returns:
        StitchGrid with width = ceil(W / s), height = ceil(H / s).

    Raises:
        ValueError: If scale_factor < 1.
        PatternTooLargeError: If the grid would exceed MAX_GRID_CELLS.
    """
    if scale_factor < 1:
        msg = f"scale_factor must be >= 1, got {scale_factor}"
        raise ValueError(msg)

    gw, gh = grid_dimensions(img.width, img.height, scale_factor)
    if gw * gh > MAX_GRID_CELLS:
        raise PatternTooLargeError("stitch grid", gw * gh, MAX_GRID_CELLS)

    if img.mode != "RGBA":
        img = img.convert("RGBA")
    pixels = img.load()

    cells: list[list[bool]] = []
    for gy in range(gh):
        y0 = gy * scale_factor
        y1 = min(y0 + scale_factor, img.height)
        row: list[bool] = []
        for gx in range(gw):
            x0 = gx * scale_factor
            x1 = min(x0 + scale_factor, img.width)
            row.append(_block_is_active(pixels, x0, y0, x1, y1))
        cells.append(row)

    grid = StitchGrid(width=gw, height=gh, cells=cells, scale_factor=scale_factor)
    logger.info(
        "Converted %dx%d buffer to %dx%d grid (scale %d, %d stitches)",
        img.width,
        img.height,
        gw,
        gh,
        scale_factor,
        grid.stitch_count,
    )
    return grid

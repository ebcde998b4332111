"""Render multi-line text into an RGBA pixel buffer using PIL.

Text is drawn opaque black on a fully transparent canvas, so each pixel's
alpha carries the glyph coverage (including anti-aliased edges) and the
converter can threshold on alpha and brightness together.

Usage:
    font = load_font("serif", 12)
    buffer = rasterize_lines(["Hello", "World"], font, point_size=12, spacing=1.2)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from text2stitch.config import MAX_BUFFER_PIXELS, TEXT_MARGIN
from text2stitch.errors import PatternTooLargeError

logger = logging.getLogger(__name__)

INK = (0, 0, 0, 255)
TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class TextLayout:
    """Measured placement of each line inside the pixel buffer."""

    width: int
    height: int
    line_height: int
    positions: tuple[tuple[float, int], ...]


def line_height_for(point_size: int, spacing: float) -> int:
    """Line advance in pixels: round(point_size * spacing), at least 1."""
    return max(1, round(point_size * spacing))


def measure_line(font: ImageFont.FreeTypeFont | ImageFont.ImageFont, line: str) -> float:
    """Rendered advance width of a single line."""
    return font.getlength(line)


def layout_lines(
    lines: list[str],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    point_size: int,
    spacing: float,
) -> TextLayout:
    """Compute buffer size and centered line origins without drawing anything."""
    line_height = line_height_for(point_size, spacing)
    widths = [measure_line(font, line) for line in lines]

    width = math.ceil(max(widths)) + TEXT_MARGIN
    height = len(lines) * line_height + TEXT_MARGIN
    top = TEXT_MARGIN // 2

    positions = tuple(
        ((width - line_width) / 2, top + index * line_height)
        for index, line_width in enumerate(widths)
    )
    return TextLayout(width=width, height=height, line_height=line_height, positions=positions)


def rasterize_lines(
    lines: list[str],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    point_size: int,
    spacing: float,
) -> Image.Image:
    """Render already-filtered lines into a tightly sized RGBA buffer.

    Args:
        lines: Non-empty list of trimmed, non-blank lines.
        font: Font loaded at point_size pixels.
        point_size: Font size in pixels (drives the line height).
        spacing: Line height multiplier.

    Returns:
        RGBA image of (ceil(max line width) + margin) x (lines * line height + margin).

    Raises:
        ValueError: If lines is empty (callers short-circuit blank input).
        PatternTooLargeError: If the buffer would exceed MAX_BUFFER_PIXELS.
    """
    if not lines:
        msg = "Cannot rasterize an empty list of lines"
        raise ValueError(msg)

    layout = layout_lines(lines, font, point_size, spacing)
    pixels = layout.width * layout.height
    if pixels > MAX_BUFFER_PIXELS:
        raise PatternTooLargeError("pixel buffer", pixels, MAX_BUFFER_PIXELS)

    img = Image.new("RGBA", (layout.width, layout.height), TRANSPARENT)
    draw = ImageDraw.Draw(img)
    for line, (x, y) in zip(lines, layout.positions):
        draw.text((x, y), line, font=font, fill=INK)

    logger.info(
        "Rasterized %d line(s) into %dx%d buffer (line height %d)",
        len(lines),
        layout.width,
        layout.height,
        layout.line_height,
    )
    return img

"""Color parsing and adjustment helpers."""

import re

from PIL import ImageColor

HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_color(value: str) -> tuple[int, int, int]:
    """Parse any Pillow color string ("#1a2b3c", "1a2b3c", "red", "rgb(...)") to RGB.

    Raises:
        ValueError: If the value is not a recognizable color.
    """
    value = (value or "").strip()
    match = HEX_RE.match(value)
    if match:
        value = "#" + match.group(1)
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        msg = f"Invalid color: '{value}'"
        raise ValueError(msg) from None
    return rgb[:3]


def to_hex(rgb: tuple[int, int, int]) -> str:
    """Format an RGB triple as a lowercase "#rrggbb" string."""
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def darken(rgb: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    """Scale each channel by factor (0.0 = black, 1.0 = unchanged)."""
    factor = min(max(factor, 0.0), 1.0)
    return (round(rgb[0] * factor), round(rgb[1] * factor), round(rgb[2] * factor))


def with_alpha(rgb: tuple[int, int, int], alpha: float) -> tuple[int, int, int, int]:
    """Return an RGBA tuple with alpha given as a 0.0-1.0 fraction."""
    return (*rgb, max(0, min(255, round(alpha * 255))))

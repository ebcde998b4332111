"""Shared fixtures for text2stitch tests."""

import os

import pytest
from PIL import Image, ImageFont

from text2stitch import fonts
from text2stitch.converter import StitchGrid
from text2stitch.schema import PatternRequest

# -- Paths ------------------------------------------------------------------

# System font for tests that need a real TTF (DejaVu Sans is on most Linux systems)
SYSTEM_FONT = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
HAS_SYSTEM_FONT = os.path.exists(SYSTEM_FONT)

skip_no_font = pytest.mark.skipif(not HAS_SYSTEM_FONT, reason="DejaVu Sans not found")


@pytest.fixture(autouse=True)
def builtin_font_only(monkeypatch):
    """Resolve every font family to Pillow's built-in font.

    Keeps pipeline tests independent of whatever fonts the machine has.
    """
    monkeypatch.setattr(fonts, "discover_fonts", lambda: ())


# -- Simple data fixtures ---------------------------------------------------


@pytest.fixture()
def sample_request():
    """A two-line medium pattern request."""
    return PatternRequest(text="Hi\nYo", max_lines=2)


@pytest.fixture()
def builtin_font():
    """Pillow's built-in scalable font at the medium point size."""
    return ImageFont.load_default(size=12)


@pytest.fixture()
def small_grid():
    """A 3x2 grid with the top-left and bottom-right cells stitched."""
    return StitchGrid.from_rows(["100", "001"])


def solid_image(width, height, color):
    """RGBA image filled with one color."""
    return Image.new("RGBA", (width, height), color)


@pytest.fixture()
def opaque_black():
    """An 8x6 fully opaque black buffer."""
    return solid_image(8, 6, (0, 0, 0, 255))


@pytest.fixture()
def transparent():
    """An 8x6 fully transparent buffer."""
    return solid_image(8, 6, (0, 0, 0, 0))


@pytest.fixture()
def checkerboard_buffer():
    """A 4x4 RGBA buffer of 2px cells: opaque black where (row + col) is even.

    With scale factor 2 this maps to a 2x2 checkerboard grid.
    """
    img = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    for row in range(2):
        for col in range(2):
            if (row + col) % 2 == 0:
                for y in range(row * 2, row * 2 + 2):
                    for x in range(col * 2, col * 2 + 2):
                        img.putpixel((x, y), (0, 0, 0, 255))
    return img

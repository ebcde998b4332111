"""Font discovery, classification, and family resolution.

Classifies fonts using OS/2 table data (Panose, sFamilyClass) with
name-based heuristic fallbacks, then maps the pattern's font family keys
onto the first installed font whose category fits.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError
from PIL import ImageFont

from text2stitch.config import DEFAULT_FONT_FAMILY, FONT_FAMILIES

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = {".ttf", ".otf"}
FONTS_DIR_ENV = "TEXT2STITCH_FONTS_DIR"

SYSTEM_FONT_DIRS = (
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "~/.fonts",
    "~/.local/share/fonts",
    "/Library/Fonts",
    "/System/Library/Fonts",
    "~/Library/Fonts",
    "C:/Windows/Fonts",
)

# Name-based keyword groups (checked before opening the font file)
_SCRIPT_KEYWORDS = ("script", "brush", "hand", "cursive", "callig")
_PIXEL_KEYWORDS = ("pixel", "8bit", "8-bit", "bitmap", "retro")
_MONO_KEYWORDS = ("mono", "code", "terminal", "console", "courier")
_DECORATIVE_KEYWORDS = ("decorat", "ornament", "fancy", "display", "comic")
# Faces that should not back a regular family key
_STYLE_KEYWORDS = ("bold", "italic", "oblique", "light", "thin", "black", "condensed")

_FAMILY_CLASS_MAP = {
    1: "serif",
    2: "serif",
    3: "serif",
    4: "serif",
    5: "serif",
    7: "serif",
    8: "sans-serif",
    9: "decorative",
    10: "script",
}


@dataclass(frozen=True)
class FontInfo:
    """An installed font file with its inferred category."""

    path: str
    name: str
    category: str


def _classify_by_panose(panose) -> str | None:
    """Classify font by Panose bFamilyType."""
    ft = panose.bFamilyType
    if ft == 3:  # Latin Hand Written
        return "script"
    if ft in (4, 5):  # Latin Decoratives / Latin Symbol
        return "decorative"
    if ft == 2:  # Latin Text
        if panose.bProportion == 9:  # Monospaced
            return "monospace"
        serif_style = panose.bSerifStyle
        if serif_style >= 11:  # 11-15 = sans-serif variants
            return "sans-serif"
        if 2 <= serif_style <= 10:
            return "serif"
        return "sans-serif"
    return None


def classify_font(font_path: str) -> str:
    """Classify a font into a category using name heuristics + OS/2 table."""
    name_lower = Path(font_path).stem.lower()

    if any(kw in name_lower for kw in _SCRIPT_KEYWORDS):
        return "script"
    if any(kw in name_lower for kw in _PIXEL_KEYWORDS):
        return "pixel"
    if any(kw in name_lower for kw in _MONO_KEYWORDS):
        return "monospace"
    if any(kw in name_lower for kw in _DECORATIVE_KEYWORDS):
        return "decorative"

    try:
        font = TTFont(str(font_path), fontNumber=0, lazy=True)
    except (OSError, TTLibError):
        logger.warning("Could not open font for classification: %s", font_path)
        return "other"

    try:
        os2 = font.get("OS/2")
        if os2:
            panose = getattr(os2, "panose", None)
            if panose:
                result = _classify_by_panose(panose)
                if result:
                    return result

            family_class = getattr(os2, "sFamilyClass", 0)
            result = _FAMILY_CLASS_MAP.get((family_class >> 8) & 0xFF)
            if result:
                return result
    except (AttributeError, KeyError, TTLibError):
        logger.warning("Error reading OS/2 table from: %s", font_path, exc_info=True)
    finally:
        font.close()

    if "sans" in name_lower or "grotesk" in name_lower or "helvetic" in name_lower:
        return "sans-serif"
    if any(kw in name_lower for kw in ("serif", "roman", "times", "garamond")):
        return "serif"

    return "other"


def font_search_dirs() -> list[Path]:
    """Directories scanned for fonts: the env override first, then system dirs."""
    dirs: list[Path] = []
    override = os.environ.get(FONTS_DIR_ENV)
    if override:
        dirs.append(Path(override).expanduser())
    dirs.extend(Path(d).expanduser() for d in SYSTEM_FONT_DIRS)
    return dirs


def list_fonts(fonts_dir: str | Path) -> list[FontInfo]:
    """List TTF/OTF fonts under fonts_dir (recursively), sorted by path."""
    root = Path(fonts_dir)
    if not root.is_dir():
        return []

    fonts: list[FontInfo] = []
    for entry in sorted(root.rglob("*")):
        if entry.suffix.lower() in FONT_EXTENSIONS and entry.is_file():
            category = classify_font(str(entry))
            fonts.append(FontInfo(path=str(entry), name=entry.stem, category=category))
    return fonts


def _is_regular_face(info: FontInfo) -> bool:
    name_lower = info.name.lower()
    return not any(kw in name_lower for kw in _STYLE_KEYWORDS)


def pick_font(fonts: list[FontInfo], family: str) -> FontInfo | None:
    """Pick the best font for a family key, preferring regular faces."""
    categories = FONT_FAMILIES.get(family, FONT_FAMILIES[DEFAULT_FONT_FAMILY])
    for category in categories:
        matches = [f for f in fonts if f.category == category]
        if not matches:
            continue
        regular = [f for f in matches if _is_regular_face(f)]
        return (regular or matches)[0]
    return None


@lru_cache(maxsize=1)
def discover_fonts() -> tuple[FontInfo, ...]:
    """Scan every search directory once per process."""
    found: list[FontInfo] = []
    for directory in font_search_dirs():
        found.extend(list_fonts(directory))
    logger.info("Discovered %d font(s)", len(found))
    return tuple(found)


def resolve_font_path(family: str) -> str | None:
    """Return the font file backing a family key, or None if nothing fits."""
    info = pick_font(list(discover_fonts()), family)
    if info is None:
        logger.warning("No installed font for family '%s', using built-in font", family)
        return None
    logger.info("Font family '%s' -> %s", family, info.path)
    return info.path


def load_font(
    family: str,
    size: int,
    font_path: str | None = None,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a renderable font for a family key at the given pixel size.

    An explicit font_path wins over family resolution. Falls back to
    Pillow's built-in scalable default font.
    """
    path = font_path or resolve_font_path(family)
    if path is not None:
        return ImageFont.truetype(path, size=size)
    return ImageFont.load_default(size=size)

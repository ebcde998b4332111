"""Zoom state for displaying a rendered pattern. View only, never touches the pattern."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image

from text2stitch.config import ZOOM_MAX, ZOOM_MIN, ZOOM_STEP


def clamp_zoom(value: float) -> float:
    # Round to one decimal so repeated steps don't drift (0.2 * 3 != 0.6)
    return round(min(ZOOM_MAX, max(ZOOM_MIN, value)), 1)


@dataclass
class ZoomState:
    """Current display scale in [ZOOM_MIN, ZOOM_MAX]."""

    level: float = 1.0

    def __post_init__(self):
        self.level = clamp_zoom(self.level)

    def zoom_in(self) -> float:
        self.level = clamp_zoom(self.level + ZOOM_STEP)
        return self.level

    def zoom_out(self) -> float:
        self.level = clamp_zoom(self.level - ZOOM_STEP)
        return self.level

    def reset(self) -> float:
        self.level = 1.0
        return self.level

    @property
    def percent(self) -> str:
        return f"{round(self.level * 100)}%"

    def apply(self, image: Image.Image) -> Image.Image:
        """Return a resized copy for display; the source image is untouched."""
        if self.level == 1.0:
            return image.copy()
        size = (max(1, round(image.width * self.level)), max(1, round(image.height * self.level)))
        resample = Image.NEAREST if self.level > 1.0 else Image.LANCZOS
        return image.resize(size, resample)

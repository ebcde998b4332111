"""Pipeline orchestrator: text -> pixel buffer -> stitch grid -> surface -> report.

Ties the rasterizer, converter, renderer and reporter into one synchronous
call, and keeps the most recent result for zooming and export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from text2stitch.config import PDF_FILENAME
from text2stitch.converter import StitchGrid, convert_to_grid, scale_factor_for
from text2stitch.export import export_pdf, export_png, png_filename
from text2stitch.filters import prepare_lines
from text2stitch.fonts import load_font
from text2stitch.rasterizer import rasterize_lines
from text2stitch.renderer import OutputSurface, RenderConfig, render_pattern
from text2stitch.reporter import build_report
from text2stitch.schema import PatternReport, PatternRequest
from text2stitch.view import ZoomState

logger = logging.getLogger(__name__)


@dataclass
class PatternResult:
    """Everything one generation produced. Blank text gives an empty result."""

    request: PatternRequest
    lines: list[str]
    grid: StitchGrid
    surface: OutputSurface | None = None
    report: PatternReport | None = None

    @property
    def is_empty(self) -> bool:
        return self.surface is None

    @property
    def stitch_count(self) -> int:
        return self.grid.stitch_count


def build_grid(
    request: PatternRequest,
    lines: list[str],
    *,
    font_path: str | None = None,
) -> StitchGrid:
    """Rasterize the lines and convert the buffer; the buffer is dropped here."""
    font = load_font(request.family_key, request.point_size, font_path)
    buffer = rasterize_lines(lines, font, request.point_size, request.spacing)
    return convert_to_grid(buffer, scale_factor_for(request.grid_size))


def generate_pattern(
    request: PatternRequest,
    *,
    font_path: str | None = None,
    texture: bool = True,
) -> PatternResult:
    """Run the full pipeline for one request.

    Args:
        request: Pattern settings snapshot.
        font_path: Explicit TTF/OTF file, overriding the family lookup.
        texture: Whether to stipple the fabric texture.

    Raises:
        PatternTooLargeError: If the text exceeds buffer, grid or canvas limits.
    """
    lines = prepare_lines(request.text, request.max_lines)
    if not lines:
        logger.info("No text to stitch, returning empty pattern")
        return PatternResult(request=request, lines=[], grid=StitchGrid.empty())

    grid = build_grid(request, lines, font_path=font_path)
    surface = render_pattern(grid, RenderConfig.from_request(request, texture=texture))
    report = build_report(grid)
    return PatternResult(request=request, lines=lines, grid=grid, surface=surface, report=report)


@dataclass
class PatternSession:
    """Holds the latest pattern and the zoom level between generations."""

    font_path: str | None = None
    texture: bool = True
    zoom: ZoomState = field(default_factory=ZoomState)
    current: PatternResult | None = None

    def generate(self, request: PatternRequest) -> PatternResult:
        """Replace the current pattern with a fresh one. Zoom is kept.

        A failed generation leaves no current pattern, so exports never
        pick up a result from older settings.
        """
        self.current = None
        self.current = generate_pattern(request, font_path=self.font_path, texture=self.texture)
        return self.current

    @property
    def has_pattern(self) -> bool:
        return self.current is not None and not self.current.is_empty

    def view(self) -> Image.Image | None:
        """The current surface at the current zoom level."""
        if not self.has_pattern:
            return None
        return self.zoom.apply(self.current.surface.image)

    def surface_for(self, show_grid: bool) -> OutputSurface | None:
        """Current surface with or without the grid, re-rendered from the same grid."""
        if not self.has_pattern:
            return None
        result = self.current
        if result.surface.config.show_grid == show_grid:
            return result.surface
        request = result.request.model_copy(update={"show_grid": show_grid})
        return render_pattern(result.grid, RenderConfig.from_request(request, texture=self.texture))

    def export_png(
        self,
        target_dir: str | Path | None = None,
        *,
        show_grid: bool | None = None,
        stream: BinaryIO | None = None,
    ) -> str | None:
        """Export the current pattern as PNG.

        Writes to stream when given, else to target_dir (default: cwd) under
        the fixed file name. Returns the file name, or None with a warning if
        there is no pattern yet.
        """
        if not self.has_pattern:
            logger.warning("Nothing to export: generate a pattern first")
            return None
        if show_grid is None:
            show_grid = self.current.request.show_grid
        surface = self.surface_for(show_grid)
        name = png_filename(show_grid)
        export_png(surface, stream if stream is not None else Path(target_dir or ".") / name)
        return name

    def export_pdf(
        self,
        target_dir: str | Path | None = None,
        *,
        stream: BinaryIO | None = None,
    ) -> str | None:
        """Export the current pattern as a two-page PDF. Same contract as export_png."""
        if not self.has_pattern:
            logger.warning("Nothing to export: generate a pattern first")
            return None
        result = self.current
        target = stream if stream is not None else Path(target_dir or ".") / PDF_FILENAME
        export_pdf(result.surface, result.lines, result.request, result.report, target)
        return PDF_FILENAME

"""PNG and PDF export of a rendered pattern.

The PDF has two A4 pages: a header with the pattern metadata above the
pattern image (scaled to fit, aspect ratio kept), then a page of generic
stitching instructions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas as pdf_canvas

from text2stitch.config import (
    PDF_MARGIN_MM,
    PDF_MAX_IMAGE_HEIGHT_MM,
    PDF_MAX_IMAGE_WIDTH_MM,
    PDF_MAX_WRAPPED_LINES,
    PNG_FILENAME,
    PNG_GRID_FILENAME,
    PX_TO_MM,
    STITCHING_INSTRUCTIONS,
)
from text2stitch.renderer import OutputSurface
from text2stitch.schema import PatternReport, PatternRequest
from text2stitch.utils import parse_color, to_hex

logger = logging.getLogger(__name__)

TITLE = "Cross Stitch Pattern"
INSTRUCTIONS_TITLE = "Stitching Instructions"
BODY_FONT = "Helvetica"
TITLE_FONT = "Helvetica-Bold"
BODY_SIZE = 11
LINE_LEADING = 15


def png_filename(show_grid: bool) -> str:
    return PNG_GRID_FILENAME if show_grid else PNG_FILENAME


def export_png(surface: OutputSurface, target: str | Path | BinaryIO) -> None:
    """Write the surface as PNG to a path or binary file object."""
    surface.image.save(target, format="PNG")
    logger.info("Exported PNG (%dx%d)", *surface.size)


def fit_image_mm(
    width_px: int,
    height_px: int,
    max_height_mm: float = PDF_MAX_IMAGE_HEIGHT_MM,
) -> tuple[float, float]:
    """Physical image size in mm, shrunk to the page box but never enlarged."""
    width_mm = width_px * PX_TO_MM
    height_mm = height_px * PX_TO_MM
    max_height_mm = min(max_height_mm, PDF_MAX_IMAGE_HEIGHT_MM)
    scale = min(1.0, PDF_MAX_IMAGE_WIDTH_MM / width_mm, max_height_mm / height_mm)
    return width_mm * scale, height_mm * scale


def metadata_lines(lines: list[str], request: PatternRequest, report: PatternReport) -> list[str]:
    """Header lines for the pattern page; ``lines`` are the stitched text lines."""
    return [
        f"Text: {' / '.join(lines)}",
        f"Dimensions: {report.dimensions}",
        f"Total stitches: {report.stitch_count}",
        f"Font: {request.family_key} ({request.font_size})",
        f"Color: {to_hex(parse_color(request.stitch_color))}",
        f"Fabric: {report.fabric_size}",
    ]


def _wrap(text: str, width: float) -> list[str]:
    """Wrap one header line, cutting it off with an ellipsis past PDF_MAX_WRAPPED_LINES."""
    wrapped = simpleSplit(text, BODY_FONT, BODY_SIZE, width)
    if len(wrapped) > PDF_MAX_WRAPPED_LINES:
        wrapped = wrapped[:PDF_MAX_WRAPPED_LINES]
        wrapped[-1] = wrapped[-1][:-1].rstrip() + "…"
    return wrapped


def _draw_pattern_page(
    pdf: pdf_canvas.Canvas,
    surface: OutputSurface,
    lines: list[str],
    request: PatternRequest,
    report: PatternReport,
) -> None:
    page_w, page_h = A4
    left = PDF_MARGIN_MM * mm
    bottom = PDF_MARGIN_MM * mm
    usable_w = page_w - 2 * left
    y = page_h - PDF_MARGIN_MM * mm

    pdf.setFont(TITLE_FONT, 20)
    y -= 20
    pdf.drawString(left, y, TITLE)
    y -= 10

    pdf.setFont(BODY_FONT, BODY_SIZE)
    for line in metadata_lines(lines, request, report):
        for wrapped in _wrap(line, usable_w):
            y -= LINE_LEADING
            pdf.drawString(left, y, wrapped)

    # The image takes whatever height the header left above the bottom margin
    y -= 10
    width_mm, height_mm = fit_image_mm(*surface.size, max_height_mm=(y - bottom) / mm)
    y -= height_mm * mm
    pdf.drawImage(
        ImageReader(surface.image),
        left,
        y,
        width=width_mm * mm,
        height=height_mm * mm,
        preserveAspectRatio=True,
        anchor="sw",
    )


def _draw_instructions_page(pdf: pdf_canvas.Canvas) -> None:
    page_w, page_h = A4
    left = PDF_MARGIN_MM * mm
    usable_w = page_w - 2 * left
    y = page_h - PDF_MARGIN_MM * mm

    pdf.setFont(TITLE_FONT, 16)
    y -= 16
    pdf.drawString(left, y, INSTRUCTIONS_TITLE)
    y -= 10

    pdf.setFont(BODY_FONT, BODY_SIZE)
    for number, instruction in enumerate(STITCHING_INSTRUCTIONS, start=1):
        y -= 8
        for wrapped in simpleSplit(f"{number}. {instruction}", BODY_FONT, BODY_SIZE, usable_w):
            y -= LINE_LEADING
            pdf.drawString(left, y, wrapped)


def export_pdf(
    surface: OutputSurface,
    lines: list[str],
    request: PatternRequest,
    report: PatternReport,
    target: str | Path | BinaryIO,
) -> None:
    """Write the two-page pattern document to a path or binary file object.

    ``lines`` are the text lines that made it into the pattern.
    """
    if isinstance(target, Path):
        target = str(target)
    pdf = pdf_canvas.Canvas(target, pagesize=A4)
    pdf.setTitle(TITLE)

    _draw_pattern_page(pdf, surface, lines, request, report)
    pdf.showPage()
    _draw_instructions_page(pdf)
    pdf.showPage()
    pdf.save()
    logger.info("Exported PDF (%s)", report.dimensions)

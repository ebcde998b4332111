"""Tests for PNG and PDF export."""

import io
import re

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas

from text2stitch.config import PDF_MARGIN_MM, PDF_MAX_WRAPPED_LINES
from text2stitch.converter import StitchGrid
from text2stitch.export import (
    _wrap,
    export_pdf,
    export_png,
    fit_image_mm,
    metadata_lines,
    png_filename,
)
from text2stitch.pipeline import generate_pattern
from text2stitch.renderer import RenderConfig, render_pattern
from text2stitch.reporter import build_report
from text2stitch.schema import PatternRequest


@pytest.fixture()
def rendered(small_grid):
    request = PatternRequest(text="Hi\n\n Yo ", font_family="serif", stitch_color="#aa0000")
    surface = render_pattern(small_grid, RenderConfig.from_request(request, texture=False))
    return surface, ["Hi", "Yo"], request, build_report(small_grid)


@pytest.fixture()
def image_calls(monkeypatch):
    """Record the placement of every image drawn into a PDF."""
    calls = []
    original = Canvas.drawImage

    def record(self, image, x, y, width=None, height=None, **kwargs):
        calls.append((x, y, width, height))
        return original(self, image, x, y, width=width, height=height, **kwargs)

    monkeypatch.setattr(Canvas, "drawImage", record)
    return calls


def page_count(pdf_bytes):
    return len(re.findall(rb"/Type /Page\b", pdf_bytes))


class TestFilenames:
    def test_png_names(self):
        assert png_filename(False) == "cross-stitch-pattern.png"
        assert png_filename(True) == "cross-stitch-pattern-with-grid.png"


class TestExportPng:
    def test_to_path(self, rendered, tmp_path):
        surface = rendered[0]
        target = tmp_path / "out.png"
        export_png(surface, target)
        with Image.open(target) as img:
            assert img.format == "PNG"
            assert img.size == surface.size

    def test_to_stream(self, rendered):
        buf = io.BytesIO()
        export_png(rendered[0], buf)
        assert buf.getvalue().startswith(b"\x89PNG")


class TestFitImage:
    def test_small_image_not_enlarged(self):
        w, h = fit_image_mm(100, 50)
        assert w == pytest.approx(26.4583)
        assert h == pytest.approx(13.22915)

    def test_wide_image_fits_width(self):
        w, h = fit_image_mm(1000, 500)
        assert w == pytest.approx(180)
        assert h == pytest.approx(90)

    def test_tall_image_fits_height(self):
        w, h = fit_image_mm(100, 2000)
        assert h == pytest.approx(200)
        assert w == pytest.approx(10)

    def test_height_limited_by_remaining_space(self):
        w, h = fit_image_mm(100, 2000, max_height_mm=50)
        assert h == pytest.approx(50)
        assert w == pytest.approx(2.5)

    def test_remaining_space_never_exceeds_box(self):
        assert fit_image_mm(100, 2000, max_height_mm=500)[1] == pytest.approx(200)


class TestMetadata:
    def test_lines(self, rendered):
        _, lines, request, report = rendered
        header = metadata_lines(lines, request, report)
        assert header[0] == "Text: Hi / Yo"
        assert header[1] == "Dimensions: 3 × 2 stitches"
        assert header[2] == "Total stitches: 2"
        assert header[3] == "Font: serif (medium)"
        assert header[4] == "Color: #aa0000"
        assert header[5].startswith("Fabric: ")

    def test_only_stitched_lines_listed(self):
        result = generate_pattern(PatternRequest(text="KEEP\nDROPPED1\nDROPPED2", max_lines=1))
        header = metadata_lines(result.lines, result.request, result.report)
        assert header[0] == "Text: KEEP"

    def test_named_color_shown_as_hex(self, rendered):
        _, lines, _, report = rendered
        header = metadata_lines(lines, PatternRequest(stitch_color="red"), report)
        assert header[4] == "Color: #ff0000"

    def test_long_text_is_cut(self):
        wrapped = _wrap("Text: " + " / ".join(["W" * 60] * 20), 180 * mm)
        assert len(wrapped) == PDF_MAX_WRAPPED_LINES
        assert wrapped[-1].endswith("…")

    def test_short_text_untouched(self):
        assert _wrap("Text: Hi", 180 * mm) == ["Text: Hi"]


class TestExportPdf:
    def test_two_pages(self, rendered):
        buf = io.BytesIO()
        export_pdf(*rendered, buf)
        data = buf.getvalue()
        assert data.startswith(b"%PDF")
        assert page_count(data) == 2

    def test_to_path(self, rendered, tmp_path):
        target = tmp_path / "pattern.pdf"
        export_pdf(*rendered, target)
        assert target.read_bytes().startswith(b"%PDF")

    def test_image_stays_on_page_with_long_text(self, image_calls):
        lines = ["W" * 60] * 20
        request = PatternRequest(text="\n".join(lines), max_lines=20, font_size="small")
        # A tall pattern that would fill the whole image box on its own
        grid = StitchGrid.from_rows(["1"] * 200)
        surface = render_pattern(grid, RenderConfig.from_request(request, texture=False))

        export_pdf(surface, lines, request, build_report(grid), io.BytesIO())

        (x, y, width, height) = image_calls[0]
        page_w, page_h = A4
        assert y >= PDF_MARGIN_MM * mm - 1e-6
        assert y + height <= page_h - PDF_MARGIN_MM * mm
        assert x + width <= page_w

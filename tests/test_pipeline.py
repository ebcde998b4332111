"""End-to-end tests for the pattern pipeline and session."""

import io

import pytest

from text2stitch import converter
from text2stitch.converter import scale_factor_for
from text2stitch.errors import PatternTooLargeError
from text2stitch.pipeline import PatternSession, build_grid, generate_pattern
from text2stitch.schema import PatternRequest


class TestGeneratePattern:
    def test_produces_stitches(self, sample_request):
        result = generate_pattern(sample_request)
        assert not result.is_empty
        assert result.lines == ["Hi", "Yo"]
        assert result.stitch_count > 0
        assert result.report.stitch_count == result.stitch_count

    def test_blank_text_is_empty(self):
        result = generate_pattern(PatternRequest(text="  \n  "))
        assert result.is_empty
        assert result.stitch_count == 0
        assert result.surface is None
        assert result.report is None

    def test_zero_max_lines_is_empty(self):
        assert generate_pattern(PatternRequest(text="Hi", max_lines=0)).is_empty

    def test_surface_matches_grid(self, sample_request):
        result = generate_pattern(sample_request)
        config = result.surface.config
        assert result.surface.size == (
            result.grid.width * config.grid_size + 2 * config.margin,
            result.grid.height * config.grid_size + 2 * config.margin,
        )

    def test_scale_factor_follows_font_size(self):
        request = PatternRequest(text="Hi", font_size="large")
        assert build_grid(request, ["Hi"]).scale_factor == scale_factor_for(12) == 2

    def test_more_lines_taller_grid(self):
        one = generate_pattern(PatternRequest(text="Hi"))
        two = generate_pattern(PatternRequest(text="Hi\nHi"))
        assert two.grid.height > one.grid.height
        assert two.grid.width == one.grid.width

    def test_deterministic(self, sample_request):
        first = generate_pattern(sample_request)
        second = generate_pattern(sample_request)
        assert first.grid == second.grid
        assert first.surface.image.tobytes() == second.surface.image.tobytes()

    def test_grid_overlay_keeps_count(self):
        plain = generate_pattern(PatternRequest(text="Hi"))
        gridded = generate_pattern(PatternRequest(text="Hi", show_grid=True))
        assert plain.grid == gridded.grid
        assert plain.surface.size == gridded.surface.size
        assert plain.report == gridded.report

    def test_too_large(self, monkeypatch, sample_request):
        monkeypatch.setattr(converter, "MAX_GRID_CELLS", 4)
        with pytest.raises(PatternTooLargeError):
            generate_pattern(sample_request)


class TestPatternSession:
    def test_generate_sets_current(self, sample_request):
        session = PatternSession()
        result = session.generate(sample_request)
        assert session.current is result
        assert session.has_pattern

    def test_empty_result_is_not_a_pattern(self):
        session = PatternSession()
        session.generate(PatternRequest(text=""))
        assert session.current is not None
        assert not session.has_pattern
        assert session.view() is None

    def test_failed_generation_clears_current(self, monkeypatch, sample_request):
        session = PatternSession()
        session.generate(sample_request)
        monkeypatch.setattr(converter, "MAX_GRID_CELLS", 4)
        with pytest.raises(PatternTooLargeError):
            session.generate(sample_request)
        assert session.current is None
        assert session.export_png() is None

    def test_zoom_survives_regeneration(self, sample_request):
        session = PatternSession()
        session.generate(sample_request)
        session.zoom.zoom_in()
        session.generate(PatternRequest(text="New"))
        assert session.zoom.level == 1.2

    def test_view_applies_zoom(self, sample_request):
        session = PatternSession(texture=False)
        session.generate(sample_request)
        session.zoom.zoom_in()
        width, height = session.current.surface.size
        assert session.view().size == (round(width * 1.2), round(height * 1.2))
        # The stored surface is unchanged
        assert session.current.surface.size == (width, height)

    def test_surface_for_reuses_grid(self, sample_request):
        session = PatternSession()
        session.generate(sample_request)
        plain = session.surface_for(False)
        gridded = session.surface_for(True)
        assert plain is session.current.surface
        assert gridded.config.show_grid is True
        assert gridded.size == plain.size


class TestSessionExport:
    def test_nothing_to_export(self, tmp_path, caplog):
        session = PatternSession()
        assert session.export_png(tmp_path) is None
        assert session.export_pdf(tmp_path) is None
        assert "Nothing to export" in caplog.text
        assert list(tmp_path.iterdir()) == []

    def test_png_names(self, sample_request, tmp_path):
        session = PatternSession()
        session.generate(sample_request)
        assert session.export_png(tmp_path) == "cross-stitch-pattern.png"
        assert session.export_png(tmp_path, show_grid=True) == "cross-stitch-pattern-with-grid.png"
        assert (tmp_path / "cross-stitch-pattern.png").exists()
        assert (tmp_path / "cross-stitch-pattern-with-grid.png").exists()

    def test_png_default_follows_request(self, tmp_path):
        session = PatternSession()
        session.generate(PatternRequest(text="Hi", show_grid=True))
        assert session.export_png(tmp_path) == "cross-stitch-pattern-with-grid.png"

    def test_pdf(self, sample_request, tmp_path):
        session = PatternSession()
        session.generate(sample_request)
        assert session.export_pdf(tmp_path) == "cross-stitch-pattern.pdf"
        assert (tmp_path / "cross-stitch-pattern.pdf").read_bytes().startswith(b"%PDF")

    def test_stream(self, sample_request):
        session = PatternSession()
        session.generate(sample_request)
        buf = io.BytesIO()
        session.export_png(stream=buf)
        assert buf.getvalue().startswith(b"\x89PNG")

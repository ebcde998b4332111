"""Tests for the CLI entry point using Click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from text2stitch.cli import cli


@pytest.fixture()
def runner():
    return CliRunner()


class TestCLIBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "cross-stitch pattern" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ["nonexistent"])
        assert result.exit_code != 0


class TestGenerateCommand:
    def test_writes_png(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Pattern ready" in result.output
        assert "Stitches:" in result.output
        assert (tmp_path / "cross-stitch-pattern.png").exists()
        assert not (tmp_path / "cross-stitch-pattern.pdf").exists()

    def test_grid_png_name(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path), "--grid"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cross-stitch-pattern-with-grid.png").exists()

    def test_pdf(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path), "--pdf", "--no-png"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cross-stitch-pattern.pdf").exists()
        assert not (tmp_path / "cross-stitch-pattern.png").exists()

    def test_zoomed_view(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["generate", "Hi", "-o", str(tmp_path), "--zoom", "2", "--no-png"]
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cross-stitch-pattern-zoom-200.png").exists()
        assert "Zoom: 200%" in result.output

    def test_zoom_out_of_range(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path), "--zoom", "5"])
        assert result.exit_code != 0

    def test_literal_newline_splits_lines(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi\\nYo", "-o", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Lines: 2" in result.output

    def test_json_report(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path), "--json"])
        assert result.exit_code == 0, result.output
        # Font fallback warnings may precede the report on older Click versions
        data = json.loads(result.stdout[result.stdout.index("{") :])
        assert data["stitchCount"] > 0
        assert data["dimensions"].endswith("stitches")
        assert data["flossLabel"] == "1 skein"
        assert len(data["rows"]) == data["height"]
        assert all(len(row) == data["width"] for row in data["rows"])

    def test_preview_flag(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "-o", str(tmp_path), "--preview"])
        assert result.exit_code == 0, result.output
        assert "█" in result.output

    def test_blank_text(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "   ", "-o", str(tmp_path)])
        assert result.exit_code == 0
        assert "No text to stitch" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_invalid_color(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["generate", "Hi", "-o", str(tmp_path), "--stitch-color", "bogus"]
        )
        assert result.exit_code == 1
        assert "Invalid color" in result.output

    def test_invalid_font_size(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "Hi", "--font-size", "huge"])
        assert result.exit_code == 2

    def test_unknown_fabric_uses_default(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["generate", "Hi", "-o", str(tmp_path), "--fabric-color", "tartan"]
        )
        assert result.exit_code == 0, result.output


class TestPreviewCommand:
    def test_preview_text(self, runner):
        result = runner.invoke(cli, ["preview", "Hi"])
        assert result.exit_code == 0, result.output
        assert "stitches)" in result.output
        assert "█" in result.output

    def test_preview_blank(self, runner):
        result = runner.invoke(cli, ["preview", ""])
        assert result.exit_code == 0
        assert "No text to stitch" in result.output


class TestFontsCommand:
    def test_empty_fonts_dir(self, runner, tmp_path):
        result = runner.invoke(cli, ["fonts", "--fonts-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "No TTF/OTF fonts found" in result.output
        assert "(built-in)" in result.output

    def test_lists_fonts(self, runner, tmp_path):
        (tmp_path / "CoolScript.ttf").write_bytes(b"")
        result = runner.invoke(cli, ["fonts", "--fonts-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "Found 1 font(s)" in result.output
        assert "CoolScript" in result.output

"""CLI entry point for text2stitch - turn text into a cross-stitch pattern."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from text2stitch.cli_helpers import (
    _build_request,
    _format_validation_error,
    _print_report_json,
    _print_result_summary,
    _split_kwargs,
    shared_pattern_options,
)
from text2stitch.config import FONT_FAMILIES, ZOOM_MAX, ZOOM_MIN
from text2stitch.errors import PatternTooLargeError

# -- CLI group --------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="text2stitch")
@click.option("-v", "--verbose", is_flag=True, hidden=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Turn text into a printable cross-stitch pattern."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def _run(session, request):
    """Generate a pattern, exiting with a red error on bad or oversized input."""
    try:
        return session.generate(request)
    except PatternTooLargeError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        click.echo("Try fewer lines, shorter text, or a smaller font size.", err=True)
        sys.exit(1)
    except OSError as e:
        click.secho(f"Error loading font: {e}", fg="red", err=True)
        sys.exit(1)


# -- generate --------------------------------------------------------------------------


@cli.command()
@click.argument("text")
@click.option("-o", "--output-dir", type=click.Path(file_okay=False), default=".")
@click.option("--grid/--no-grid", "show_grid", default=False, help="Overlay the counting grid")
@click.option("--png/--no-png", default=True, help="Write the pattern PNG")
@click.option("--pdf/--no-pdf", default=False, help="Write the two-page PDF")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--preview/--no-preview", default=False, help="Show ASCII preview")
@click.option(
    "--zoom",
    type=click.FloatRange(ZOOM_MIN, ZOOM_MAX),
    default=None,
    help="Also save a zoomed view at this scale",
)
@click.option("--no-texture", is_flag=True, help="Plain fabric background")
@shared_pattern_options
def generate(text, **all_kwargs):
    """Generate a cross-stitch pattern from TEXT (use \\n for new lines)."""
    opts, cmd = _split_kwargs(all_kwargs)
    if opts["verbose"]:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    from text2stitch.pipeline import PatternSession
    from text2stitch.preview import preview_grid
    from text2stitch.view import ZoomState

    try:
        request = _build_request(text, opts, show_grid=cmd["show_grid"])
    except ValidationError as e:
        click.secho(f"Error: {_format_validation_error(e)}", fg="red", err=True)
        sys.exit(1)

    session = PatternSession(font_path=opts["font_path"], texture=not cmd["no_texture"])
    result = _run(session, request)

    if result.is_empty:
        click.secho("No text to stitch; nothing written.", fg="yellow")
        return

    if cmd["as_json"]:
        _print_report_json(result)
    else:
        click.secho("Pattern ready", fg="green")
        _print_result_summary(result)

    if cmd["preview"]:
        click.echo("\n" + preview_grid(result.grid))

    out_dir = Path(cmd["output_dir"])
    out_dir.mkdir(parents=True, exist_ok=True)

    written: list[str] = []
    if cmd["png"]:
        written.append(session.export_png(out_dir))
    if cmd["pdf"]:
        written.append(session.export_pdf(out_dir))
    if cmd["zoom"] is not None:
        session.zoom = ZoomState(cmd["zoom"])
        name = f"cross-stitch-pattern-zoom-{round(session.zoom.level * 100)}.png"
        session.view().save(out_dir / name, format="PNG")
        written.append(name)
        if not cmd["as_json"]:
            click.echo(f"  Zoom: {session.zoom.percent}")

    if not cmd["as_json"]:
        for name in written:
            click.secho(f"Wrote {out_dir / name}", fg="green")


# -- preview ---------------------------------------------------------------------------


@cli.command("preview")
@click.argument("text")
@shared_pattern_options
def preview_cmd(text, **all_kwargs):
    """Show an ASCII preview of the stitch grid for TEXT."""
    opts, _ = _split_kwargs(all_kwargs)
    if opts["verbose"]:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    from text2stitch.filters import prepare_lines
    from text2stitch.pipeline import build_grid
    from text2stitch.preview import preview_grid

    try:
        request = _build_request(text, opts)
    except ValidationError as e:
        click.secho(f"Error: {_format_validation_error(e)}", fg="red", err=True)
        sys.exit(1)

    lines = prepare_lines(request.text, request.max_lines)
    if not lines:
        click.secho("No text to stitch.", fg="yellow")
        return

    try:
        grid = build_grid(request, lines, font_path=opts["font_path"])
    except PatternTooLargeError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(preview_grid(grid))


# -- fonts -----------------------------------------------------------------------------


@cli.command("fonts")
@click.option(
    "--fonts-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Scan this directory instead of the system font directories",
)
def fonts_cmd(fonts_dir):
    """List installed fonts and which font family each key resolves to."""
    from text2stitch.fonts import discover_fonts, list_fonts, pick_font

    fonts = list_fonts(fonts_dir) if fonts_dir else list(discover_fonts())
    if not fonts:
        click.secho("No TTF/OTF fonts found; the built-in font will be used.", fg="yellow")
    else:
        click.echo(f"Found {len(fonts)} font(s):\n")
        for info in fonts:
            click.echo(f"  {info.category:<11} {info.name}")

    click.echo("\nFont families:")
    for family in FONT_FAMILIES:
        chosen = pick_font(fonts, family)
        click.echo(f"  {family:<11} -> {chosen.path if chosen else '(built-in)'}")

"""CLI helper functions, decorators, and option definitions for text2stitch."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from text2stitch.config import (
    DEFAULT_FABRIC_COLOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_SPACING,
    DEFAULT_MAX_LINES,
    DEFAULT_STITCH_COLOR,
    FABRIC_COLORS,
    FONT_FAMILIES,
    FONT_SIZES,
    LINE_SPACINGS,
)

if TYPE_CHECKING:
    from text2stitch.pipeline import PatternResult
    from text2stitch.schema import PatternRequest

# Names of the shared pattern options (used to split kwargs in commands)
_PATTERN_OPTION_NAMES = (
    "lines",
    "font_size",
    "font_family",
    "line_spacing",
    "stitch_color",
    "fabric_color",
    "font_path",
    "verbose",
)


def shared_pattern_options(func):
    """Decorator that adds the pattern settings options to a command."""
    options = [
        click.option(
            "--lines",
            type=click.IntRange(min=0),
            default=DEFAULT_MAX_LINES,
            help=f"Maximum number of text lines (default: {DEFAULT_MAX_LINES})",
        ),
        click.option(
            "--font-size",
            type=click.Choice(list(FONT_SIZES)),
            default=DEFAULT_FONT_SIZE,
            help="Text size; larger sizes use bigger grid cells",
        ),
        click.option(
            "--font-family",
            default=DEFAULT_FONT_FAMILY,
            help=f"One of: {', '.join(FONT_FAMILIES)} (unknown values use the default)",
        ),
        click.option(
            "--line-spacing",
            type=click.Choice(list(LINE_SPACINGS)),
            default=DEFAULT_LINE_SPACING,
        ),
        click.option("--stitch-color", default=DEFAULT_STITCH_COLOR, help="Any color value"),
        click.option(
            "--fabric-color",
            default=DEFAULT_FABRIC_COLOR,
            help=f"One of: {', '.join(FABRIC_COLORS)} (unknown values use the default)",
        ),
        click.option(
            "--font-path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Explicit TTF/OTF file, overrides --font-family lookup",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Verbose output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _split_kwargs(all_kwargs: dict) -> tuple[dict, dict]:
    """Split kwargs into (pattern_opts, command_opts)."""
    pattern = {k: all_kwargs[k] for k in _PATTERN_OPTION_NAMES}
    cmd = {k: v for k, v in all_kwargs.items() if k not in _PATTERN_OPTION_NAMES}
    return pattern, cmd


def _build_request(text: str, opts: dict, show_grid: bool = False) -> PatternRequest:
    """Build a PatternRequest from a CLI option dict."""
    from text2stitch.schema import PatternRequest

    # Shells pass "\n" literally; let users type multi-line text inline
    text = text.replace("\\n", "\n")
    return PatternRequest(
        text=text,
        max_lines=opts["lines"],
        font_size=opts["font_size"],
        font_family=opts["font_family"],
        line_spacing=opts["line_spacing"],
        stitch_color=opts["stitch_color"],
        fabric_color=opts["fabric_color"],
        show_grid=show_grid,
    )


def _format_validation_error(error) -> str:
    """One line per pydantic error, without the URL noise."""
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in error.errors())


def _print_result_summary(result: PatternResult) -> None:
    """Print the standard pattern statistics block."""
    report = result.report
    click.echo(f"  Lines: {len(result.lines)}")
    click.echo(f"  Size: {report.dimensions}")
    click.echo(f"  Stitches: {report.stitch_count}")
    click.echo(f"  Estimated time: {report.time_estimate}")
    click.echo(f"  Fabric: {report.fabric_size}")
    click.echo(f"  Floss: {report.floss_label}")


def _print_report_json(result: PatternResult) -> None:
    """Print the report plus the stitch grid as "0"/"1" rows."""
    data = {**result.report.model_dump_camel(), "rows": result.grid.to_rows()}
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))

"""Human-facing statistics derived from a stitch grid."""

from __future__ import annotations

import math

from text2stitch.config import (
    AIDA_COUNT,
    FABRIC_BORDER_ALLOWANCE,
    MM_PER_INCH,
    STITCHES_PER_HOUR,
    STITCHES_PER_SKEIN,
)
from text2stitch.converter import StitchGrid
from text2stitch.schema import PatternReport


def estimate_hours(stitch_count: int) -> int:
    """Whole hours of stitching, rounded up."""
    return math.ceil(stitch_count / STITCHES_PER_HOUR)


def format_time_estimate(stitch_count: int) -> str:
    """150 -> "Less than 1 hour", 200 -> "1 hour", 450 -> "3 hours"."""
    if stitch_count / STITCHES_PER_HOUR < 1:
        return "Less than 1 hour"
    hours = estimate_hours(stitch_count)
    if hours == 1:
        return "1 hour"
    return f"{hours} hours"


def fabric_size_cm(cells: int) -> int:
    """Recommended fabric length for one axis: ceil((cells * 14 + 84) / 25.4)."""
    return math.ceil((cells * AIDA_COUNT + FABRIC_BORDER_ALLOWANCE) / MM_PER_INCH)


def format_fabric_size(width: int, height: int) -> str:
    return f"{fabric_size_cm(width)} cm × {fabric_size_cm(height)} cm ({AIDA_COUNT}-count Aida)"


def floss_skeins(stitch_count: int) -> int:
    """At least one skein, then one per started STITCHES_PER_SKEIN stitches."""
    return max(1, math.ceil(stitch_count / STITCHES_PER_SKEIN))


def format_floss(stitch_count: int) -> str:
    skeins = floss_skeins(stitch_count)
    return f"{skeins} skein" if skeins == 1 else f"{skeins} skeins"


def format_dimensions(width: int, height: int) -> str:
    return f"{width} × {height} stitches"


def build_report(grid: StitchGrid) -> PatternReport:
    """Collect every derived statistic for a grid into one report."""
    count = grid.stitch_count
    return PatternReport(
        width=grid.width,
        height=grid.height,
        stitch_count=count,
        dimensions=format_dimensions(grid.width, grid.height),
        time_estimate=format_time_estimate(count),
        fabric_size=format_fabric_size(grid.width, grid.height),
        floss_skeins=floss_skeins(count),
        floss_label=format_floss(count),
    )

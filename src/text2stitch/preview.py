"""ASCII art preview of a stitch grid."""

from __future__ import annotations

from text2stitch.converter import StitchGrid

FILLED = "\u2588"  # █
EMPTY = "\u00b7"  # ·


def preview_grid(grid: StitchGrid, *, header: bool = True) -> str:
    """Render a grid as rows of █ (stitch) and · (no stitch).

    The optional header line shows the grid size and stitch count.
    """
    body = preview_rows(grid.to_rows())
    if not header:
        return body
    title = f"{grid.width}\u00d7{grid.height} ({grid.stitch_count} stitches)"
    return f"{title}\n{body}" if body else title


def preview_rows(rows: list[str]) -> str:
    """Render '0'/'1' row strings without a header."""
    return "\n".join("".join(FILLED if c == "1" else EMPTY for c in row) for row in rows)

"""Line filtering for pattern text."""


def split_lines(text: str) -> list[str]:
    """Split text on any newline convention (\\n, \\r\\n, \\r)."""
    return text.splitlines()


def prepare_lines(text: str, max_lines: int) -> list[str]:
    """Trim lines, drop blank ones, and keep at most max_lines in order.

    Blank lines never become blank stitch rows:

        prepare_lines("A\\n\\nB\\nC", 2) -> ["A", "B"]
    """
    if max_lines <= 0 or not text:
        return []

    kept: list[str] = []
    for line in split_lines(text):
        stripped = line.strip()
        if not stripped:
            continue
        kept.append(stripped)
        if len(kept) == max_lines:
            break
    return kept

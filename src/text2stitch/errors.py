"""Exceptions raised by the text2stitch pipeline."""


class PatternTooLargeError(ValueError):
    """The text would produce a buffer, grid or canvas beyond the configured limits."""

    def __init__(self, what: str, size: int, limit: int):
        self.what = what
        self.size = size
        self.limit = limit
        super().__init__(f"Pattern too large: {what} of {size:,} exceeds the limit of {limit:,}")

"""Pydantic v2 models for pattern requests and reports."""

import logging

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

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
from text2stitch.utils import parse_color

logger = logging.getLogger(__name__)


class PatternRequest(BaseModel):
    """One snapshot of the user's pattern settings.

    Keys for ``font_size`` and ``line_spacing`` must be known; unknown
    ``font_family`` and ``fabric_color`` keys resolve to the defaults.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    text: str = ""
    max_lines: int = DEFAULT_MAX_LINES
    font_size: str = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    line_spacing: str = DEFAULT_LINE_SPACING
    stitch_color: str = DEFAULT_STITCH_COLOR
    fabric_color: str = DEFAULT_FABRIC_COLOR
    show_grid: bool = False

    @field_validator("max_lines")
    @classmethod
    def max_lines_non_negative(cls, v: int) -> int:
        if v < 0:
            msg = f"max_lines must be >= 0, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("font_size")
    @classmethod
    def font_size_known(cls, v: str) -> str:
        if v not in FONT_SIZES:
            valid = ", ".join(FONT_SIZES)
            msg = f"Unknown font size '{v}' (must be one of: {valid})"
            raise ValueError(msg)
        return v

    @field_validator("line_spacing")
    @classmethod
    def line_spacing_known(cls, v: str) -> str:
        if v not in LINE_SPACINGS:
            valid = ", ".join(LINE_SPACINGS)
            msg = f"Unknown line spacing '{v}' (must be one of: {valid})"
            raise ValueError(msg)
        return v

    @field_validator("stitch_color")
    @classmethod
    def stitch_color_parsable(cls, v: str) -> str:
        parse_color(v)
        return v

    @property
    def point_size(self) -> int:
        return FONT_SIZES[self.font_size][0]

    @property
    def grid_size(self) -> int:
        return FONT_SIZES[self.font_size][1]

    @property
    def spacing(self) -> float:
        return LINE_SPACINGS[self.line_spacing]

    @property
    def fabric_hex(self) -> str:
        """Background color for the fabric key, white for unknown keys."""
        color = FABRIC_COLORS.get(self.fabric_color)
        if color is None:
            logger.warning("Unknown fabric color '%s', using default", self.fabric_color)
            return FABRIC_COLORS[DEFAULT_FABRIC_COLOR]
        return color

    @property
    def family_key(self) -> str:
        if self.font_family not in FONT_FAMILIES:
            logger.warning("Unknown font family '%s', using default", self.font_family)
            return DEFAULT_FONT_FAMILY
        return self.font_family


class PatternReport(BaseModel):
    """Human-facing statistics derived from a stitch grid."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    width: int
    height: int
    stitch_count: int
    dimensions: str
    time_estimate: str
    fabric_size: str
    floss_skeins: int
    floss_label: str

    def model_dump_camel(self) -> dict:
        """Dump to dict with camelCase keys for JSON output."""
        return self.model_dump(by_alias=True)

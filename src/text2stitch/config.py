"""Constants and configuration for text2stitch."""

# Font size key -> (point size used for rasterization, grid cell size in output px)
FONT_SIZES: dict[str, tuple[int, int]] = {
    "small": (8, 8),
    "medium": (12, 10),
    "large": (16, 12),
    "extra-large": (20, 14),
}
DEFAULT_FONT_SIZE = "medium"

# Line spacing key -> line height multiplier
LINE_SPACINGS: dict[str, float] = {
    "tight": 0.8,
    "normal": 1.2,
    "loose": 1.5,
    "extra-loose": 2.0,
}
DEFAULT_LINE_SPACING = "normal"

# Fabric key -> background color
FABRIC_COLORS: dict[str, str] = {
    "white": "#ffffff",
    "cream": "#fffdd0",
    "light-gray": "#f0f0f0",
    "beige": "#f5f5dc",
    "light-blue": "#e6f3ff",
    "light-pink": "#ffe6f0",
}
DEFAULT_FABRIC_COLOR = "white"

# Font family key -> font categories to look for, most preferred first
FONT_FAMILIES: dict[str, tuple[str, ...]] = {
    "pixel": ("pixel", "monospace"),
    "serif": ("serif",),
    "sans-serif": ("sans-serif",),
    "monospace": ("monospace",),
    "script": ("script", "decorative"),
}
DEFAULT_FONT_FAMILY = "sans-serif"

DEFAULT_STITCH_COLOR = "#000000"
DEFAULT_MAX_LINES = 3

# Rasterizer layout
TEXT_MARGIN = 10  # px added to buffer width and height (half on each side)

# Converter thresholds (0-255)
SAMPLE_ALPHA_MIN = 50  # samples at or below this alpha are ignored
ACTIVE_ALPHA_MEAN = 128  # mean alpha of contributing samples must exceed this
ACTIVE_BRIGHTNESS_MAX = 180  # mean brightness must stay below this
SCALE_DIVISOR = 8  # scale_factor = round(grid_size / SCALE_DIVISOR)

# Size guards
MAX_BUFFER_PIXELS = 16_000_000
MAX_GRID_CELLS = 250_000
MAX_CANVAS_DIMENSION = 16_384

# Renderer geometry
PATTERN_MARGIN = 20
STITCH_INSET = 1
MIN_STROKE_WIDTH = 1.5
ACCENT_MIN_GRID_SIZE = 10
SHADOW_OFFSET = 1
SHADOW_ALPHA = 40

# (every N cells, color, stroke width), drawn in order
GRID_TIERS: tuple[tuple[int, str, int], ...] = (
    (1, "#dddddd", 1),
    (10, "#aaaaaa", 1),
    (50, "#666666", 2),
)

TEXTURE_ALPHA = 0.03
TEXTURE_DARKEN = 0.6
TEXTURE_SPACING = 4

# Reporter
STITCHES_PER_HOUR = 200
STITCHES_PER_SKEIN = 1000
AIDA_COUNT = 14
FABRIC_BORDER_ALLOWANCE = 84  # added to cells * AIDA_COUNT before unit conversion
MM_PER_INCH = 25.4

# Export
PNG_FILENAME = "cross-stitch-pattern.png"
PNG_GRID_FILENAME = "cross-stitch-pattern-with-grid.png"
PDF_FILENAME = "cross-stitch-pattern.pdf"
PX_TO_MM = 0.264583
PDF_MAX_IMAGE_WIDTH_MM = 180
PDF_MAX_IMAGE_HEIGHT_MM = 200
PDF_MARGIN_MM = 15
PDF_MAX_WRAPPED_LINES = 4  # per header line; longer text is cut with an ellipsis

STITCHING_INSTRUCTIONS = (
    "Find the center of your fabric by folding it in half both ways and start stitching there.",
    "Use 2 strands of embroidery floss for 14-count Aida fabric.",
    "Each square on the pattern is one cross stitch; work every X in the same direction.",
    "Complete the bottom diagonal of a row of stitches first, then come back across the top.",
    "Count carefully using the bold grid lines, which mark every 10 stitches.",
    "Keep an even tension and avoid carrying floss across the back over long gaps.",
)

# Zoom (view only)
ZOOM_MIN = 0.2
ZOOM_MAX = 3.0
ZOOM_STEP = 0.2

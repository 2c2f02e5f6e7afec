"""Configuration Constants

Constants for letter layout and rendering configuration.
"""
import os

# Page Types (width, height in millimeters)
PAGE_DIMENSIONS = {
    "letter": (215.9, 279.4),  # 8.5" x 11"
    "legal": (215.9, 355.6),   # 8.5" x 14"
    "a4": (210.0, 297.0),
}
DEFAULT_PAGE_TYPE = "letter"  # Fallback for unknown page types

# Unit Conversion Factors (to millimeters)
MM_PER_POINT = 0.3528
MM_PER_INCH = 25.4
MM_PER_PIXEL = 0.2645833  # 96 px per inch

# Default Layout
DEFAULT_X_MARGIN = "38mm"
DEFAULT_Y_MARGIN = "13mm"

# Default Typography
DEFAULT_FONT_FACE = "Helvetica"
DEFAULT_TEXT_SIZES = {
    "normal": "11pt",
    "heading1": "16pt",
    "heading2": "14pt",
    "heading3": "12pt",
}
DEFAULT_TEXT_ALIGN = "left"
DEFAULT_PARAGRAPH_SPACING = "11mm"
DEFAULT_LINE_SPACING = "7mm"
DEFAULT_LINE_HEIGHT_FACTOR = 1.5  # Line height when no spacing is given

# Header/Footer Decorations
PAGE_NUMBER_PLACEHOLDER = "#"
DEFAULT_PAGE_NUMBER_FORMAT = "-#-"
DEFAULT_NEXT_PAGE_FORMAT = ".../#"
SKIP_FIRST = "skip-first"

# Allowed option values
TEXT_ALIGNMENTS = ("left", "right", "center", "full")
DECORATION_ALIGNMENTS = ("left", "center", "right")
DECORATION_LOCATIONS = ("header", "footer")
PAGE_BREAK_ESTIMATES = ("heuristic", "measured")

# Pagination
HEURISTIC_LINES = 3  # Pre-draw token height estimate = line spacing x this

# Lists (millimeters)
LIST_MARKER_INDENT_MM = 5.0
LIST_TEXT_OFFSET_MM = 5.0
BULLET_MARKER = "•"

# Separator
SEPARATOR_LINE_WIDTH_MM = 0.2

# First-page Imagery (millimeters)
DEPT_SIGNATURE_HEIGHT_MM = 10.0
DEPT_SIGNATURE_GAP_MM = 10.0  # Space between signature and first content line
WORDMARK_HEIGHT_MM = 7.5
WORDMARK_BOTTOM_OFFSET_MM = 13.0
WORDMARK_CLEARANCE_FACTOR = 1.5

# Tables
TABLE_THEME = "grid"
TABLE_HEADER_FILL = "#E6E6E6"
TABLE_BORDER_COLOR = "#808080"
TABLE_CELL_PADDING_PT = 3

# Export
PDF_EXTENSION = ".pdf"
EXPORT_ERROR_MESSAGE = "Failed to download PDF. Please try again."

# Runtime Settings (environment)
IMAGE_LOAD_TIMEOUT = float(os.getenv("LETTERFLOW_IMAGE_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("LETTERFLOW_LOG_LEVEL", "INFO")
FONT_DIRS = tuple(
    path for path in os.getenv("LETTERFLOW_FONT_DIRS", "").split(os.pathsep) if path
)

"""Letter Options Dataclasses

Document-level configuration for one letter render, plus the per-block
typography override record.
"""
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from .config import (
    DEFAULT_PAGE_TYPE,
    DEFAULT_X_MARGIN,
    DEFAULT_Y_MARGIN,
    DEFAULT_FONT_FACE,
    DEFAULT_TEXT_SIZES,
    DEFAULT_TEXT_ALIGN,
    DEFAULT_PARAGRAPH_SPACING,
    DEFAULT_LINE_SPACING,
    DEFAULT_PAGE_NUMBER_FORMAT,
    DEFAULT_NEXT_PAGE_FORMAT,
    SKIP_FIRST,
    TEXT_ALIGNMENTS,
    DECORATION_ALIGNMENTS,
    DECORATION_LOCATIONS,
    PAGE_BREAK_ESTIMATES,
    FONT_DIRS,
)
from .exceptions import InvalidConfigurationError
from .document_builder.units import to_mm
from .utils import (
    validate_file_name,
    validate_dept_signature,
    validate_page_number_format,
    validate_choice,
)

ShowPageNumbers = Union[bool, Literal["skip-first"]]


@dataclass(frozen=True)
class LetterOptions:
    """Configuration for rendering one letter.

    Created once at render start and never mutated. Validation runs on
    construction so configuration errors surface before any page is drawn.

    Attributes:
        file_name: Export file name (".pdf" is appended when missing)
        dept_signature: Department signature image (path, URL or data URI)

        # Layout
        page_type: "letter", "legal" or "a4"
        x_margin: Left/right margin as a length string
        y_margin: Top/bottom margin as a length string

        # Typography
        font_face: Font family for all text
        text_size_normal: Body text size
        text_size_heading1/2/3: Heading sizes by level
        text_align: "left", "right", "center" or "full"
        paragraph_spacing: Space after paragraphs, headings and lists
        line_spacing: Distance between wrapped lines (blank for 1.5x text_size_normal)

        # Page Numbers
        show_page_numbers: True, False or "skip-first"
        page_number_format: Format with "#" replaced by the page number

        # Next Page Indicators
        show_next_page: True, False or "skip-first"
        next_page_number_format: Format with "#" replaced by the next page number

        # Letter Metadata
        letter_version: Optional version written to the PDF keywords
        letter_number: Tracking number
        show_letter_number: If True, stamp the tracking number on every page

        # Canada Wordmark
        show_canada_wordmark: If True, draw the wordmark on the first page
        canada_wordmark_path: Wordmark image (path, URL or data URI)

        # Pagination
        page_break_estimate: "heuristic" (line spacing x 3) or "measured"
        font_dirs: Extra directories searched for TrueType font files
    """

    # Required
    file_name: str
    dept_signature: str

    # Layout
    page_type: str = DEFAULT_PAGE_TYPE
    x_margin: str = DEFAULT_X_MARGIN
    y_margin: str = DEFAULT_Y_MARGIN

    # Typography
    font_face: str = DEFAULT_FONT_FACE
    text_size_normal: str = DEFAULT_TEXT_SIZES["normal"]
    text_size_heading1: str = DEFAULT_TEXT_SIZES["heading1"]
    text_size_heading2: str = DEFAULT_TEXT_SIZES["heading2"]
    text_size_heading3: str = DEFAULT_TEXT_SIZES["heading3"]
    text_align: str = DEFAULT_TEXT_ALIGN
    paragraph_spacing: str = DEFAULT_PARAGRAPH_SPACING
    line_spacing: str = DEFAULT_LINE_SPACING

    # Page Numbers
    show_page_numbers: ShowPageNumbers = False
    page_number_format: str = DEFAULT_PAGE_NUMBER_FORMAT
    page_number_location: str = "header"
    page_number_alignment: str = "center"

    # Next Page Indicators
    show_next_page: ShowPageNumbers = False
    next_page_number_format: str = DEFAULT_NEXT_PAGE_FORMAT
    next_page_number_location: str = "header"
    next_page_number_alignment: str = "center"

    # Letter Metadata
    letter_version: Optional[str] = None
    letter_number: Optional[str] = None
    show_letter_number: bool = False
    letter_number_location: str = "footer"
    letter_number_alignment: str = "right"

    # Canada Wordmark
    show_canada_wordmark: bool = False
    canada_wordmark_path: Optional[str] = None

    # Pagination
    page_break_estimate: str = "heuristic"
    font_dirs: Tuple[str, ...] = FONT_DIRS

    def __post_init__(self):
        """Validate configuration options after initialization."""
        validate_file_name(self.file_name)
        validate_dept_signature(self.dept_signature)
        validate_page_number_format(self.page_number_format, "pageNumberFormat")
        validate_page_number_format(self.next_page_number_format, "nextPageNumberFormat")

        validate_choice(self.text_align, TEXT_ALIGNMENTS, "textAlign")
        validate_choice(self.page_break_estimate, PAGE_BREAK_ESTIMATES, "pageBreakEstimate")
        for prefix in ("page_number", "next_page_number", "letter_number"):
            validate_choice(getattr(self, f"{prefix}_location"), DECORATION_LOCATIONS, f"{prefix}_location")
            validate_choice(getattr(self, f"{prefix}_alignment"), DECORATION_ALIGNMENTS, f"{prefix}_alignment")

        for name in ("show_page_numbers", "show_next_page"):
            value = getattr(self, name)
            if not isinstance(value, bool) and value != SKIP_FIRST:
                raise InvalidConfigurationError(
                    f"{name} must be True, False or '{SKIP_FIRST}', got {value!r}"
                )

        if self.show_canada_wordmark and not self.canada_wordmark_path:
            raise InvalidConfigurationError(
                "canada_wordmark_path is required when show_canada_wordmark is enabled"
            )

        # Parse every length now; InvalidUnitError is a configuration error
        for name in (
            "x_margin",
            "y_margin",
            "text_size_normal",
            "text_size_heading1",
            "text_size_heading2",
            "text_size_heading3",
            "paragraph_spacing",
            "line_spacing",
        ):
            value = getattr(self, name)
            # A blank line spacing means 1.5x the normal text size
            if name == "line_spacing" and not str(value).strip():
                continue
            if to_mm(value) < 0:
                raise InvalidConfigurationError(f"{name}: value must be positive, got: {value}")

    @property
    def x_margin_mm(self) -> float:
        return to_mm(self.x_margin)

    @property
    def y_margin_mm(self) -> float:
        return to_mm(self.y_margin)


@dataclass(frozen=True)
class BlockStyle:
    """Per-block typography overrides.

    Any field left as None (or empty) inherits the document default.
    """

    font_face: Optional[str] = None
    text_size_normal: Optional[str] = None
    text_size_heading1: Optional[str] = None
    text_size_heading2: Optional[str] = None
    text_size_heading3: Optional[str] = None
    text_align: Optional[str] = None
    line_spacing: Optional[str] = None
    paragraph_spacing: Optional[str] = None

    def __post_init__(self):
        if self.text_align:
            validate_choice(self.text_align, TEXT_ALIGNMENTS, "textAlign")

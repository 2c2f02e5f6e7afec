"""Page Geometry Module

Resolves page types to physical dimensions and computes the content box,
page-break decisions and header/footer alignment.

All measurements are in millimeters with origin at the top-left corner.
"""
from dataclasses import dataclass
from typing import Tuple

from ..config import (
    PAGE_DIMENSIONS,
    DEFAULT_PAGE_TYPE,
    WORDMARK_BOTTOM_OFFSET_MM,
    WORDMARK_CLEARANCE_FACTOR,
)
from ..logger import get_logger

LOGGER = get_logger(__name__)


def get_page_dimensions(page_type: str) -> Tuple[float, float]:
    """
    Resolve a named page type to (width, height) in millimeters.

    Unknown page types fall back to the default "letter" size. This is an
    explicit default, logged as a warning.

    Examples:
        >>> get_page_dimensions("legal")
        (215.9, 355.6)
    """
    if page_type not in PAGE_DIMENSIONS:
        LOGGER.warning("Unknown page type %r, using %r", page_type, DEFAULT_PAGE_TYPE)
        return PAGE_DIMENSIONS[DEFAULT_PAGE_TYPE]
    return PAGE_DIMENSIONS[page_type]


def calculate_available_width(page_width: float, left_margin: float, right_margin: float) -> float:
    """Width of the content box between the side margins."""
    return page_width - left_margin - right_margin


def calculate_available_height(page_height: float, top_margin: float, bottom_margin: float) -> float:
    """Height of the content box between the top and bottom margins."""
    return page_height - top_margin - bottom_margin


def should_break_page(
    current_y: float,
    content_height: float,
    page_height: float,
    bottom_margin: float
) -> bool:
    """
    Decide whether incoming content overflows the current page.

    Content landing exactly on the bottom boundary still fits.

    Args:
        current_y: Cursor position from the top of the page
        content_height: Estimated height of the content about to be drawn
        page_height: Physical page height
        bottom_margin: Bottom margin in effect for this page

    Returns:
        True if a new page must be started before drawing

    Examples:
        >>> should_break_page(246.4, 20, 279.4, 13)
        False
        >>> should_break_page(250, 20, 279.4, 13)
        True
    """
    return current_y + content_height > page_height - bottom_margin


def get_aligned_x(
    alignment: str,
    page_width: float,
    left_margin: float,
    right_margin: float,
    text_width: float = 0.0
) -> float:
    """
    Calculate the x position of a text run for left/center/right alignment.

    Unrecognized alignments are treated as left.
    """
    if alignment == "right":
        return page_width - right_margin - text_width
    if alignment == "center":
        available_width = calculate_available_width(page_width, left_margin, right_margin)
        return left_margin + (available_width - text_width) / 2
    return left_margin


def effective_bottom_margin(page: int, bottom_margin: float, wordmark_height: float = 0.0) -> float:
    """
    Bottom margin in effect on a given page.

    On the first page a wordmark needs clear space above it, so the margin
    widens to the wordmark height times the clearance factor plus its fixed
    offset from the bottom edge. Every other page uses the plain margin.
    """
    if page == 1 and wordmark_height > 0:
        reserved = wordmark_height * WORDMARK_CLEARANCE_FACTOR + WORDMARK_BOTTOM_OFFSET_MM
        return max(bottom_margin, reserved)
    return bottom_margin


@dataclass(frozen=True)
class PageGeometry:
    """Physical page size and margins for one letter, in millimeters.

    Attributes:
        page_width: Page width
        page_height: Page height
        x_margin: Left and right margin
        y_margin: Top and bottom margin
        wordmark_height: Height of the first-page wordmark (0 when absent)
    """

    page_width: float
    page_height: float
    x_margin: float
    y_margin: float
    wordmark_height: float = 0.0

    @classmethod
    def for_page_type(cls, page_type: str, x_margin: float, y_margin: float) -> "PageGeometry":
        width, height = get_page_dimensions(page_type)
        return cls(page_width=width, page_height=height, x_margin=x_margin, y_margin=y_margin)

    @property
    def available_width(self) -> float:
        return calculate_available_width(self.page_width, self.x_margin, self.x_margin)

    @property
    def available_height(self) -> float:
        return calculate_available_height(self.page_height, self.y_margin, self.y_margin)

    def bottom_margin(self, page: int) -> float:
        return effective_bottom_margin(page, self.y_margin, self.wordmark_height)

    def content_bottom(self, page: int) -> float:
        """Lowest y that content may reach on ``page``."""
        return self.page_height - self.bottom_margin(page)

    def should_break(self, current_y: float, content_height: float, page: int) -> bool:
        return should_break_page(current_y, content_height, self.page_height, self.bottom_margin(page))

    def aligned_x(self, alignment: str, text_width: float = 0.0) -> float:
        return get_aligned_x(alignment, self.page_width, self.x_margin, self.x_margin, text_width)

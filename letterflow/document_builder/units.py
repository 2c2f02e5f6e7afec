"""Unit Conversion Utilities

This module provides pure utility functions for converting between the length
units accepted in letter configuration and the canonical layout unit:

- Layout math: millimeters with origin at top-left of the page
- Font sizes: typographic points (what the PDF writer expects)
- ReportLab drawing: points with origin at bottom-left

Length strings carry an optional unit suffix ("12pt", "1in", "96px", "10mm").
Values without a suffix are assumed to already be millimeters.

All functions are pure (no side effects) and can be tested in isolation.
"""
import re
from typing import Optional

from ..exceptions import InvalidUnitError
from ..config import (
    MM_PER_POINT,
    MM_PER_INCH,
    MM_PER_PIXEL,
    DEFAULT_LINE_HEIGHT_FACTOR,
)

_UNIT_FACTORS = {
    "mm": 1.0,
    "pt": MM_PER_POINT,
    "in": MM_PER_INCH,
    "px": MM_PER_PIXEL,
}

_LENGTH_RE = re.compile(r"^(?P<number>.*?)(?P<unit>mm|pt|in|px)?$")


def to_mm(value: str) -> float:
    """
    Convert a length string to millimeters.

    Args:
        value: Length with optional unit suffix (mm, pt, in, px)

    Returns:
        Length in millimeters

    Raises:
        InvalidUnitError: If the numeric portion cannot be parsed

    Examples:
        >>> to_mm("1in")
        25.4
        >>> to_mm("10")
        10.0
    """
    if value is None:
        raise InvalidUnitError(str(value))

    text = str(value).strip().lower()
    match = _LENGTH_RE.match(text)
    number = match.group("number").strip() if match else ""
    unit = (match.group("unit") if match else None) or "mm"

    try:
        amount = float(number)
    except ValueError:
        raise InvalidUnitError(str(value)) from None

    return amount * _UNIT_FACTORS[unit]


def to_pt(value: str) -> float:
    """
    Convert a length string to typographic points.

    Font sizes are configured as length strings ("11pt") but the PDF writer
    takes them in points, so every size goes through millimeters first.

    Args:
        value: Length with optional unit suffix

    Returns:
        Length in points
    """
    return mm_to_pt(to_mm(value))


def pt_to_mm(points: float) -> float:
    """
    Convert points to millimeters.

    Examples:
        >>> round(pt_to_mm(10), 3)
        3.528
    """
    return points * MM_PER_POINT


def mm_to_pt(millimeters: float) -> float:
    """
    Convert millimeters to points.

    Examples:
        >>> round(mm_to_pt(25.4))
        72
    """
    return millimeters / MM_PER_POINT


def get_line_height(font_size: str, line_spacing: Optional[str] = None) -> float:
    """
    Calculate the line height in millimeters.

    Args:
        font_size: Font size as a length string (e.g. "11pt")
        line_spacing: Explicit line spacing; wins when provided

    Returns:
        Line spacing in mm, or 1.5x the font size when no spacing is given

    Examples:
        >>> get_line_height("11pt", "7mm")
        7.0
        >>> get_line_height("10mm")
        15.0
    """
    if line_spacing:
        return to_mm(line_spacing)
    return to_mm(font_size) * DEFAULT_LINE_HEIGHT_FACTOR


def flip_y(y: float, page_height: float) -> float:
    """
    Flip Y coordinate between top-left and bottom-left origin systems.

    Layout math runs top-down (cursor grows toward the page bottom) while
    ReportLab draws with its origin at the bottom-left corner.

    Notes:
        This function is its own inverse:
        flip_y(flip_y(y, h), h) == y
    """
    return page_height - y

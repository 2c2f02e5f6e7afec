"""
Tests for page dimensions, the content box and the page-break predicate.
"""

import logging

import pytest

from letterflow.document_builder.page_geometry import (
    PageGeometry,
    calculate_available_height,
    calculate_available_width,
    effective_bottom_margin,
    get_aligned_x,
    get_page_dimensions,
    should_break_page,
)


class TestPageDimensions:
    """Test page type resolution."""

    @pytest.mark.parametrize("page_type, expected", [
        ("letter", (215.9, 279.4)),
        ("legal", (215.9, 355.6)),
        ("a4", (210.0, 297.0)),
    ])
    def test_known_types(self, page_type, expected):
        assert get_page_dimensions(page_type) == expected

    def test_unknown_type_falls_back_to_letter(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_page_dimensions("tabloid") == (215.9, 279.4)
        assert "tabloid" in caplog.text


class TestContentBox:
    """Test available width/height."""

    def test_available_width(self):
        assert calculate_available_width(215.9, 38, 38) == pytest.approx(139.9)

    def test_available_height(self):
        assert calculate_available_height(279.4, 13, 13) == pytest.approx(253.4)

    def test_geometry_properties(self, geometry):
        assert geometry.available_width == pytest.approx(139.9)
        assert geometry.available_height == pytest.approx(253.4)


class TestShouldBreakPage:
    """Test the overflow predicate."""

    def test_fits_exactly_at_boundary(self):
        # 246.4 + 20 == 279.4 - 13
        assert should_break_page(246.4, 20, 279.4, 13) is False

    def test_overflow_breaks(self):
        assert should_break_page(250, 20, 279.4, 13) is True

    def test_empty_content_never_breaks_inside_margin(self):
        assert should_break_page(266.4, 0, 279.4, 13) is False


class TestAlignment:
    """Test horizontal alignment helper."""

    def test_left(self):
        assert get_aligned_x("left", 215.9, 38, 38, 20) == 38

    def test_right(self):
        assert get_aligned_x("right", 215.9, 38, 38, 20) == pytest.approx(157.9)

    def test_center(self):
        assert get_aligned_x("center", 215.9, 38, 38, 20) == pytest.approx(38 + (139.9 - 20) / 2)

    def test_unknown_alignment_is_left(self):
        assert get_aligned_x("justify", 215.9, 38, 38, 20) == 38


class TestEffectiveBottomMargin:
    """Test wordmark clearance on the first page."""

    def test_first_page_with_wordmark(self):
        assert effective_bottom_margin(1, 13, 7.5) == pytest.approx(7.5 * 1.5 + 13)

    def test_later_pages_use_plain_margin(self):
        assert effective_bottom_margin(2, 13, 7.5) == 13

    def test_without_wordmark(self):
        assert effective_bottom_margin(1, 13, 0.0) == 13

    def test_large_margin_wins(self):
        assert effective_bottom_margin(1, 40, 7.5) == 40

    def test_geometry_uses_wordmark_only_on_page_one(self):
        geometry = PageGeometry(215.9, 279.4, 38, 13, wordmark_height=7.5)
        assert geometry.should_break(250, 5, page=1) is True
        assert geometry.should_break(250, 5, page=2) is False

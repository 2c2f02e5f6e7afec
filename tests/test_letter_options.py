"""
Tests for letter configuration validation.
"""

import pytest

from letterflow import (
    BlockStyle,
    InvalidConfigurationError,
    InvalidFormatError,
    InvalidUnitError,
    TextBlock,
    SeparatorBlock,
)
from letterflow.utils import ensure_pdf_extension


class TestDefaults:
    """Test default option values."""

    def test_defaults(self, options):
        assert options.page_type == "letter"
        assert options.x_margin_mm == pytest.approx(38)
        assert options.y_margin_mm == pytest.approx(13)
        assert options.page_number_format == "-#-"
        assert options.next_page_number_format == ".../#"
        assert options.letter_number_location == "footer"
        assert options.letter_number_alignment == "right"
        assert options.page_break_estimate == "heuristic"

    def test_options_are_frozen(self, options):
        with pytest.raises(AttributeError):
            options.page_type = "a4"


class TestValidation:
    """Test invalid configuration is rejected."""

    def test_page_number_format_needs_placeholder(self, make_options):
        with pytest.raises(InvalidFormatError, match="pageNumberFormat must contain #"):
            make_options(page_number_format="Page")

    def test_next_page_format_needs_placeholder(self, make_options):
        with pytest.raises(InvalidFormatError, match="nextPageNumberFormat"):
            make_options(next_page_number_format="continued")

    @pytest.mark.parametrize("field, value", [
        ("text_align", "justify"),
        ("page_number_location", "sidebar"),
        ("letter_number_alignment", "full"),
        ("page_break_estimate", "exact"),
        ("show_page_numbers", "sometimes"),
    ])
    def test_invalid_choices(self, make_options, field, value):
        with pytest.raises(InvalidConfigurationError):
            make_options(**{field: value})

    @pytest.mark.parametrize("field", ["x_margin", "line_spacing", "text_size_heading2"])
    def test_unparseable_lengths(self, make_options, field):
        with pytest.raises(InvalidUnitError):
            make_options(**{field: "wide"})

    @pytest.mark.parametrize("field", ["x_margin", "y_margin", "paragraph_spacing", "line_spacing", "text_size_normal"])
    def test_negative_lengths_are_rejected(self, make_options, field):
        with pytest.raises(InvalidConfigurationError, match="value must be positive, got: -10mm"):
            make_options(**{field: "-10mm"})

    def test_zero_margin_is_accepted(self, make_options):
        assert make_options(x_margin="0mm").x_margin_mm == 0

    def test_blank_line_spacing_is_accepted(self, make_options):
        assert make_options(line_spacing="").line_spacing == ""

    def test_skip_first_is_accepted(self, make_options):
        options = make_options(show_page_numbers="skip-first", show_next_page="skip-first")
        assert options.show_page_numbers == "skip-first"

    def test_block_style_alignment(self):
        with pytest.raises(InvalidConfigurationError):
            BlockStyle(text_align="middle")
        assert BlockStyle(text_align="").text_align == ""


class TestContentBlocks:
    """Test block discriminators."""

    def test_kinds(self):
        assert TextBlock("x").kind == "text"
        assert SeparatorBlock().kind == "separator"

    @pytest.mark.parametrize("content, empty", [(None, True), ("", True), ("  \n", True), ("Hi", False)])
    def test_is_empty(self, content, empty):
        assert TextBlock(content).is_empty is empty


@pytest.mark.parametrize("name, expected", [
    ("letter", "letter.pdf"),
    ("letter.pdf", "letter.pdf"),
    ("LETTER.PDF", "LETTER.PDF"),
])
def test_ensure_pdf_extension(name, expected):
    assert ensure_pdf_extension(name) == expected

"""
End-to-end tests for letter rendering.
"""

import os

import pytest

from letterflow import (
    ExportError,
    InvalidConfigurationError,
    LetterBuilder,
    LetterOptions,
    MissingRequiredFieldError,
    SeparatorBlock,
    TextBlock,
    render_letter,
)
from letterflow.document_builder import ImageLoader


@pytest.fixture
def long_letter():
    paragraph = (
        "Thank you for your application. We have reviewed the material you "
        "provided and we are pleased to confirm that the file is complete."
    )
    return [TextBlock("# Notice")] + [TextBlock(paragraph) for _ in range(14)]


class TestScenarios:
    """Test whole-letter rendering."""

    def test_short_letter_is_one_page(self, make_options, failing_loader):
        result = LetterBuilder(make_options(), [TextBlock("Dear Sir or Madam,")], failing_loader).build()
        assert result.page_count == 1
        assert result.cursor_y == pytest.approx(13 + 7 + 11)

    def test_long_letter_paginates_with_continuation(self, make_options, long_letter):
        options = make_options(show_next_page=True)
        result = render_letter(options, long_letter)
        writer = result.writer

        assert result.page_count >= 2
        for page in range(1, result.page_count):
            assert f".../{page + 1}" in [op.text for op in writer.ops(page, "text")]
        last_texts = [op.text for op in writer.ops(result.page_count, "text")]
        assert not any(text.startswith(".../") for text in last_texts)

    def test_mixed_blocks(self, make_options):
        blocks = [
            TextBlock("123 Main Street\nOttawa ON"),
            SeparatorBlock(),
            TextBlock("## Subject\n\n- first\n- second"),
            TextBlock(None),
        ]
        result = render_letter(make_options(show_page_numbers=True), blocks)
        assert result.page_count == 1
        assert result.warnings == []
        assert len(result.writer.ops(1, "line")) == 1


class TestValidation:
    """Test configuration errors surface before rendering."""

    def test_missing_file_name(self, png_data_uri):
        with pytest.raises(MissingRequiredFieldError, match="fileName is required"):
            LetterOptions(file_name="", dept_signature=png_data_uri)

    def test_missing_signature(self):
        with pytest.raises(MissingRequiredFieldError, match="deptSignature is required"):
            LetterOptions(file_name="letter", dept_signature="  ")

    def test_unknown_block_kind(self, options, failing_loader):
        class Stray:
            kind = "video"

        builder = LetterBuilder(options, [TextBlock("ok"), Stray()], failing_loader)
        with pytest.raises(InvalidConfigurationError, match="Block 2"):
            builder.build()


class TestImagery:
    """Test first-page images."""

    def test_signature_offsets_content(self, options):
        result = render_letter(options, [TextBlock("Hello")])
        images = result.writer.ops(1, "image")
        assert len(images) == 1
        signature = images[0]
        assert (signature.x, signature.y) == (pytest.approx(38), pytest.approx(13))
        assert signature.height == pytest.approx(10)
        assert signature.width == pytest.approx(20)
        assert result.cursor_y == pytest.approx(13 + 10 + 10 + 7 + 11)

    def test_missing_signature_is_a_warning(self, options, failing_loader):
        result = LetterBuilder(options, [TextBlock("Hello")], failing_loader).build()
        assert result.writer.ops(1, "image") == []
        assert result.warnings == ["Failed to load department signature image: unreachable"]
        assert result.page_count == 1

    def test_wordmark_bottom_left_of_first_page(self, make_options, png_data_uri):
        options = make_options(show_canada_wordmark=True, canada_wordmark_path=png_data_uri)
        result = render_letter(options, [TextBlock("Hello")])
        wordmark = result.writer.ops(1, "image")[1]
        assert wordmark.x == pytest.approx(38)
        assert wordmark.y + wordmark.height == pytest.approx(279.4 - 13)

    def test_wordmark_requires_path(self, make_options):
        with pytest.raises(InvalidConfigurationError):
            make_options(show_canada_wordmark=True)


class TestLifecycle:
    """Test one-shot build, callback and export."""

    def test_build_is_cached(self, options, failing_loader):
        builder = LetterBuilder(options, [TextBlock("Hello")], failing_loader)
        first = builder.build()
        assert builder.build() is first
        assert first.writer.page_count == 1

    def test_on_ready_receives_download(self, options):
        calls = []
        builder = LetterBuilder(options, [TextBlock("Hello")])
        builder.build(on_ready=calls.append)
        builder.build(on_ready=calls.append)

        assert len(calls) == 1
        path = calls[0]()
        assert path == options.file_name + ".pdf"
        assert os.path.exists(path)

    def test_metadata(self, make_options):
        options = make_options(letter_number="2024-0042", letter_version="v2")
        result = render_letter(options, [TextBlock("Hello")])
        assert result.writer.metadata == {
            "title": options.file_name,
            "subject": "2024-0042",
            "keywords": "v2",
        }

    def test_download_failure_raises_export_error(self, make_options, tmp_path):
        options = make_options(file_name=str(tmp_path / "missing" / "letter"))
        result = render_letter(options, [TextBlock("Hello")])
        with pytest.raises(ExportError, match="Failed to download PDF. Please try again.") as exc_info:
            result.download()
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_to_bytes(self, options):
        result = render_letter(options, [TextBlock("Hello")], image_loader=ImageLoader(timeout=5))
        assert result.to_bytes().startswith(b"%PDF")

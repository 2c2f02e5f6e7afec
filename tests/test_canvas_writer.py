"""
Tests for the ReportLab-backed document writer.
"""

import os

import pytest

from letterflow.document_builder import LoadedImage, ReportLabWriter, TableStyleBundle
from letterflow.document_builder.units import pt_to_mm
from tests.conftest import make_png


class TestPages:
    """Test page management."""

    def test_starts_with_one_page(self, writer):
        assert writer.page_count == 1
        assert writer.current_page == 1

    def test_add_and_revisit_pages(self, writer):
        assert writer.add_page() == 2
        writer.set_page(1)
        writer.draw_text("back on one", 10, 10)
        assert [op.text for op in writer.ops(1, "text")] == ["back on one"]
        assert writer.ops(2) == []

    def test_set_page_out_of_range(self, writer):
        with pytest.raises(IndexError):
            writer.set_page(3)


class TestDrawing:
    """Test recorded draw operations."""

    def test_text_uses_current_font(self, writer):
        writer.set_font("Times-Bold")
        writer.set_font_size(14)
        writer.draw_text("Hello", 38, 20)
        op = writer.ops(1, "text")[0]
        assert (op.font_name, op.font_size, op.x, op.y) == ("Times-Bold", 14, 38, 20)

    def test_line(self, writer):
        writer.draw_line(38, 50, 177.9, 50, 0.2)
        op = writer.ops(1, "line")[0]
        assert (op.x1, op.y1, op.x2, op.y2) == (38, 50, 177.9, 50)

    def test_measure_text_in_mm(self, writer):
        width = writer.measure_text("Hello", "Helvetica", 12)
        from reportlab.pdfbase.pdfmetrics import stringWidth
        assert width == pytest.approx(pt_to_mm(stringWidth("Hello", "Helvetica", 12)))

    def test_measure_text_defaults_to_current_font(self, writer):
        writer.set_font("Courier")
        writer.set_font_size(10)
        # Courier glyphs are 600/1000 em wide
        assert writer.measure_text("abcd") == pytest.approx(pt_to_mm(4 * 6.0))


class TestTables:
    """Test table layout."""

    def test_draw_table_returns_bottom(self, writer):
        style = TableStyleBundle()
        height = writer.measure_table(["A", "B"], [["1", "2"], ["3", "4"]], ["left", "right"], 100, style)
        bottom = writer.draw_table(["A", "B"], [["1", "2"], ["3", "4"]], ["left", "right"], 38, 40, 100, style)
        assert height > 0
        assert bottom == pytest.approx(40 + height)
        op = writer.ops(1, "table")[0]
        assert op.rows == 3

    def test_more_rows_are_taller(self, writer):
        style = TableStyleBundle(theme="plain", header_fill=None)
        short = writer.measure_table(["A"], [["1"]], [], 80, style)
        tall = writer.measure_table(["A"], [["1"], ["2"], ["3"]], [], 80, style)
        assert tall > short

    def test_ragged_rows_are_padded(self, writer):
        bottom = writer.draw_table([], [["a", "b", "c"], ["d"]], [], 38, 10, 120, TableStyleBundle())
        assert bottom > 10


class TestTablePagination:
    """Test tables split across pages."""

    HEADER = ["No.", "Item"]
    ROWS = [[str(n), f"Entry {n}"] for n in range(1, 81)]

    def draw(self, writer, y=13, **limits):
        return writer.draw_table(self.HEADER, self.ROWS, [], 38, y, 139.9, TableStyleBundle(), **limits)

    def parts(self, writer):
        return [op for page in range(1, writer.page_count + 1) for op in writer.ops(page, "table")]

    def test_without_limit_draws_one_part(self, writer):
        bottom = self.draw(writer)
        assert writer.page_count == 1
        assert bottom > 279.4

    def test_rows_continue_on_new_pages(self, writer):
        bottom = self.draw(writer, page_bottom=266.4, next_top=13, next_bottom=266.4)
        parts = self.parts(writer)
        assert writer.page_count > 1
        assert writer.current_page == writer.page_count
        assert all(op.y + op.height <= 266.4 + 1e-6 for op in parts)
        assert [op.y for op in parts[1:]] == [13] * (len(parts) - 1)
        assert bottom == pytest.approx(parts[-1].y + parts[-1].height)

    def test_header_repeats_on_each_part(self, writer):
        self.draw(writer, page_bottom=266.4, next_top=13, next_bottom=266.4)
        parts = self.parts(writer)
        assert sum(op.rows for op in parts) == len(self.ROWS) + len(parts)

    def test_first_page_with_no_room_is_skipped(self, writer):
        self.draw(writer, y=265, page_bottom=266.4, next_top=13, next_bottom=266.4)
        assert writer.ops(1, "table") == []
        assert writer.ops(2, "table")[0].y == 13

    def test_outputs_every_part(self, writer):
        self.draw(writer, page_bottom=266.4, next_top=13, next_bottom=266.4)
        data = writer.output()
        assert f"/Count {writer.page_count}".encode() in data


class TestOutput:
    """Test serialization."""

    def test_output_is_pdf(self, writer):
        writer.draw_text("Page one", 38, 20)
        writer.add_page()
        writer.draw_text("Page two", 38, 20)
        data = writer.output()
        assert data.startswith(b"%PDF")
        assert b"/Count 2" in data

    def test_image_and_metadata(self, writer):
        image = LoadedImage(make_png(), 200, 100, "inline")
        writer.add_image(image, 38, 13, 20, 10)
        writer.set_metadata(title="letter-42", subject="2024-001", keywords="v3")
        assert writer.metadata == {"title": "letter-42", "subject": "2024-001", "keywords": "v3"}
        assert writer.output().startswith(b"%PDF")

    def test_save_appends_extension(self, writer, tmp_path):
        path = writer.save(str(tmp_path / "out"))
        assert path.endswith("out.pdf")
        assert os.path.exists(path)

    def test_save_does_not_duplicate_extension(self, writer, tmp_path):
        path = writer.save(str(tmp_path / "out.pdf"))
        assert path.endswith("out.pdf")
        assert not path.endswith(".pdf.pdf")

"""Canvas Writer Module

The drawing target for letter rendering. ``DocumentWriter`` is the abstract
interface used by the flow renderer and the decoration pass;
``ReportLabWriter`` implements it on top of ReportLab.

All coordinates passed to a writer are millimeters from the top-left corner
of the page; text y positions are baselines. ReportLabWriter keeps a display
list per page and only paints the ReportLab canvas on output, so earlier
pages can still receive header/footer decoration after later pages exist.
"""
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas as pdfcanvas
from reportlab.platypus import Paragraph, Table, TableStyle

from ..config import (
    DEFAULT_FONT_FACE,
    TABLE_THEME,
    TABLE_HEADER_FILL,
    TABLE_BORDER_COLOR,
    TABLE_CELL_PADDING_PT,
)
from ..logger import get_logger
from ..utils import ensure_pdf_extension
from .image_loader import LoadedImage
from .units import flip_y, mm_to_pt, pt_to_mm

LOGGER = get_logger(__name__)

_CELL_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT}


@dataclass(frozen=True)
class TableStyleBundle:
    """Visual options for table rendering.

    Attributes:
        theme: "grid" (all cell borders) or "plain" (rule under the header)
        header_bold: If True, header cells use the bold font
        header_fill: Header background colour (hex string), or None
        border_color: Border/rule colour (hex string)
    """

    theme: str = TABLE_THEME
    header_bold: bool = True
    header_fill: Optional[str] = TABLE_HEADER_FILL
    border_color: str = TABLE_BORDER_COLOR


# Display list operations

@dataclass(frozen=True)
class TextOp:
    text: str
    x: float
    y: float
    font_name: str
    font_size: float
    kind: str = "text"

    def paint(self, canvas, page_height: float):
        canvas.setFont(self.font_name, self.font_size)
        canvas.drawString(mm_to_pt(self.x), mm_to_pt(flip_y(self.y, page_height)), self.text)


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    kind: str = "line"

    def paint(self, canvas, page_height: float):
        canvas.setLineWidth(mm_to_pt(self.width))
        canvas.line(
            mm_to_pt(self.x1), mm_to_pt(flip_y(self.y1, page_height)),
            mm_to_pt(self.x2), mm_to_pt(flip_y(self.y2, page_height)),
        )


@dataclass(frozen=True)
class ImageOp:
    image: LoadedImage
    x: float
    y: float
    width: float
    height: float
    kind: str = "image"

    def paint(self, canvas, page_height: float):
        # ReportLab anchors images at their bottom-left corner
        canvas.drawImage(
            ImageReader(io.BytesIO(self.image.data)),
            mm_to_pt(self.x),
            mm_to_pt(flip_y(self.y + self.height, page_height)),
            width=mm_to_pt(self.width),
            height=mm_to_pt(self.height),
            mask="auto",
        )


@dataclass(frozen=True)
class TableOp:
    table: Table
    x: float
    y: float
    height: float
    rows: int
    kind: str = "table"

    def paint(self, canvas, page_height: float):
        self.table.drawOn(canvas, mm_to_pt(self.x), mm_to_pt(flip_y(self.y + self.height, page_height)))


class DocumentWriter(ABC):
    """Abstract drawing target for one paginated document.

    A new writer starts with one empty page which is the current page.
    """

    def __init__(self, page_width: float, page_height: float):
        self.page_width = page_width
        self.page_height = page_height

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages created so far."""

    @property
    @abstractmethod
    def current_page(self) -> int:
        """1-based index of the page receiving draw calls."""

    @abstractmethod
    def add_page(self) -> int:
        """Append a page, make it current and return its 1-based index."""

    @abstractmethod
    def set_page(self, page: int):
        """Make an existing page current."""

    @abstractmethod
    def set_font(self, font_name: str):
        """Select the font for subsequent text calls."""

    @abstractmethod
    def set_font_size(self, size: float):
        """Select the font size (points) for subsequent text calls."""

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float):
        """Draw a string with its baseline at y."""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.2):
        """Draw a straight line."""

    @abstractmethod
    def add_image(self, image: LoadedImage, x: float, y: float, width: float, height: float):
        """Draw an image with its top-left corner at (x, y)."""

    @abstractmethod
    def measure_text(self, text: str, font_name: Optional[str] = None, font_size: Optional[float] = None) -> float:
        """Width of a string in millimeters (current font unless given)."""

    @abstractmethod
    def measure_table(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
        alignments: Sequence[str],
        width: float,
        style: TableStyleBundle,
    ) -> float:
        """Height the table would occupy, in millimeters."""

    @abstractmethod
    def draw_table(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
        alignments: Sequence[str],
        x: float,
        y: float,
        width: float,
        style: TableStyleBundle,
        page_bottom: Optional[float] = None,
        next_top: Optional[float] = None,
        next_bottom: Optional[float] = None,
    ) -> float:
        """Draw a table with its top edge at y and return its bottom y.

        When ``page_bottom`` is given, rows that would cross it continue on
        new pages between ``next_top`` and ``next_bottom``. The page holding
        the last row is left current.
        """

    @abstractmethod
    def set_metadata(self, title: Optional[str] = None, subject: Optional[str] = None,
                     keywords: Optional[str] = None):
        """Set document properties."""

    @abstractmethod
    def output(self) -> bytes:
        """Serialize the finished document."""

    def save(self, file_name: str) -> str:
        """
        Write the document to disk.

        Args:
            file_name: Target path; ".pdf" is appended when missing

        Returns:
            Path that was written
        """
        path = ensure_pdf_extension(file_name)
        data = self.output()
        with open(path, "wb") as f:
            f.write(data)
        return path


class ReportLabWriter(DocumentWriter):
    """DocumentWriter that records draw calls and paints them with ReportLab.

    Attributes:
        pages: Display list per page (index 0 is page 1)
    """

    def __init__(self, page_width: float, page_height: float):
        """
        Initialize writer with one empty page.

        Args:
            page_width: Page width in millimeters
            page_height: Page height in millimeters
        """
        super().__init__(page_width, page_height)
        self.pages: List[List] = [[]]
        self._current = 1
        self.font_name = DEFAULT_FONT_FACE
        self.font_size = 11.0
        self.metadata = {}

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> int:
        return self._current

    def add_page(self) -> int:
        self.pages.append([])
        self._current = len(self.pages)
        LOGGER.debug("Added page %d", self._current)
        return self._current

    def set_page(self, page: int):
        if not 1 <= page <= len(self.pages):
            raise IndexError(f"Page {page} out of range 1..{len(self.pages)}")
        self._current = page

    def set_font(self, font_name: str):
        self.font_name = font_name

    def set_font_size(self, size: float):
        self.font_size = size

    def draw_text(self, text: str, x: float, y: float):
        self._ops().append(TextOp(text, x, y, self.font_name, self.font_size))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.2):
        self._ops().append(LineOp(x1, y1, x2, y2, width))

    def add_image(self, image: LoadedImage, x: float, y: float, width: float, height: float):
        self._ops().append(ImageOp(image, x, y, width, height))

    def measure_text(self, text: str, font_name: Optional[str] = None, font_size: Optional[float] = None) -> float:
        width_pt = pdfmetrics.stringWidth(text, font_name or self.font_name, font_size or self.font_size)
        return pt_to_mm(width_pt)

    def _build_table(self, header, rows, alignments, width: float, style: TableStyleBundle):
        data = ([list(header)] if header else []) + [list(row) for row in rows]
        columns = max(len(row) for row in data)
        alignments = list(alignments) + ["left"] * (columns - len(alignments))
        bold_font = style_font = self.font_name
        if style.header_bold:
            bold_font = _bold_variant(self.font_name)

        def cell(text: str, column: int, is_header: bool) -> Paragraph:
            paragraph_style = ParagraphStyle(
                "TableCell",
                fontName=bold_font if is_header else style_font,
                fontSize=self.font_size,
                leading=self.font_size * 1.2,
                alignment=_CELL_ALIGNMENTS.get(alignments[column], TA_LEFT),
            )
            return Paragraph(escape(text), paragraph_style)

        cells = []
        for row_index, row in enumerate(data):
            padded = row + [""] * (columns - len(row))
            is_header = bool(header) and row_index == 0
            cells.append([cell(text, column, is_header) for column, text in enumerate(padded)])

        width_pt = mm_to_pt(width)
        table = Table(cells, colWidths=[width_pt / columns] * columns, repeatRows=1 if header else 0)

        border = colors.HexColor(style.border_color)
        commands = [
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), TABLE_CELL_PADDING_PT),
            ("BOTTOMPADDING", (0, 0), (-1, -1), TABLE_CELL_PADDING_PT),
        ]
        if style.theme == "grid":
            commands.append(("GRID", (0, 0), (-1, -1), 0.5, border))
        elif header:
            commands.append(("LINEBELOW", (0, 0), (-1, 0), 0.5, border))
        if header and style.header_fill:
            commands.append(("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(style.header_fill)))
        table.setStyle(TableStyle(commands))

        _, height_pt = table.wrap(width_pt, mm_to_pt(self.page_height))
        return table, pt_to_mm(height_pt), len(data)

    def measure_table(self, header, rows, alignments, width, style):
        _, height, _ = self._build_table(header, rows, alignments, width, style)
        return height

    def draw_table(self, header, rows, alignments, x, y, width, style,
                   page_bottom=None, next_top=None, next_bottom=None):
        table, height, row_count = self._build_table(header, rows, alignments, width, style)
        if page_bottom is None:
            self._ops().append(TableOp(table, x, y, height, row_count))
            return y + height

        width_pt = mm_to_pt(width)
        top = 0.0 if next_top is None else next_top
        bottom_limit = self.page_height if next_bottom is None else next_bottom
        fresh_page = False

        while y + height > page_bottom:
            parts = table.split(width_pt, mm_to_pt(page_bottom - y))
            if len(parts) < 2:
                if fresh_page:
                    LOGGER.warning("Table row taller than a page on page %d; drawing past the margin",
                                   self._current)
                    break
                # Not even one row fits; start the table on the next page
                self.add_page()
                y, page_bottom, fresh_page = top, bottom_limit, True
                continue

            head, table = parts[0], parts[1]
            _, head_height = head.wrap(width_pt, mm_to_pt(self.page_height))
            self._ops().append(TableOp(head, x, y, pt_to_mm(head_height), head._nrows))
            self.add_page()
            y, page_bottom, fresh_page = top, bottom_limit, True
            _, height_pt = table.wrap(width_pt, mm_to_pt(self.page_height))
            height = pt_to_mm(height_pt)

        self._ops().append(TableOp(table, x, y, height, table._nrows))
        LOGGER.debug("Table ends on page %d at y=%.1fmm", self._current, y + height)
        return y + height

    def set_metadata(self, title=None, subject=None, keywords=None):
        for key, value in (("title", title), ("subject", subject), ("keywords", keywords)):
            if value:
                self.metadata[key] = value

    def output(self) -> bytes:
        buffer = io.BytesIO()
        canvas = pdfcanvas.Canvas(buffer, pagesize=(mm_to_pt(self.page_width), mm_to_pt(self.page_height)))
        canvas.setCreator("letterflow")
        if "title" in self.metadata:
            canvas.setTitle(self.metadata["title"])
        if "subject" in self.metadata:
            canvas.setSubject(self.metadata["subject"])
        if "keywords" in self.metadata:
            canvas.setKeywords(self.metadata["keywords"])

        for ops in self.pages:
            for op in ops:
                op.paint(canvas, self.page_height)
            canvas.showPage()
        canvas.save()
        return buffer.getvalue()

    def ops(self, page: int, kind: Optional[str] = None) -> List:
        """Recorded operations on a page, optionally filtered by kind."""
        return [op for op in self.pages[page - 1] if kind is None or op.kind == kind]

    def _ops(self) -> List:
        return self.pages[self._current - 1]


def _bold_variant(font_name: str) -> str:
    """Best-effort bold counterpart of a registered font name."""
    candidates = {
        "Helvetica": "Helvetica-Bold",
        "Times-Roman": "Times-Bold",
        "Courier": "Courier-Bold",
    }
    if font_name in candidates:
        return candidates[font_name]
    bold = f"{font_name}-Bold"
    return bold if bold in pdfmetrics.getRegisteredFontNames() else font_name

"""Flow Renderer Module

Walks the ordered content blocks of a letter and lays them out top to bottom:
- Separators: a horizontal rule with spacing above and below
- Text blocks: tokenized into paragraphs, headings, lists, tables and
  blank space, each drawn at the running cursor

Before every token the renderer estimates its height and starts a new page
when it would cross the bottom margin. Blocks that disallow page breaks are
drawn in place and the overflow is reported as a warning instead.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..config import (
    HEURISTIC_LINES,
    LIST_MARKER_INDENT_MM,
    LIST_TEXT_OFFSET_MM,
    BULLET_MARKER,
    SEPARATOR_LINE_WIDTH_MM,
)
from ..exceptions import InvalidConfigurationError
from ..logger import get_logger
from .canvas_writer import DocumentWriter, TableStyleBundle
from .font_manager import FontManager
from .page_geometry import PageGeometry
from .style_resolver import EffectiveStyle, pick, resolve_style
from .text_layout import Line, place_line, wrap_runs
from .tokenizer import (
    BlockTokenizer,
    HeadingToken,
    ListItem,
    ListToken,
    ParagraphToken,
    TableToken,
    TextRun,
)
from .units import to_mm

if TYPE_CHECKING:
    from ..content import ContentBlock, SeparatorBlock, TextBlock
    from ..letter_options import LetterOptions

LOGGER = get_logger(__name__)

# Renderer states
AWAITING_CONTENT = "awaiting_content"
EMITTING = "emitting"
DONE = "done"


@dataclass
class RenderCursor:
    """Vertical write position.

    Attributes:
        y: Distance from the top of the page in millimeters
        page: Current page (1-based)
        page_count: Pages created so far
    """

    y: float
    page: int = 1
    page_count: int = 1

    def reset_to(self, top: float):
        self.y = top

    def advance(self, amount: float):
        self.y += amount


def list_marker(ordered: bool, index: int) -> str:
    """
    Marker text for a list item.

    Examples:
        >>> list_marker(True, 0)
        '1.'
        >>> list_marker(False, 4)
        '•'
    """
    return f"{index + 1}." if ordered else BULLET_MARKER


class FlowRenderer:
    """Lays out content blocks across pages with automatic page breaks.

    One renderer instance renders one document: ``render`` runs once and a
    repeated call returns the cursor from the first run.

    Attributes:
        writer: Drawing target
        options: Document-level configuration
        geometry: Page size and margins
        warnings: Non-fatal layout problems collected while rendering
        state: "awaiting_content", "emitting" or "done"
    """

    def __init__(
        self,
        writer: DocumentWriter,
        options: "LetterOptions",
        geometry: PageGeometry,
        tokenizer: Optional[BlockTokenizer] = None
    ):
        self.writer = writer
        self.options = options
        self.geometry = geometry
        self.tokenizer = tokenizer or BlockTokenizer()
        self.measured = options.page_break_estimate == "measured"
        self.warnings: List[str] = []
        self.state = AWAITING_CONTENT
        self.cursor: Optional[RenderCursor] = None
        self._page_top = geometry.y_margin
        self._fonts: Dict[str, FontManager] = {}
        self._table_style = TableStyleBundle()

    def render(self, blocks: Sequence["ContentBlock"], start_y: Optional[float] = None) -> RenderCursor:
        """
        Lay out every block in order.

        Args:
            blocks: Ordered text and separator blocks
            start_y: Initial cursor position (defaults to the top margin)

        Returns:
            The cursor after the last block
        """
        if self.state != AWAITING_CONTENT:
            LOGGER.debug("Render already ran; returning existing cursor")
            return self.cursor

        self.state = EMITTING
        self.cursor = RenderCursor(
            y=self.geometry.y_margin if start_y is None else start_y,
            page=self.writer.current_page,
            page_count=self.writer.page_count,
        )
        self._page_top = self.cursor.y

        for index, block in enumerate(blocks):
            kind = getattr(block, "kind", None)
            if kind == "separator":
                self._render_separator(block)
            elif kind == "text":
                self._render_text(block, index)
            else:
                raise InvalidConfigurationError(f"Unknown content block kind: {kind!r}")

        self.state = DONE
        LOGGER.debug(
            "Rendered %d blocks onto %d pages (cursor at %.1fmm)",
            len(blocks), self.cursor.page_count, self.cursor.y,
        )
        return self.cursor

    # Pagination

    def _new_page(self):
        self.cursor.page = self.writer.add_page()
        self.cursor.page_count = self.writer.page_count
        self.cursor.reset_to(self.geometry.y_margin)
        self._page_top = self.geometry.y_margin

    def _exceeds_fresh_page(self, height: float) -> bool:
        """True when nothing is drawn on this page yet and a new page would not hold ``height`` either."""
        if self.cursor.y > self._page_top:
            return False
        return self.geometry.should_break(self.geometry.y_margin, height, self.cursor.page + 1)

    def _ensure_space(self, height: float, allow_pagebreak: bool, block_index: int):
        """Start a new page if ``height`` does not fit below the cursor.

        Content taller than a whole page stays on a page that is still
        empty, since a new page would overflow the same way.
        """
        if not self.geometry.should_break(self.cursor.y, height, self.cursor.page):
            return
        if allow_pagebreak and self._exceeds_fresh_page(height):
            LOGGER.debug("%.1fmm of content exceeds a page; keeping it on page %d", height, self.cursor.page)
            return
        if allow_pagebreak:
            LOGGER.debug("Page break before %.1fmm of content at y=%.1fmm", height, self.cursor.y)
            self._new_page()
            return
        message = (
            f"Block {block_index + 1} does not fit on page {self.cursor.page} "
            f"and disallows page breaks; drawing past the bottom margin"
        )
        LOGGER.warning(message)
        self.warnings.append(message)

    def _estimate(self, style: EffectiveStyle, line_count: int) -> float:
        if self.measured:
            return max(line_count, 1) * style.line_spacing
        return style.line_spacing * HEURISTIC_LINES

    # Blocks

    def _render_separator(self, block: "SeparatorBlock"):
        style = resolve_style(self.options)
        before = _optional_length(block.spacing_before)
        if before is None:
            before = style.paragraph_spacing
        after = _optional_length(block.spacing_after)
        if after is None:
            after = before * 2

        y = self.cursor.y + before
        self.writer.draw_line(
            self.geometry.x_margin, y,
            self.geometry.page_width - self.geometry.x_margin, y,
            SEPARATOR_LINE_WIDTH_MM,
        )
        self.cursor.advance(before + after)

    def _render_text(self, block: "TextBlock", block_index: int):
        if block.is_empty:
            return
        tokens = self.tokenizer.tokenize(block.content)
        if not tokens:
            return

        style = resolve_style(self.options, block.style)
        for token in tokens:
            if isinstance(token, ParagraphToken):
                self._render_paragraph(token.runs, style, block.allow_pagebreak, block_index)
            elif isinstance(token, HeadingToken):
                self._render_heading(token, style, block.allow_pagebreak, block_index)
            elif isinstance(token, ListToken):
                self._render_list(token, style, block.allow_pagebreak, block_index)
            elif isinstance(token, TableToken):
                self._render_table(token, style, block.allow_pagebreak, block_index)
            else:
                self._ensure_space(self._estimate(style, 1), block.allow_pagebreak, block_index)
                self.cursor.advance(style.line_spacing)

    # Tokens

    def _render_paragraph(self, runs: List[TextRun], style: EffectiveStyle, allow_pagebreak: bool, block_index: int):
        lines = self._wrap(runs, style, style.size_normal, self.geometry.available_width)
        self._ensure_space(self._estimate(style, len(lines)), allow_pagebreak, block_index)
        self._draw_lines(lines, style, style.size_normal, self.geometry.x_margin,
                         self.geometry.available_width, style.text_align)
        self.cursor.advance(len(lines) * style.line_spacing + style.paragraph_spacing)

    def _render_heading(self, token: HeadingToken, style: EffectiveStyle, allow_pagebreak: bool, block_index: int):
        size = style.heading_size(token.level)
        runs = [TextRun(run.text, True, run.italic) for run in token.runs]
        alignment = "left" if style.text_align == "full" else style.text_align

        lines = self._wrap(runs, style, size, self.geometry.available_width)
        self._ensure_space(self._estimate(style, len(lines)), allow_pagebreak, block_index)
        self._draw_lines(lines, style, size, self.geometry.x_margin, self.geometry.available_width, alignment)
        self.cursor.advance(len(lines) * style.line_spacing + style.paragraph_spacing)

    def _render_list(self, token: ListToken, style: EffectiveStyle, allow_pagebreak: bool, block_index: int):
        alignment = "full" if style.text_align == "full" else "left"
        regular = self._font_manager(style).get_font_name()

        for item in token.items:
            marker_x = self.geometry.x_margin + LIST_MARKER_INDENT_MM * (item.depth + 1)
            text_x = marker_x + LIST_TEXT_OFFSET_MM
            width = self.geometry.page_width - self.geometry.x_margin - text_x

            lines = self._wrap(item.runs, style, style.size_normal, width)
            self._ensure_space(self._estimate(style, len(lines)), allow_pagebreak, block_index)

            self.writer.set_font(regular)
            self.writer.set_font_size(style.size_normal)
            self.writer.draw_text(self._marker(item), marker_x, self.cursor.y)
            self._draw_lines(lines, style, style.size_normal, text_x, width, alignment)
            self.cursor.advance(max(len(lines), 1) * style.line_spacing)

        self.cursor.advance(style.paragraph_spacing)

    def _render_table(self, token: TableToken, style: EffectiveStyle, allow_pagebreak: bool, block_index: int):
        fonts = self._font_manager(style)
        self.writer.set_font(fonts.get_font_name())
        self.writer.set_font_size(style.size_normal)

        args = (token.header, token.rows, token.alignments)
        if self.measured:
            height = self.writer.measure_table(*args, self.geometry.available_width, self._table_style)
        else:
            height = style.line_spacing * HEURISTIC_LINES
        self._ensure_space(height, allow_pagebreak, block_index)

        limits = {}
        if allow_pagebreak:
            limits = dict(
                page_bottom=self.geometry.content_bottom(self.cursor.page),
                next_top=self.geometry.y_margin,
                next_bottom=self.geometry.content_bottom(self.cursor.page + 1),
            )
        bottom = self.writer.draw_table(
            *args, self.geometry.x_margin, self.cursor.y,
            self.geometry.available_width, self._table_style, **limits,
        )
        if self.writer.current_page != self.cursor.page:
            self.cursor.page = self.writer.current_page
            self.cursor.page_count = self.writer.page_count
            self._page_top = self.geometry.y_margin
        self.cursor.reset_to(bottom)
        self.cursor.advance(style.paragraph_spacing)

    # Drawing helpers

    @staticmethod
    def _marker(item: ListItem) -> str:
        return list_marker(item.ordered, item.index)

    def _font_manager(self, style: EffectiveStyle) -> FontManager:
        if style.font_face not in self._fonts:
            self._fonts[style.font_face] = FontManager(style.font_face, self.options.font_dirs)
        return self._fonts[style.font_face]

    def _wrap(self, runs: List[TextRun], style: EffectiveStyle, size: float, width: float) -> List[Line]:
        fonts = self._font_manager(style)

        def measure(text: str, bold: bool, italic: bool) -> float:
            return self.writer.measure_text(text, fonts.get_font_name(bold, italic), size)

        return wrap_runs(runs, width, measure)

    def _draw_lines(
        self,
        lines: List[Line],
        style: EffectiveStyle,
        size: float,
        x_left: float,
        width: float,
        alignment: str
    ):
        """Draw wrapped lines; line i sits at cursor + i x line spacing."""
        fonts = self._font_manager(style)
        space_width = self.writer.measure_text(" ", fonts.get_font_name(), size)
        self.writer.set_font_size(size)

        for i, line in enumerate(lines):
            baseline = self.cursor.y + i * style.line_spacing
            for x, fragment in place_line(line, x_left, width, alignment, space_width):
                self.writer.set_font(fonts.get_font_name(fragment.bold, fragment.italic))
                self.writer.draw_text(fragment.text, x, baseline)


def _optional_length(value: Optional[str]) -> Optional[float]:
    """Parse a length, treating None and blank strings as absent."""
    if not pick(value, ""):
        return None
    return to_mm(value)

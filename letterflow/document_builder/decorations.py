"""Decoration Pass Module

Stamps header/footer elements on every page once the content pass is done:
- Page numbers ("-#-" style formats)
- Next-page indicators (".../#"), on every page except the last
- The letter tracking number
"""
from typing import TYPE_CHECKING, List, Tuple, Union

from ..config import PAGE_NUMBER_PLACEHOLDER, SKIP_FIRST
from ..logger import get_logger
from .canvas_writer import DocumentWriter
from .font_manager import FontManager
from .page_geometry import PageGeometry
from .units import to_pt

if TYPE_CHECKING:
    from ..letter_options import LetterOptions

LOGGER = get_logger(__name__)


def is_enabled_on_page(setting: Union[bool, str], page: int) -> bool:
    """
    Apply a True/False/"skip-first" display policy to a page.

    Examples:
        >>> is_enabled_on_page("skip-first", 1)
        False
        >>> is_enabled_on_page("skip-first", 2)
        True
    """
    if setting == SKIP_FIRST:
        return page > 1
    return setting is True


def format_page_number(page_format: str, number: int) -> str:
    """Substitute a page number into its format."""
    return page_format.replace(PAGE_NUMBER_PLACEHOLDER, str(number))


class DecorationPass:
    """Writes page numbers, next-page indicators and the tracking number.

    Runs over pages 1..N of a finished content pass. ``apply`` is a one-shot
    operation; calling it again does nothing.
    """

    def __init__(self, writer: DocumentWriter, options: "LetterOptions", geometry: PageGeometry):
        self.writer = writer
        self.options = options
        self.geometry = geometry
        self.applied = False

    def row_y(self, location: str) -> float:
        """Baseline of the header or footer row."""
        if location == "footer":
            return self.geometry.page_height - self.geometry.y_margin / 2
        return self.geometry.y_margin / 2

    def items_for_page(self, page: int, page_count: int) -> List[Tuple[str, str, str]]:
        """
        Decorations due on one page.

        Returns:
            List of (text, location, alignment) tuples
        """
        opts = self.options
        items = []
        if is_enabled_on_page(opts.show_page_numbers, page):
            items.append((
                format_page_number(opts.page_number_format, page),
                opts.page_number_location,
                opts.page_number_alignment,
            ))
        if page < page_count and is_enabled_on_page(opts.show_next_page, page):
            items.append((
                format_page_number(opts.next_page_number_format, page + 1),
                opts.next_page_number_location,
                opts.next_page_number_alignment,
            ))
        if opts.show_letter_number and opts.letter_number and opts.letter_number.strip():
            items.append((
                opts.letter_number.strip(),
                opts.letter_number_location,
                opts.letter_number_alignment,
            ))
        return items

    def apply(self) -> int:
        """
        Decorate every page.

        Returns:
            Number of decoration strings drawn (0 on a repeated call)
        """
        if self.applied:
            LOGGER.debug("Decorations already applied")
            return 0
        self.applied = True

        page_count = self.writer.page_count
        font_name = FontManager(self.options.font_face, self.options.font_dirs).get_font_name()
        font_size = to_pt(self.options.text_size_normal)
        drawn = 0

        for page in range(1, page_count + 1):
            self.writer.set_page(page)
            self.writer.set_font(font_name)
            self.writer.set_font_size(font_size)
            for text, location, alignment in self.items_for_page(page, page_count):
                width = self.writer.measure_text(text, font_name, font_size)
                x = self.geometry.aligned_x(alignment, width)
                self.writer.draw_text(text, x, self.row_y(location))
                drawn += 1

        self.writer.set_page(page_count)
        LOGGER.debug("Drew %d decorations over %d pages", drawn, page_count)
        return drawn

"""Render Result Dataclass

Output of one letter render.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from .config import EXPORT_ERROR_MESSAGE
from .exceptions import ExportError
from .logger import get_logger

if TYPE_CHECKING:
    from .document_builder.canvas_writer import DocumentWriter

LOGGER = get_logger(__name__)


def download_pdf(writer: "DocumentWriter", file_name: str) -> str:
    """
    Save a finished document under its export name.

    Args:
        writer: Writer holding the rendered pages
        file_name: Export name; ".pdf" is appended when missing

    Returns:
        Path of the written file

    Raises:
        ExportError: If serialization or writing fails
    """
    try:
        path = writer.save(file_name)
    except Exception as e:
        LOGGER.error("Error generating PDF: %s", e)
        raise ExportError(EXPORT_ERROR_MESSAGE) from e
    LOGGER.info("Saved %s", path)
    return path


@dataclass
class RenderResult:
    """Result of rendering a letter.

    Attributes:
        writer: Writer holding the rendered pages
        page_count: Number of pages produced
        cursor_y: Final content cursor position on the last page (mm)
        file_name: Export file name from the letter options
        warnings: Non-fatal problems (missing images, overflowing blocks)
    """

    writer: "DocumentWriter"
    page_count: int
    cursor_y: float
    file_name: str
    warnings: List[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_bytes(self) -> bytes:
        """Serialized PDF document."""
        return self.writer.output()

    def download(self) -> str:
        """Save the PDF as ``<file_name>.pdf`` and return its path."""
        return download_pdf(self.writer, self.file_name)

"""Letter Builder Module

Orchestrates rendering of one letter by coordinating specialized components:
- ImageLoader: Department signature and Canada wordmark acquisition
- ReportLabWriter: Page creation, drawing and PDF serialization
- FlowRenderer: Content pass with automatic pagination
- DecorationPass: Page numbers, next-page indicators, tracking number

Configuration errors surface when LetterOptions is constructed, before any
page exists. Image failures are logged and collected as warnings; the
letter is still produced without the missing image.
"""
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from ..config import (
    DEPT_SIGNATURE_HEIGHT_MM,
    DEPT_SIGNATURE_GAP_MM,
    WORDMARK_HEIGHT_MM,
    WORDMARK_BOTTOM_OFFSET_MM,
)
from ..exceptions import ImageLoadError, InvalidConfigurationError
from ..logger import get_logger
from ..render_result import RenderResult
from .canvas_writer import DocumentWriter, ReportLabWriter
from .decorations import DecorationPass
from .flow_renderer import FlowRenderer
from .image_loader import ImageLoader, LoadedImage
from .page_geometry import PageGeometry

if TYPE_CHECKING:
    from ..content import ContentBlock
    from ..letter_options import LetterOptions

LOGGER = get_logger(__name__)

_BLOCK_KINDS = ("text", "separator")


class LetterBuilder:
    """Build a paginated PDF letter from options and content blocks.

    ``build`` runs once per builder; later calls return the cached result.
    """

    def __init__(
        self,
        options: "LetterOptions",
        blocks: Sequence["ContentBlock"],
        image_loader: Optional[ImageLoader] = None,
        writer_factory: Callable[[float, float], DocumentWriter] = ReportLabWriter
    ):
        """
        Initialize letter builder.

        Args:
            options: Validated document configuration
            blocks: Ordered text and separator blocks
            image_loader: Optional loader (a default one is created otherwise)
            writer_factory: Callable creating a writer from (width, height) in mm
        """
        self.options = options
        self.blocks = list(blocks)
        self.image_loader = image_loader or ImageLoader()
        self.writer_factory = writer_factory
        self._result: Optional[RenderResult] = None

    def build(self, on_ready: Optional[Callable[[Callable[[], str]], None]] = None) -> RenderResult:
        """
        Render the letter.

        Args:
            on_ready: Optional callback receiving the zero-argument download
                      function once the document is complete

        Returns:
            RenderResult with the writer, page count and collected warnings

        Raises:
            InvalidConfigurationError: If a block has an unknown kind
        """
        if self._result is not None:
            LOGGER.debug("Letter already built; returning cached result")
            return self._result

        self._validate_blocks()
        warnings: List[str] = []
        images = self._acquire_images(warnings)

        geometry = PageGeometry.for_page_type(
            self.options.page_type, self.options.x_margin_mm, self.options.y_margin_mm
        )
        if "wordmark" in images:
            geometry = replace(geometry, wordmark_height=WORDMARK_HEIGHT_MM)

        writer = self.writer_factory(geometry.page_width, geometry.page_height)
        writer.set_metadata(
            title=self.options.file_name,
            subject=self.options.letter_number,
            keywords=self.options.letter_version,
        )

        start_y = self._draw_first_page_imagery(writer, geometry, images)

        renderer = FlowRenderer(writer, self.options, geometry)
        cursor = renderer.render(self.blocks, start_y)
        warnings.extend(renderer.warnings)

        DecorationPass(writer, self.options, geometry).apply()

        self._result = RenderResult(
            writer=writer,
            page_count=writer.page_count,
            cursor_y=cursor.y,
            file_name=self.options.file_name,
            warnings=warnings,
        )
        LOGGER.info(
            "Rendered letter %r: %d page(s), %d warning(s)",
            self.options.file_name, writer.page_count, len(warnings),
        )

        if on_ready is not None:
            on_ready(self._result.download)
        return self._result

    def _validate_blocks(self):
        for index, block in enumerate(self.blocks):
            kind = getattr(block, "kind", None)
            if kind not in _BLOCK_KINDS:
                raise InvalidConfigurationError(
                    f"Block {index + 1} has unknown kind {kind!r}; expected one of {', '.join(_BLOCK_KINDS)}"
                )

    def _acquire_images(self, warnings: List[str]) -> Dict[str, LoadedImage]:
        """Load the first-page images concurrently; failures become warnings."""
        sources = {"signature": self.options.dept_signature}
        if self.options.show_canada_wordmark:
            sources["wordmark"] = self.options.canada_wordmark_path
        labels = {"signature": "department signature", "wordmark": "Canada wordmark"}

        pending = {name: self.image_loader.load_async(source) for name, source in sources.items()}
        images: Dict[str, LoadedImage] = {}
        try:
            for name, future in pending.items():
                try:
                    images[name] = self.image_loader.resolve(future, sources[name])
                except ImageLoadError as e:
                    message = f"Failed to load {labels[name]} image: {e.reason}"
                    LOGGER.warning(message)
                    warnings.append(message)
        finally:
            self.image_loader.close()
        return images

    def _draw_first_page_imagery(
        self,
        writer: DocumentWriter,
        geometry: PageGeometry,
        images: Dict[str, LoadedImage]
    ) -> float:
        """
        Place the signature and wordmark on page 1.

        Returns:
            Cursor y where content starts
        """
        start_y = geometry.y_margin

        signature = images.get("signature")
        if signature is not None:
            width, height = signature.size_for_height(DEPT_SIGNATURE_HEIGHT_MM)
            writer.add_image(signature, geometry.x_margin, geometry.y_margin, width, height)
            start_y = geometry.y_margin + height + DEPT_SIGNATURE_GAP_MM

        wordmark = images.get("wordmark")
        if wordmark is not None:
            width, height = wordmark.size_for_height(WORDMARK_HEIGHT_MM)
            y = geometry.page_height - WORDMARK_BOTTOM_OFFSET_MM - height
            writer.add_image(wordmark, geometry.x_margin, y, width, height)

        return start_y


def render_letter(
    options: "LetterOptions",
    blocks: Sequence["ContentBlock"],
    image_loader: Optional[ImageLoader] = None,
    on_ready: Optional[Callable[[Callable[[], str]], None]] = None
) -> RenderResult:
    """
    Render a letter in one call.

    Args:
        options: Validated document configuration
        blocks: Ordered text and separator blocks
        image_loader: Optional image loader
        on_ready: Optional callback receiving the download function

    Returns:
        RenderResult for the finished letter

    Examples:
        >>> options = LetterOptions(file_name="letter", dept_signature="sig.png")
        >>> result = render_letter(options, [TextBlock("Dear Sir or Madam,")])
        >>> result.download()
        'letter.pdf'
    """
    return LetterBuilder(options, blocks, image_loader=image_loader).build(on_ready=on_ready)

"""Document Builder Package

This package provides components for rendering letters into paginated PDFs:

Core Classes:
- LetterBuilder: Main orchestrator class (from builder.py)
- FlowRenderer: Content pass with automatic page breaks
- DecorationPass: Page numbers, next-page indicators and tracking number
- ReportLabWriter: ReportLab-backed DocumentWriter
- BlockTokenizer: Markdown tokenization of text blocks
- FontManager: Font family resolution and TrueType registration
- ImageLoader: Image acquisition from data URIs, URLs and paths

Utilities:
- units: Length conversion functions
- page_geometry: Page sizes, content box and page-break predicate

Helper Functions:
- render_letter: Render a letter in one call
- resolve_style: Merge block overrides with document defaults
"""

# Import core classes
from .builder import LetterBuilder, render_letter
from .canvas_writer import DocumentWriter, ReportLabWriter, TableStyleBundle
from .decorations import DecorationPass
from .flow_renderer import FlowRenderer, RenderCursor, list_marker
from .font_manager import FontManager
from .image_loader import ImageLoader, LoadedImage
from .page_geometry import (
    PageGeometry,
    get_page_dimensions,
    should_break_page,
    get_aligned_x,
    effective_bottom_margin,
)
from .style_resolver import EffectiveStyle, resolve_style
from .tokenizer import BlockTokenizer
from . import units

# Expose public API
__all__ = [
    # Main builder class
    'LetterBuilder',

    # Helper functions
    'render_letter',
    'resolve_style',
    'list_marker',
    'get_page_dimensions',
    'should_break_page',
    'get_aligned_x',
    'effective_bottom_margin',

    # Component classes
    'FlowRenderer',
    'RenderCursor',
    'DecorationPass',
    'DocumentWriter',
    'ReportLabWriter',
    'TableStyleBundle',
    'BlockTokenizer',
    'FontManager',
    'ImageLoader',
    'LoadedImage',
    'PageGeometry',
    'EffectiveStyle',

    # Utilities module
    'units',
]

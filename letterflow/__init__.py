"""letterflow

Render structured letter content into paginated PDF documents.
"""

# document_builder first: letter_options depends on its unit converter
from .document_builder import LetterBuilder, render_letter
from .letter_options import LetterOptions, BlockStyle
from .content import TextBlock, SeparatorBlock, ContentBlock
from .render_result import RenderResult
from .exceptions import (
    LetterflowError,
    ValidationError,
    InvalidConfigurationError,
    MissingRequiredFieldError,
    InvalidFormatError,
    InvalidUnitError,
    RenderingError,
    FontError,
    ImageLoadError,
    ExportError,
)

__version__ = "0.1.0"

__all__ = [
    'LetterBuilder',
    'render_letter',
    'LetterOptions',
    'BlockStyle',
    'TextBlock',
    'SeparatorBlock',
    'ContentBlock',
    'RenderResult',
    'LetterflowError',
    'ValidationError',
    'InvalidConfigurationError',
    'MissingRequiredFieldError',
    'InvalidFormatError',
    'InvalidUnitError',
    'RenderingError',
    'FontError',
    'ImageLoadError',
    'ExportError',
]

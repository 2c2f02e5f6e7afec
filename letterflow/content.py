"""Content Blocks

The ordered input of a letter: text blocks carrying markdown content and
separator lines. Each block type carries a fixed ``kind`` discriminator that
the renderer dispatches on.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .letter_options import BlockStyle


@dataclass(frozen=True)
class TextBlock:
    """A section of markdown content.

    Attributes:
        content: Markdown-like text; None or blank makes the block a no-op
        allow_pagebreak: If False, overflowing content is drawn past the
                         bottom margin instead of moving to a new page
        style: Optional typography overrides for this block only
    """

    kind: ClassVar[str] = "text"

    content: Optional[str] = None
    allow_pagebreak: bool = True
    style: Optional[BlockStyle] = field(default=None)

    @property
    def is_empty(self) -> bool:
        return not self.content or not self.content.strip()


@dataclass(frozen=True)
class SeparatorBlock:
    """A horizontal rule across the content width.

    Attributes:
        spacing_before: Gap above the rule (defaults to paragraph spacing)
        spacing_after: Gap below the rule (defaults to twice spacing_before)
    """

    kind: ClassVar[str] = "separator"

    spacing_before: Optional[str] = None
    spacing_after: Optional[str] = None


ContentBlock = Union[TextBlock, SeparatorBlock]

"""Style Resolver Module

Merges per-block typography overrides with document-level defaults.
Each attribute resolves independently: a block value wins when present and
non-empty, otherwise the document default applies.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .units import get_line_height, to_mm, to_pt

if TYPE_CHECKING:
    from ..letter_options import BlockStyle, LetterOptions


@dataclass(frozen=True)
class EffectiveStyle:
    """Resolved typography for one block.

    Attributes:
        font_face: Font family
        size_normal: Body size in points
        size_heading1/2/3: Heading sizes in points
        text_align: "left", "right", "center" or "full"
        line_spacing: Distance between lines in millimeters
        paragraph_spacing: Space after a paragraph in millimeters
    """

    font_face: str
    size_normal: float
    size_heading1: float
    size_heading2: float
    size_heading3: float
    text_align: str
    line_spacing: float
    paragraph_spacing: float

    def heading_size(self, level: int) -> float:
        """Font size for a heading level; levels other than 1-3 use H2."""
        if level == 1:
            return self.size_heading1
        if level == 3:
            return self.size_heading3
        return self.size_heading2


def pick(override: Optional[str], default: str) -> str:
    """Return the override when it is present and non-blank, else the default."""
    if override is not None and str(override).strip():
        return override
    return default


def resolve_style(defaults: "LetterOptions", override: Optional["BlockStyle"] = None) -> EffectiveStyle:
    """
    Produce the effective style for a block.

    Args:
        defaults: Document-level options
        override: Optional block-level overrides

    Returns:
        EffectiveStyle with sizes in points and spacings in millimeters
    """
    def resolved(name: str) -> str:
        return pick(getattr(override, name, None), getattr(defaults, name))

    return EffectiveStyle(
        font_face=resolved("font_face"),
        size_normal=to_pt(resolved("text_size_normal")),
        size_heading1=to_pt(resolved("text_size_heading1")),
        size_heading2=to_pt(resolved("text_size_heading2")),
        size_heading3=to_pt(resolved("text_size_heading3")),
        text_align=resolved("text_align"),
        line_spacing=get_line_height(resolved("text_size_normal"), resolved("line_spacing")),
        paragraph_spacing=to_mm(resolved("paragraph_spacing")),
    )

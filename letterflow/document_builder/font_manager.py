"""Font Manager Module

Resolves a configured font face to ReportLab font names for the regular,
bold, italic and bold-italic variants, registering TrueType files when the
face is not one of the built-in PDF fonts.
"""
import os
from typing import Dict, Iterable, Optional, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..exceptions import FontError
from ..logger import get_logger

LOGGER = get_logger(__name__)

# (regular, bold, italic, bold-italic)
_BUILTIN_FAMILIES: Dict[str, Tuple[str, str, str, str]] = {
    "helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}
_FAMILY_ALIASES = {
    "arial": "helvetica",
    "sans-serif": "helvetica",
    "times-roman": "times",
    "times new roman": "times",
    "serif": "times",
    "monospace": "courier",
}
FALLBACK_FAMILY = "helvetica"

_SYSTEM_FONT_DIRS = (
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/dejavu",
    "/usr/share/fonts/truetype/liberation",
    "/System/Library/Fonts/Supplemental",  # macOS
    "C:\\Windows\\Fonts",  # Windows
)
_VARIANT_SUFFIXES = (
    ("",),
    ("-Bold", "Bold", "-bold"),
    ("-Oblique", "-Italic", "Italic", "-italic"),
    ("-BoldOblique", "-BoldItalic", "BoldItalic", "-bolditalic"),
)


class FontManager:
    """Maps one font face to registered ReportLab font names.

    Built-in PDF families (Helvetica, Times, Courier and common aliases) need
    no files. Any other face is looked up as TrueType files named after the
    face ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf", ...) in the configured
    font directories, then in the usual system locations. Missing styled
    variants fall back to the regular face; a missing regular face falls
    back to Helvetica with a warning.

    Attributes:
        font_face: Face requested by the caller
        variants: (regular, bold, italic, bold-italic) ReportLab font names
    """

    def __init__(self, font_face: str, font_dirs: Iterable[str] = ()):
        """
        Initialize FontManager and resolve all variants of a face.

        Args:
            font_face: Font family name from letter options
            font_dirs: Extra directories searched before system locations
        """
        self.font_face = font_face
        self.font_dirs = tuple(font_dirs) + _SYSTEM_FONT_DIRS
        self.variants = self._setup_fonts()

    def _setup_fonts(self) -> Tuple[str, str, str, str]:
        key = self.font_face.strip().lower()
        key = _FAMILY_ALIASES.get(key, key)
        if key in _BUILTIN_FAMILIES:
            return _BUILTIN_FAMILIES[key]

        try:
            regular = self._register_variant(0)
            if regular is None:
                raise FontError(f"No TrueType file found for font face {self.font_face!r}")
        except FontError as e:
            LOGGER.warning("%s; using Helvetica", e)
            return _BUILTIN_FAMILIES[FALLBACK_FAMILY]

        styled = []
        for variant in (1, 2, 3):
            try:
                styled.append(self._register_variant(variant))
            except FontError as e:
                LOGGER.warning("%s; using regular face", e)
                styled.append(None)
        bold = styled[0] or regular
        italic = styled[1] or regular
        bold_italic = styled[2] or bold
        return regular, bold, italic, bold_italic

    def _register_variant(self, variant: int) -> Optional[str]:
        """Register the first matching TrueType file for a variant."""
        for suffix in _VARIANT_SUFFIXES[variant]:
            font_name = f"{self.font_face}{suffix}"
            if font_name in pdfmetrics.getRegisteredFontNames():
                return font_name
            for font_dir in self.font_dirs:
                font_path = os.path.join(font_dir, f"{font_name}.ttf")
                if not os.path.exists(font_path):
                    continue
                try:
                    pdfmetrics.registerFont(TTFont(font_name, font_path))
                except Exception as e:
                    raise FontError(f"Failed to register font {font_path}: {e}") from e
                LOGGER.debug("Registered font %s from %s", font_name, font_path)
                return font_name
        return None

    def get_font_name(self, bold: bool = False, italic: bool = False) -> str:
        """
        Get the registered font name for a style.

        Args:
            bold: If True, return the bold variant
            italic: If True, return the italic variant

        Returns:
            Font name string suitable for use with ReportLab
        """
        regular, bold_name, italic_name, bold_italic = self.variants
        if bold and italic:
            return bold_italic
        if bold:
            return bold_name
        if italic:
            return italic_name
        return regular

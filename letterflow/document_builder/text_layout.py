"""Text Layout Module

Handles line layout for styled text runs:
- Splitting runs into words (a word may mix bold/italic fragments)
- Greedy line wrapping against an available width
- Horizontal placement for left/right/center alignment
- Full justification (slack spread evenly across inter-word gaps)

Widths come from a measure callback so that this module stays independent
of the PDF writer and can be tested with fixed-width fonts.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, List, Tuple, Union

from .page_geometry import get_aligned_x
from .tokenizer import TextRun

# measure(text, bold, italic) -> width in millimeters
Measure = Callable[[str, bool, bool], float]

_WHITESPACE_RE = re.compile(r"(\s+)")


@dataclass(frozen=True)
class Fragment:
    """Part of a word drawn in a single font."""

    text: str
    bold: bool
    italic: bool
    width: float


@dataclass
class Word:
    fragments: List[Fragment] = field(default_factory=list)

    @property
    def width(self) -> float:
        return sum(fragment.width for fragment in self.fragments)


class _Break:
    """Marker for a forced line break between words."""


BREAK = _Break()


@dataclass
class Line:
    """One wrapped line.

    Attributes:
        words: Words on the line
        ends_paragraph: True for the last line and for lines ended by a
                        forced break; these are never justified
    """

    words: List[Word]
    ends_paragraph: bool = False

    def natural_width(self, space_width: float) -> float:
        if not self.words:
            return 0.0
        return sum(word.width for word in self.words) + space_width * (len(self.words) - 1)


def split_words(runs: List[TextRun], measure: Measure) -> List[Union[Word, _Break]]:
    """
    Split styled runs into measured words and forced breaks.

    Words are delimited by whitespace only, so "**bold**," yields one word
    with a bold fragment followed by a regular comma.
    """
    items: List[Union[Word, _Break]] = []
    current = Word()

    def flush():
        nonlocal current
        if current.fragments:
            items.append(current)
            current = Word()

    for run in runs:
        if run.is_break:
            flush()
            items.append(BREAK)
            continue
        for part in _WHITESPACE_RE.split(run.text):
            if not part:
                continue
            if part.isspace():
                flush()
            else:
                width = measure(part, run.bold, run.italic)
                current.fragments.append(Fragment(part, run.bold, run.italic, width))
    flush()
    return items


def wrap_words(items: List[Union[Word, _Break]], max_width: float, space_width: float) -> List[Line]:
    """
    Greedily wrap words into lines no wider than max_width.

    A single word wider than max_width is placed alone on its line.

    Args:
        items: Output of split_words
        max_width: Available width in millimeters
        space_width: Width of one inter-word space

    Returns:
        List of lines; the final line is always marked ends_paragraph
    """
    lines: List[Line] = []
    words: List[Word] = []
    width = 0.0

    for item in items:
        if item is BREAK:
            lines.append(Line(words, ends_paragraph=True))
            words, width = [], 0.0
            continue
        if words and width + space_width + item.width > max_width:
            lines.append(Line(words))
            words, width = [item], item.width
        else:
            width += (space_width if words else 0.0) + item.width
            words.append(item)

    lines.append(Line(words, ends_paragraph=True))
    return lines


def wrap_runs(runs: List[TextRun], max_width: float, measure: Measure) -> List[Line]:
    """Split and wrap runs in one step."""
    space_width = measure(" ", False, False)
    return wrap_words(split_words(runs, measure), max_width, space_width)


def place_line(
    line: Line,
    x_left: float,
    available_width: float,
    alignment: str,
    space_width: float
) -> List[Tuple[float, Fragment]]:
    """
    Compute the x position of every fragment on a line.

    Args:
        line: Wrapped line
        x_left: Left edge of the text box
        available_width: Width of the text box
        alignment: "left", "right", "center" or "full"
        space_width: Natural inter-word space

    Returns:
        List of (x, fragment) pairs in drawing order
    """
    if not line.words:
        return []

    natural = line.natural_width(space_width)
    gap = space_width
    if alignment == "full":
        x = x_left
        if not line.ends_paragraph and len(line.words) > 1:
            gap = space_width + (available_width - natural) / (len(line.words) - 1)
    else:
        x = get_aligned_x(alignment, x_left + available_width, x_left, 0.0, natural)

    placed: List[Tuple[float, Fragment]] = []
    for word in line.words:
        for fragment in word.fragments:
            placed.append((x, fragment))
            x += fragment.width
        x += gap
    return placed

"""Block Tokenizer Module

Turns the markdown content of a text block into an ordered sequence of
layout tokens using markdown-it:

- Paragraphs and headings with inline emphasis kept as styled runs
- Ordered and unordered lists (nested lists flattened with a depth)
- GFM tables with per-column alignment
- Blank space for runs of extra blank lines between blocks

Tokens are produced fresh for each block and consumed once by the renderer.
"""
import textwrap
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token as MdToken

LINE_BREAK = "\n"


@dataclass(frozen=True)
class TextRun:
    """A span of text sharing one emphasis style. "\\n" is a forced line break."""

    text: str
    bold: bool = False
    italic: bool = False

    @property
    def is_break(self) -> bool:
        return self.text == LINE_BREAK


@dataclass(frozen=True)
class ParagraphToken:
    runs: List[TextRun]
    kind: str = field(default="paragraph", init=False)


@dataclass(frozen=True)
class HeadingToken:
    level: int
    runs: List[TextRun]
    kind: str = field(default="heading", init=False)


@dataclass
class ListItem:
    """One list entry.

    Attributes:
        runs: Item text
        depth: Nesting depth (0 for top-level items)
        ordered: True if the enclosing list is numbered
        index: 0-based position within the enclosing list
    """

    runs: List[TextRun] = field(default_factory=list)
    depth: int = 0
    ordered: bool = False
    index: int = 0


@dataclass(frozen=True)
class ListToken:
    items: List[ListItem]
    ordered: bool
    kind: str = field(default="list", init=False)


@dataclass(frozen=True)
class TableToken:
    header: List[str]
    rows: List[List[str]]
    alignments: List[str]
    kind: str = field(default="table", init=False)


@dataclass(frozen=True)
class BlankSpaceToken:
    kind: str = field(default="space", init=False)


BlockToken = Union[ParagraphToken, HeadingToken, ListToken, TableToken, BlankSpaceToken]


def _build_markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": False, "breaks": True})
    md.enable("table")
    return md


def inline_runs(token: Optional[MdToken]) -> List[TextRun]:
    """
    Convert a markdown-it inline token into styled runs.

    Soft and hard breaks both become forced line breaks so that address
    blocks written one line per entry keep their shape. Adjacent runs with
    the same style are merged, and leading/trailing breaks are dropped.

    Args:
        token: An "inline" token (or None)

    Returns:
        List of TextRun; empty if the token carries no text
    """
    if token is None:
        return []
    if token.type != "inline" or not token.children:
        return [TextRun(token.content)] if token.content else []

    runs: List[TextRun] = []
    bold = False
    italic = False

    def append(text: str, bold: bool, italic: bool):
        if not text:
            return
        if runs and not runs[-1].is_break and text != LINE_BREAK \
                and runs[-1].bold == bold and runs[-1].italic == italic:
            runs[-1] = TextRun(runs[-1].text + text, bold, italic)
        else:
            runs.append(TextRun(text, bold, italic))

    for child in token.children:
        if child.type in ("text", "code_inline", "html_inline"):
            append(child.content, bold, italic)
        elif child.type == "strong_open":
            bold = True
        elif child.type == "strong_close":
            bold = False
        elif child.type == "em_open":
            italic = True
        elif child.type == "em_close":
            italic = False
        elif child.type in ("softbreak", "hardbreak"):
            append(LINE_BREAK, bold, italic)
        # link_open/link_close carry no text; the label arrives as text children

    while runs and runs[0].is_break:
        runs.pop(0)
    while runs and runs[-1].is_break:
        runs.pop()
    return runs


def plain_text(runs: List[TextRun]) -> str:
    """Join runs back into plain text."""
    return "".join(run.text for run in runs)


def _cell_alignment(token: MdToken) -> str:
    style = token.attrGet("style") or ""
    if "text-align:" in style:
        return style.split("text-align:", 1)[1].strip().rstrip(";") or "left"
    return "left"


class BlockTokenizer:
    """Tokenize text block content into layout tokens.

    The underlying markdown parser is created once per tokenizer and reused
    for every block.
    """

    def __init__(self):
        """Initialize tokenizer with a CommonMark parser plus GFM tables."""
        self._parser = _build_markdown_parser()

    def tokenize(self, content: Optional[str]) -> List[BlockToken]:
        """
        Parse block content into tokens.

        Content is dedented first so that blocks written as indented
        triple-quoted strings are not read as code.

        Args:
            content: Markdown-like text

        Returns:
            Ordered list of tokens; empty for None or blank content
        """
        if not content or not content.strip():
            return []

        md_tokens = self._parser.parse(textwrap.dedent(content))
        result: List[BlockToken] = []
        previous_end: Optional[int] = None

        i = 0
        while i < len(md_tokens):
            tok = md_tokens[i]

            # Blank lines beyond the single separating one become blank space
            if tok.level == 0 and tok.nesting >= 0 and tok.map:
                if previous_end is not None and tok.map[0] - previous_end >= 2:
                    result.append(BlankSpaceToken())
                previous_end = tok.map[1]

            t = tok.type
            if t == "heading_open":
                level = int(tok.tag[1:]) if tok.tag.startswith("h") else 2
                runs = inline_runs(md_tokens[i + 1] if i + 1 < len(md_tokens) else None)
                if runs:
                    result.append(HeadingToken(level=level, runs=runs))
                i += 3
                continue

            if t == "paragraph_open":
                runs = inline_runs(md_tokens[i + 1] if i + 1 < len(md_tokens) else None)
                if runs:
                    result.append(ParagraphToken(runs=runs))
                i += 3
                continue

            if t in ("bullet_list_open", "ordered_list_open"):
                items, i = self._parse_list(md_tokens, i)
                if items:
                    result.append(ListToken(items=items, ordered=t == "ordered_list_open"))
                continue

            if t == "table_open":
                table, i = self._parse_table(md_tokens, i)
                if table.header or table.rows:
                    result.append(table)
                continue

            if t in ("fence", "code_block"):
                runs: List[TextRun] = []
                for line in tok.content.rstrip("\n").split("\n"):
                    if runs:
                        runs.append(TextRun(LINE_BREAK))
                    if line:
                        runs.append(TextRun(line))
                if runs:
                    result.append(ParagraphToken(runs=runs))
                i += 1
                continue

            i += 1

        return result

    def _parse_list(self, tokens: List[MdToken], start: int) -> Tuple[List[ListItem], int]:
        """Flatten a (possibly nested) list starting at ``start``."""
        items: List[ListItem] = []
        list_stack: List[List] = []  # [ordered, next_index] per open list
        item_stack: List[ListItem] = []

        i = start
        while i < len(tokens):
            tok = tokens[i]
            t = tok.type
            if t in ("bullet_list_open", "ordered_list_open"):
                list_stack.append([t == "ordered_list_open", 0])
            elif t in ("bullet_list_close", "ordered_list_close"):
                list_stack.pop()
                if not list_stack:
                    return items, i + 1
            elif t == "list_item_open":
                ordered, index = list_stack[-1]
                item = ListItem(depth=len(list_stack) - 1, ordered=ordered, index=index)
                list_stack[-1][1] += 1
                items.append(item)
                item_stack.append(item)
            elif t == "list_item_close":
                item_stack.pop()
            elif t == "inline" and item_stack:
                runs = inline_runs(tok)
                current = item_stack[-1]
                if runs and current.runs:
                    current.runs.append(TextRun(LINE_BREAK))
                current.runs.extend(runs)
            i += 1

        return items, i

    def _parse_table(self, tokens: List[MdToken], start: int) -> Tuple[TableToken, int]:
        """Collect header, body rows and column alignment of a table."""
        header: List[str] = []
        rows: List[List[str]] = []
        alignments: List[str] = []
        in_head = False
        row: Optional[List[str]] = None

        i = start + 1
        while i < len(tokens):
            tok = tokens[i]
            t = tok.type
            if t == "table_close":
                break
            if t == "thead_open":
                in_head = True
            elif t == "thead_close":
                in_head = False
            elif t == "tr_open":
                row = []
            elif t in ("th_open", "td_open") and row is not None:
                row.append("")
                if t == "th_open":
                    alignments.append(_cell_alignment(tok))
            elif t == "inline" and row:
                row[-1] = plain_text(inline_runs(tok)).replace(LINE_BREAK, " ").strip()
            elif t == "tr_close" and row is not None:
                if in_head:
                    header = row
                else:
                    rows.append(row)
                row = None
            i += 1

        return TableToken(header=header, rows=rows, alignments=alignments), i + 1

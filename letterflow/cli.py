"""
Command-line interface for letterflow.

Usage:
    letterflow render letter.json
    letterflow render letter.json --output out/letter.pdf

The JSON file holds two keys:
    options: LetterOptions fields (file_name, dept_signature, page_type, ...)
    blocks:  list of {"type": "text", "content": ..., "allow_pagebreak": ...,
             "style": {...}} or {"type": "separator", "spacing_before": ...,
             "spacing_after": ...}
"""
import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from .config import IMAGE_LOAD_TIMEOUT, LOG_LEVEL
from .content import ContentBlock, SeparatorBlock, TextBlock
from .document_builder import ImageLoader, render_letter
from .exceptions import InvalidConfigurationError, LetterflowError
from .letter_options import BlockStyle, LetterOptions
from .logger import resolve_level


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="letterflow",
        description="Render structured letter content into a paginated PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  letterflow render letter.json
  letterflow render letter.json --output out/letter.pdf
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render a letter JSON file to PDF")
    render_parser.add_argument("input", help="Letter JSON file")
    render_parser.add_argument(
        "-o", "--output",
        help="Output PDF path (default: file_name from the letter options)"
    )

    return parser


def parse_block(data: Dict[str, Any]) -> ContentBlock:
    """Build a content block from its JSON object."""
    block_type = data.get("type")
    if block_type == "separator":
        return SeparatorBlock(
            spacing_before=data.get("spacing_before"),
            spacing_after=data.get("spacing_after"),
        )
    if block_type == "text":
        style = data.get("style")
        try:
            block_style = BlockStyle(**style) if style else None
        except TypeError as e:
            raise InvalidConfigurationError(f"Invalid block style: {e}") from e
        return TextBlock(
            content=data.get("content"),
            allow_pagebreak=data.get("allow_pagebreak", True),
            style=block_style,
        )
    raise InvalidConfigurationError(f"Unknown block type: {block_type!r}")


def load_letter(path: str) -> Tuple[LetterOptions, List[ContentBlock]]:
    """Read options and blocks from a letter JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    options_data = dict(data.get("options") or {})
    if "font_dirs" in options_data:
        options_data["font_dirs"] = tuple(options_data["font_dirs"])
    elif os.getenv("LETTERFLOW_FONT_DIRS"):
        # .env is loaded after config read the environment
        options_data["font_dirs"] = tuple(
            font_dir for font_dir in os.environ["LETTERFLOW_FONT_DIRS"].split(os.pathsep) if font_dir
        )
    try:
        options = LetterOptions(**options_data)
    except TypeError as e:
        raise InvalidConfigurationError(f"Invalid letter options: {e}") from e

    blocks = [parse_block(block) for block in data.get("blocks") or []]
    return options, blocks


def cmd_render(args) -> int:
    """Render one letter."""
    options, blocks = load_letter(args.input)
    if args.output:
        options = replace(options, file_name=args.output)

    timeout = float(os.getenv("LETTERFLOW_IMAGE_TIMEOUT", IMAGE_LOAD_TIMEOUT))
    result = render_letter(options, blocks, image_loader=ImageLoader(timeout=timeout))
    path = result.download()

    print(f"Wrote {path} ({result.page_count} page{'s' if result.page_count != 1 else ''})")
    if result.has_warnings:
        print(f"{len(result.warnings)} layout warning(s):", file=sys.stderr)
        for warning in result.warnings:
            print(f"  {warning}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    logging.getLogger().setLevel(resolve_level(os.getenv("LETTERFLOW_LOG_LEVEL", LOG_LEVEL)))

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "render":
            return cmd_render(args)
    except (LetterflowError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

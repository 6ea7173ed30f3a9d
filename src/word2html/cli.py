"""Command line interface for word2html."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections import Counter
from pathlib import Path

from bs4 import BeautifulSoup

from word2html.cleaner import CleanOptions, clean_document
from word2html.config import WORD2HTML_PARSER
from word2html.exceptions import InputError, Word2htmlError
from word2html.html_utils import decode_markup, parse_style_declarations
from word2html.http_utils import fetch_html
from word2html.sections import detect_section_markers

logger = logging.getLogger(__name__)

_VENDOR_PREFIXES = ("mso", "o:", "xmlns", "w:")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="word2html",
        description="Clean HTML pasted from Word, Pages and Google Docs.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    clean = subparsers.add_parser("clean", help="Clean an HTML document")
    _add_input_arguments(clean)
    clean.add_argument("-o", "--output", help="Write cleaned HTML to this file instead of stdout")
    clean.add_argument("--parser", default=WORD2HTML_PARSER, help="BeautifulSoup tree builder")
    clean.add_argument("--keep-layout", action="store_true", help="Keep div and table containers")
    clean.add_argument("--no-reorder", action="store_true", help="Never reverse upside-down documents")
    clean.add_argument(
        "--unwrap-bold-wrapper",
        action="store_true",
        help="Remove a <b> element wrapping the whole document before parsing",
    )
    clean.add_argument("--verbose", action="store_true", help="Log every pipeline stage")
    clean.add_argument("--report", action="store_true", help="Print a summary to stderr")

    inspect = subparsers.add_parser("inspect", help="Count tags, classes, attributes and styles")
    _add_input_arguments(inspect)
    inspect.add_argument(
        "--vendor-only", action="store_true", help="Show only Office-specific classes and attributes"
    )

    sections = subparsers.add_parser("sections", help="List section markers in cleaned HTML")
    sections.add_argument("file", nargs="?", help="HTML file (default: stdin)")
    return parser


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", nargs="?", help="HTML file (default: stdin)")
    parser.add_argument("--url", help="Fetch the HTML from this URL")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "clean":
            return run_clean(args)
        if args.command == "inspect":
            return run_inspect(args)
        return run_sections(args)
    except Word2htmlError as exc:
        print(f"word2html: {exc}", file=sys.stderr)
        return 1


def run_clean(args: argparse.Namespace) -> int:
    html = load_html(url=args.url, file_path=args.file)
    options = CleanOptions(
        verbose=args.verbose,
        parser=args.parser,
        keep_layout_containers=args.keep_layout,
        fix_reversed_order=not args.no_reorder,
        unwrap_bold_wrapper=args.unwrap_bold_wrapper,
    )
    result = clean_document(html, options)

    if args.output:
        Path(args.output).write_text(result.html + "\n", encoding="utf-8")
    else:
        print(result.html)

    if args.report:
        print(f"reordered: {result.reordered}", file=sys.stderr)
        print(f"top-level: {' '.join(result.top_level_tags)}", file=sys.stderr)
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    html = load_html(url=args.url, file_path=args.file)
    soup = BeautifulSoup(html, "html.parser")
    tags, classes, attrs, styles = collect_stats(soup)

    print("Tags:")
    for name, count in tags.most_common():
        print(f"{name}: {count}")

    for title, counter in (("Classes", classes), ("Attributes", attrs), ("Style properties", styles)):
        print(f"\n{title}:")
        for name, count in counter.most_common():
            if args.vendor_only and not name.lower().startswith(_VENDOR_PREFIXES):
                continue
            print(f"{name}: {count}")
    return 0


def run_sections(args: argparse.Namespace) -> int:
    html = load_html(url=None, file_path=args.file)
    for marker in detect_section_markers(html):
        print(f"{marker.index}\t{marker.kind}\t<{marker.tag}>\t{marker.text}")
    return 0


def load_html(*, url: str | None, file_path: str | None) -> str:
    """Read input HTML from a URL, a file, or stdin (in that order)."""
    if url:
        return asyncio.run(fetch_html(url))

    if file_path is None or file_path == "-":
        if sys.stdin.isatty():
            raise InputError("No input: pass a FILE, --url, or pipe HTML on stdin")
        return sys.stdin.read()

    path = Path(file_path)
    if not path.is_file():
        raise InputError(f"HTML file not found: {path}")
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise InputError(f"Could not read {path}: {exc}") from exc
    return decode_markup(content)


def collect_stats(soup: BeautifulSoup) -> tuple[Counter, Counter, Counter, Counter]:
    tags: Counter = Counter()
    classes: Counter = Counter()
    attrs: Counter = Counter()
    styles: Counter = Counter()

    for tag in soup.find_all(True):
        tags[tag.name] += 1
        for class_name in tag.get("class", []):
            classes[class_name] += 1
        for attr in tag.attrs:
            attrs[attr] += 1
        for declaration in parse_style_declarations(tag.get("style")):
            styles[declaration.property] += 1

    return tags, classes, attrs, styles


if __name__ == "__main__":
    raise SystemExit(main())

"""CLI entry point for book-text: preview how a page of book text parses."""

import argparse
import logging
import sys

from rich.console import Console

import book_text.core.builtins
import book_text.extensions.loader
import book_text.io.logging_setup
import book_text.io.settings
from book_text.core.book import Book
from book_text.core.parser import BookTextParser
from book_text.preview import describe_span, spans_to_text

logger = logging.getLogger(__name__)


def _parse_macro(raw: str) -> tuple[str, str]:
    find, sep, replace = raw.partition("=")
    if not sep or not find:
        raise argparse.ArgumentTypeError(f"expected FIND=REPLACE, got {raw!r}")
    return find, replace


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="book-text",
        description="Expand macros and $(...) commands in book text and preview the result",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="Text file to parse (default: - for stdin)",
    )
    parser.add_argument(
        "--macro",
        dest="macros",
        action="append",
        type=_parse_macro,
        default=[],
        metavar="FIND=REPLACE",
        help="Add a macro; repeatable, applied after macros from settings",
    )
    parser.add_argument("--namespace", type=str, default=None, help="Default entry namespace")
    parser.add_argument("--player", type=str, default="Reader", help="Name for $(playername)")
    parser.add_argument(
        "--plugin",
        dest="plugins",
        action="append",
        default=[],
        help="Extension module to load; repeatable",
    )
    parser.add_argument(
        "--spans", action="store_true", help="Print one line per span instead of the preview"
    )
    return parser


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    book_text.io.logging_setup.configure()
    settings = book_text.io.settings.get_settings()

    registry = book_text.core.builtins.default_registry()
    plugin_names = list(settings.plugins) + list(args.plugins)
    errors = book_text.extensions.loader.load_plugins(registry, plugin_names)

    macros = dict(settings.macros)
    macros.update(args.macros)
    book = Book(
        namespace=args.namespace or settings.namespace,
        macros=macros,
        link_color=settings.link_color,
        player_name=args.player,
    )
    parser = BookTextParser(book, registry=registry, space_width=settings.space_width)

    try:
        source = _read_source(args.file)
    except OSError as e:
        print(f"book-text: cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    spans = parser.parse(source)
    console = Console()
    if args.spans:
        for span in spans:
            console.print(describe_span(span), markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(spans_to_text(spans, settings.space_width))

    logger.debug("parsed %d spans from %s", len(spans), args.file)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())

"""Book text parser: styled source text -> list of Spans.

parse() walks the source's style runs in order. Each run is macro-expanded,
then scanned for `$(...)` commands. One SpanState carries through all runs of
a parse, so a link opened in one run still colors text in the next.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from rich.style import Style, StyleType
from rich.text import Text

import book_text.core.builtins
import book_text.core.macros
from book_text.core.book import Book, KeybindLookup, KeybindTable, Messages
from book_text.core.dispatch import process_command
from book_text.core.registry import CommandRegistry
from book_text.core.span_state import SpanState
from book_text.core.spans import Span

logger = logging.getLogger(__name__)

# Body runs to the first ")"; bodies never contain parentheses.
COMMAND_PATTERN = re.compile(r"\$\(([^)]*)\)")

StyledRun = tuple[Style, str]
Source = str | Text | Iterable[StyledRun]


def _as_style(style: StyleType) -> Style:
    return Style.parse(style) if isinstance(style, str) else style


def styled_runs(source: Source) -> list[StyledRun]:
    """Split `source` into (style, string) runs.

    A rich Text is cut at every span boundary; each piece carries the Text's
    own style combined with every span that covers it.
    """
    if isinstance(source, str):
        return [(Style.null(), source)]
    if not isinstance(source, Text):
        return [(_as_style(style), string) for style, string in source]

    plain = source.plain
    base = _as_style(source.style)
    cuts = {0, len(plain)}
    for span in source.spans:
        cuts.add(max(0, min(span.start, len(plain))))
        cuts.add(max(0, min(span.end, len(plain))))
    bounds = sorted(cuts)

    runs: list[StyledRun] = []
    for start, end in zip(bounds, bounds[1:]):
        style = base
        for span in source.spans:
            if span.start <= start and end <= span.end:
                style = style + _as_style(span.style)
        runs.append((style, plain[start:end]))
    return runs or [(base, "")]


class BookTextParser:
    def __init__(
        self,
        book: Book,
        *,
        registry: CommandRegistry | None = None,
        keybinds: KeybindLookup | None = None,
        messages: Messages | None = None,
        base_style: Style | None = None,
        space_width: int = 4,
    ) -> None:
        self.book = book
        self.registry = registry or book_text.core.builtins.default_registry()
        self.keybinds = keybinds or KeybindTable()
        self.messages = messages or Messages()
        self.base_style = base_style or Style.null()
        self.space_width = space_width

    def new_state(self) -> SpanState:
        return SpanState(
            self.book,
            self.base_style,
            keybinds=self.keybinds,
            messages=self.messages,
            space_width=self.space_width,
        )

    def parse(self, source: Source) -> list[Span]:
        spans: list[Span] = []
        state = self.new_state()
        for style, string in styled_runs(source):
            spans.extend(self.process_commands(self.expand_macros(string), state, style))
        return spans

    def expand_macros(self, text: str | None) -> str:
        return book_text.core.macros.expand_macros(text, self.book.macros)

    def process_commands(self, text: str, state: SpanState, style: Style) -> list[Span]:
        """Scan one run and materialize its spans."""
        state.change_base_style(style)
        spans: list[Span] = []
        position = 0

        for match in COMMAND_PATTERN.finditer(text):
            spans.append(Span.from_state(state, text[position:match.start()]))
            position = match.end()

            try:
                processed = process_command(self.registry, state, match.group(1))
            except Exception:
                logger.debug("command $(%s) failed", match.group(1), exc_info=True)
                spans.append(Span.error(state, book_text.core.macros.ERROR_TEXT))
                continue

            if processed:
                spans.append(Span.from_state(state, processed))
                if state.cluster is None:
                    state.clear_tooltip()

        spans.append(Span.from_state(state, text[position:]))
        return spans

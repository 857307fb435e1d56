"""Mutable per-parse context threaded through every command processor.

One SpanState exists per parse() call and is never shared. Commands mutate it;
Span.from_state() snapshots it.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.color import Color
from rich.style import Style
from rich.text import Text

from book_text.core.book import Book, KeybindLookup, Messages
from book_text.core.spans import ClickAction, Cluster


OBFUSCATED = Style(meta={"obfuscated": True})


def is_obfuscated(style: Style) -> bool:
    return bool(style.meta.get("obfuscated"))


def with_color(style: Style, color: Color | None) -> Style:
    """Return `style` with its color replaced (None clears it).

    Style addition treats None as "inherit", so clearing needs a rebuild.
    """
    return Style(
        color=color,
        bgcolor=style.bgcolor,
        bold=style.bold,
        dim=style.dim,
        italic=style.italic,
        underline=style.underline,
        blink=style.blink,
        blink2=style.blink2,
        reverse=style.reverse,
        conceal=style.conceal,
        strike=style.strike,
        underline2=style.underline2,
        frame=style.frame,
        encircle=style.encircle,
        overline=style.overline,
        link=style.link,
        meta=style.meta or None,
    )


StyleEdit = Callable[[Style], Style]


class StyleStackUnderflow(RuntimeError):
    """A scope was closed that was never opened."""


class SpanState:
    def __init__(
        self,
        book: Book,
        base_style: Style,
        *,
        keybinds: KeybindLookup,
        messages: Messages,
        space_width: int = 4,
    ) -> None:
        self.book = book
        self.keybinds = keybinds
        self.messages = messages
        self.space_width = space_width
        self._parser_base = base_style
        self._base = base_style
        self._current = base_style
        # One list of style edits per open level; level 0 sits on the run's base.
        # The run base can change under them, so edits are kept and replayed.
        self._levels: list[list[StyleEdit]] = [[]]

        self.tooltip: Text = Text()
        self.on_click: ClickAction | None = None
        self.cluster: Cluster | None = None
        self.is_external_link = False
        self.ending_external = False
        self.line_breaks = 0
        self.spacing_left = 0
        self.spacing_right = 0

    # ─── Style stack ──────────────────────────────────────────────────────────

    def get_base(self) -> Style:
        return self._base

    def peek_style(self) -> Style:
        return self._current

    @property
    def depth(self) -> int:
        return len(self._levels)

    def _rebuild(self) -> None:
        style = self._base
        for edits in self._levels:
            for edit in edits:
                style = edit(style)
        self._current = style

    def push_style(self, style: Style) -> None:
        self._levels.append([lambda s: s + style])
        self._current = self._current + style

    def pop_style(self) -> Style:
        if len(self._levels) <= 1:
            raise StyleStackUnderflow("Underflow in style stack")
        popped = self._current
        self._levels.pop()
        self._rebuild()
        return popped

    def modify_style(self, fn: StyleEdit) -> None:
        self._levels[-1].append(fn)
        self._current = fn(self._current)

    def reset(self) -> None:
        self._levels = [[]]
        self._current = self._base

    def change_base_style(self, style: Style) -> None:
        """Make `style`, layered over the parser's base, the run's base.

        Open levels and earlier edits are replayed on top of the new base.
        """
        self._base = self._parser_base + style
        self._rebuild()

    def color(self, color: Color | None) -> None:
        self.modify_style(lambda s: with_color(s, color))

    def base_color(self) -> None:
        self.modify_style(lambda s: with_color(s, self._base.color))


    # ─── Interactive regions ──────────────────────────────────────────────────

    def open_cluster(self) -> Cluster:
        self.cluster = Cluster()
        return self.cluster

    def clear_tooltip(self) -> None:
        self.tooltip = Text()

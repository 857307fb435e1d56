"""Flatten parsed spans into one rich Text for terminal preview.

This is a debugging view, not page layout: line breaks become newlines,
spacing becomes whole spaces, tooltips are dropped and only URL clicks
survive (as terminal hyperlinks).
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.style import Style
from rich.text import Text

from book_text.core.spans import OpenUrl, Span


def _spaces(pixels: int, space_width: int) -> str:
    if pixels <= 0:
        return ""
    if space_width <= 0:
        return " "
    return " " * max(1, pixels // space_width)


def spans_to_text(spans: Iterable[Span], space_width: int = 4) -> Text:
    out = Text()
    for span in spans:
        if span.line_breaks:
            out.append("\n" * span.line_breaks)
        out.append(_spaces(span.spacing_left, space_width))

        piece = span.content.copy()
        style = span.style
        if isinstance(span.click, OpenUrl):
            style = style + Style(link=span.click.url)
        piece.style = style
        out.append(piece)

        out.append(_spaces(span.spacing_right, space_width))
    return out


def describe_span(span: Span) -> str:
    """One-line summary used by `book-text --spans`."""
    parts = [repr(span.text)]
    if span.style:
        parts.append(f"style={span.style}")
    if span.click is not None:
        parts.append(f"click={span.click!r}")
    if span.tooltip_text:
        parts.append(f"tooltip={span.tooltip_text!r}")
    if span.line_breaks:
        parts.append(f"breaks={span.line_breaks}")
    if span.spacing_left or span.spacing_right:
        parts.append(f"spacing=({span.spacing_left}, {span.spacing_right})")
    if span.is_error:
        parts.append("error")
    return " ".join(parts)

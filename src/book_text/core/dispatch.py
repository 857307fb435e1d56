"""Command dispatch: the fixed-order lookup chain over one command body.

Each lookup either claims the body (returning its replacement, possibly
empty) or returns None to pass it down the chain. First claim wins.
"""

from __future__ import annotations

import re

from rich.style import Style
from rich.text import Text

from book_text.core.colors import BULLET_COLOR, MARKER_COLOR, legacy_color, parse_hex
from book_text.core.registry import CommandRegistry
from book_text.core.span_state import SpanState

EXTERNAL_LINK_MARKER = "↪"
BULLET_ODD = "•"
BULLET_EVEN = "◦"

_LIST_RE = re.compile(r"li([0-9]?)")


def color_code_lookup(registry: CommandRegistry, body: str, state: SpanState) -> str | None:
    """`$(0)`..`$(f)`: legacy color code."""
    if len(body) != 1:
        return None
    color = legacy_color(body)
    if color is None:
        return None
    state.color(color)
    return ""


def color_hex_lookup(registry: CommandRegistry, body: str, state: SpanState) -> str | None:
    """`$(#RGB)` / `$(#RRGGBB)`; malformed digits fall back to the base color."""
    if not body.startswith("#") or len(body) not in (4, 7):
        return None
    try:
        color = parse_hex(body[1:])
    except ValueError:
        color = state.get_base().color
    state.color(color)
    return ""


def list_lookup(registry: CommandRegistry, body: str, state: SpanState) -> Text | None:
    """`$(li)` / `$(liN)`: start a bulleted list item nested N levels deep."""
    match = _LIST_RE.fullmatch(body)
    if match is None:
        return None
    depth = int(match.group(1) or 1)
    state.line_breaks = 1
    state.spacing_left = depth * 4
    state.spacing_right = state.space_width
    bullet = BULLET_EVEN if depth % 2 == 0 else BULLET_ODD
    return Text(bullet, style=Style(color=BULLET_COLOR))


def function_lookup(registry: CommandRegistry, body: str, state: SpanState) -> str | None:
    """`$(name:param)`: colon-parameterized function table."""
    index = body.find(":")
    if index <= 0:
        return None
    name, parameter = body[:index], body[index + 1:]
    function = registry.function(name)
    if function is None:
        return f"[MISSING FUNCTION: {name}]"
    return function(parameter, state)


def command_lookup(registry: CommandRegistry, body: str, state: SpanState) -> str | None:
    """`$(name)`: exact-name command table."""
    command = registry.command(body)
    if command is None:
        return None
    return command(state)


# // [LAW:dataflow-not-control-flow] Precedence is data: this tuple's order is the chain.
BUILTIN_LOOKUPS = (
    color_code_lookup,
    color_hex_lookup,
    list_lookup,
    function_lookup,
    command_lookup,
)


def process_command(registry: CommandRegistry, state: SpanState, body: str) -> str | Text:
    """Run `body` through the registry's lookup chain.

    Unclaimed bodies come back verbatim as `$(body)`. Exceptions from
    processors propagate; the scanner turns them into error spans.
    """
    state.ending_external = False

    result: str | Text | None = None
    for lookup in registry.lookups():
        result = lookup(registry, body, state)
        if result is not None:
            break
    if result is None:
        result = f"$({body})"

    if state.ending_external:
        marked = Text(result) if isinstance(result, str) else result.copy()
        marked.append(EXTERNAL_LINK_MARKER, style=Style(color=MARKER_COLOR))
        return marked
    return result

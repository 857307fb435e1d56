"""Built-in commands and functions, and the process-wide default registry.

Command names are case-sensitive. Bare names go to the command table;
`name:param` bodies go to the function table, so `$(l)` is bold while
`$(l:entry)` is a link.
"""

from __future__ import annotations

import re
import threading

from rich.style import Style
from rich.text import Text

from book_text.core.book import ResourceId
from book_text.core.colors import GRAY
from book_text.core.dispatch import BUILTIN_LOOKUPS
from book_text.core.registry import CommandRegistry
from book_text.core.span_state import OBFUSCATED, SpanState
from book_text.core.spans import OpenEntry, OpenUrl, SendCommand

_EXTERNAL_RE = re.compile(r"https?:")
COMMAND_TOOLTIP_LIMIT = 20


# ─── Commands ─────────────────────────────────────────────────────────────────


def _line_break(state: SpanState) -> str:
    state.line_breaks = 1
    return ""


def _paragraph(state: SpanState) -> str:
    state.line_breaks = 2
    return ""


def _close_link(state: SpanState) -> str:
    state.ending_external = state.is_external_link
    state.pop_style()
    state.cluster = None
    state.clear_tooltip()
    state.on_click = None
    state.is_external_link = False
    return ""


def _close_tooltip(state: SpanState) -> str:
    state.cluster = None
    state.clear_tooltip()
    return ""


def _close_command(state: SpanState) -> str:
    state.pop_style()
    state.cluster = None
    state.clear_tooltip()
    state.on_click = None
    return ""


def _player_name(state: SpanState) -> str:
    return state.book.reader_name()


def _formatting(flag: Style):
    def apply(state: SpanState) -> str:
        state.modify_style(lambda s: s + flag)
        return ""

    return apply


def _reset(state: SpanState) -> str:
    state.reset()
    return ""


def _no_color(state: SpanState) -> str:
    state.base_color()
    return ""


# ─── Functions ────────────────────────────────────────────────────────────────


def _keybind(parameter: str, state: SpanState) -> str:
    binding = state.keybinds.binding(parameter) or state.keybinds.binding(f"key.{parameter}")
    if binding is None:
        state.tooltip = Text(state.messages.format("keybind_missing", parameter))
        return "N/A"
    state.tooltip = Text(state.messages.format("keybind", binding.action))
    return binding.key_label


def _link(parameter: str, state: SpanState) -> str:
    state.open_cluster()
    state.push_style(Style(color=state.book.link_color))

    if _EXTERNAL_RE.match(parameter):
        state.tooltip = Text(state.messages.format("external_link"))
        state.is_external_link = True
        state.on_click = OpenUrl(parameter)
        return ""

    target, has_anchor, anchor = parameter.partition("#")
    entry_id = ResourceId.parse(target, state.book.namespace)
    entry = state.book.entry(entry_id)
    if entry is None:
        state.tooltip = Text(f"BAD LINK: {target}")
        return ""

    if entry.locked:
        state.tooltip = Text(state.messages.format("locked"), style=Style(color=GRAY))
    else:
        state.tooltip = Text(entry.name)

    page = 0
    if has_anchor:
        anchor_page = entry.page_for_anchor(anchor)
        if anchor_page >= 0:
            # Two pages per spread.
            page = anchor_page // 2
        else:
            state.tooltip.append(f" (INVALID ANCHOR:{anchor})")
    state.on_click = OpenEntry(str(entry.entry_id), page)
    return ""


def _tooltip(parameter: str, state: SpanState) -> str:
    state.tooltip = Text(parameter)
    state.open_cluster()
    return ""


def _command(parameter: str, state: SpanState) -> str:
    state.push_style(Style(color=state.book.link_color))
    state.open_cluster()
    if not parameter.startswith("/"):
        state.tooltip = Text("INVALID COMMAND (must begin with /)")
    elif len(parameter) > COMMAND_TOOLTIP_LIMIT:
        state.tooltip = Text(parameter[:COMMAND_TOOLTIP_LIMIT] + "...")
    else:
        state.tooltip = Text(parameter)
    state.on_click = SendCommand(parameter)
    return ""


# ─── Installation ─────────────────────────────────────────────────────────────


def install(registry: CommandRegistry) -> CommandRegistry:
    """Register the lookup chain and every built-in command and function."""
    for lookup in BUILTIN_LOOKUPS:
        registry.register_lookup(lookup)

    registry.register_command(_line_break, "br")
    registry.register_command(_paragraph, "br2", "2br", "p")
    registry.register_command(_close_link, "/l")
    registry.register_command(_close_tooltip, "/t")
    registry.register_command(_player_name, "playername")
    registry.register_command(_formatting(OBFUSCATED), "k", "obf")
    registry.register_command(_formatting(Style(bold=True)), "l", "bold")
    registry.register_command(_formatting(Style(strike=True)), "m", "strike")
    registry.register_command(_formatting(Style(italic=True)), "o", "italic", "italics")
    registry.register_command(_reset, "", "reset", "clear")
    registry.register_command(_no_color, "nocolor")
    registry.register_command(_close_command, "/c")

    registry.register_function(_keybind, "k")
    registry.register_function(_link, "l")
    registry.register_function(_tooltip, "tooltip", "t")
    registry.register_function(_command, "command", "c")
    return registry


_DEFAULT: CommandRegistry | None = None
_DEFAULT_LOCK = threading.Lock()


def default_registry() -> CommandRegistry:
    """Return the process-wide registry, built with the built-ins on first use."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = install(CommandRegistry())
        return _DEFAULT

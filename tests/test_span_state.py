"""Tests for SpanState style stack and Span snapshots."""

import pytest
from rich.color import Color
from rich.style import Style

from book_text.core.book import Book, KeybindTable, Messages
from book_text.core.span_state import (
    OBFUSCATED,
    SpanState,
    StyleStackUnderflow,
    is_obfuscated,
    with_color,
)
from book_text.core.spans import Cluster, Span

RED = Color.parse("#FF0000")


def _state(base=None):
    return SpanState(
        Book(namespace="guide"),
        base or Style.null(),
        keybinds=KeybindTable(),
        messages=Messages(),
    )


def test_push_layers_over_current_top():
    state = _state()
    state.modify_style(lambda s: s + Style(bold=True))
    state.push_style(Style(color=RED))
    top = state.peek_style()
    assert top.bold
    assert top.color == RED
    assert state.depth == 2


def test_pop_underflow_raises():
    state = _state(Style(italic=True))
    with pytest.raises(StyleStackUnderflow):
        state.pop_style()
    assert state.depth == 1
    assert state.peek_style() == Style(italic=True)


def test_pop_restores_saved_style():
    state = _state()
    state.push_style(Style(color=RED))
    assert state.pop_style().color == RED
    assert state.peek_style() == Style.null()


def test_reset_collapses_to_base():
    state = _state(Style(italic=True))
    state.push_style(Style(color=RED))
    state.push_style(Style(bold=True))
    state.reset()
    assert state.depth == 1
    assert state.peek_style() == Style(italic=True)


def test_base_color_restores_only_color():
    state = _state(Style(color=Color.parse("#00FF00")))
    state.modify_style(lambda s: s + Style(bold=True))
    state.color(RED)
    state.base_color()
    assert state.peek_style().color == Color.parse("#00FF00")
    assert state.peek_style().bold


def test_with_color_none_clears_color():
    style = with_color(Style(color=RED, bold=True), None)
    assert style.color is None
    assert style.bold


def test_change_base_style_keeps_open_levels():
    state = _state()
    state.push_style(Style(color=RED))
    state.change_base_style(Style(italic=True))
    assert state.depth == 2
    assert state.get_base().italic
    assert state.peek_style().color == RED
    state.pop_style()
    assert state.peek_style().italic
    assert state.peek_style().color is None


def test_obfuscated_flag_survives_combination():
    assert is_obfuscated(Style(bold=True) + OBFUSCATED)
    assert not is_obfuscated(Style(bold=True))


def test_span_consumes_breaks_and_spacing():
    state = _state()
    state.line_breaks = 2
    state.spacing_left = 8
    first = Span.from_state(state, "a")
    second = Span.from_state(state, "b")
    assert (first.line_breaks, first.spacing_left) == (2, 8)
    assert (second.line_breaks, second.spacing_left) == (0, 0)


def test_spans_join_open_cluster():
    state = _state()
    cluster = state.open_cluster()
    span = Span.from_state(state, "inside")
    assert isinstance(cluster, Cluster)
    assert span.cluster is cluster
    assert cluster.spans == [span]


def test_error_span_is_marked_and_detached():
    state = _state()
    state.open_cluster()
    span = Span.error(state, "[ERROR]")
    assert span.is_error
    assert span.cluster is None
    assert span.click is None


def test_change_base_style_replays_edits_on_every_level():
    state = _state()
    state.modify_style(lambda s: s + Style(bold=True))
    state.push_style(Style(color=RED))
    state.change_base_style(Style(italic=True))
    assert state.peek_style().italic and state.peek_style().bold
    assert state.peek_style().color == RED
    state.pop_style()
    assert state.peek_style().italic and state.peek_style().bold
    assert state.peek_style().color is None


def test_nocolor_follows_current_run_base():
    state = _state()
    state.color(RED)
    state.base_color()
    state.change_base_style(Style(color=Color.parse("#00FF00")))
    assert state.peek_style().color == Color.parse("#00FF00")

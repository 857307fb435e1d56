"""Tests for macro expansion to a fixpoint."""

import logging

from book_text.core.macros import EXPANSION_CAP, expand_macros, expand_macros_traced


def test_no_macros_returns_text_unchanged():
    assert expand_macros("plain text", {}) == "plain text"


def test_none_input_becomes_error_marker():
    assert expand_macros(None, {"a": "b"}) == "[ERROR]"


def test_nested_macros_expand_to_fixpoint():
    macros = {"$(item)": "$(#b0b)", "@wand": "$(item)Wand$(0)"}
    result = expand_macros_traced("Hold the @wand.", macros)
    assert result.text == "Hold the $(#b0b)Wand$(0)."
    assert not result.capped
    assert result.iterations < EXPANSION_CAP


def test_expansion_is_idempotent_for_acyclic_tables():
    macros = {"A": "B", "B": "C", "C": "done"}
    once = expand_macros("A B C", macros)
    assert once == "done done done"
    assert expand_macros(once, macros) == once


def test_passes_apply_entries_in_insertion_order():
    # "ab" is replaced before "b" gets a chance in the same pass.
    assert expand_macros("ab", {"ab": "X", "b": "Y"}) == "X"
    assert expand_macros("ab", {"b": "Y", "ab": "X"}) == "aY"


def test_cycle_stops_at_cap_with_warning(caplog):
    macros = {"ping": "pong", "pong": "ping!"}
    with caplog.at_level(logging.WARNING, logger="book_text.core.macros"):
        result = expand_macros_traced("ping", macros)

    assert result.capped
    assert result.iterations == EXPANSION_CAP
    assert "without reaching fixpoint" in caplog.text


def test_converging_table_logs_nothing(caplog):
    with caplog.at_level(logging.WARNING, logger="book_text.core.macros"):
        expand_macros("x", {"x": "y"})
    assert caplog.records == []

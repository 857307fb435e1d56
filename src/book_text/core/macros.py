"""Macro expansion: literal find/replace iterated to a fixpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import NamedTuple

logger = logging.getLogger(__name__)

EXPANSION_CAP = 10
ERROR_TEXT = "[ERROR]"


class Expansion(NamedTuple):
    text: str
    iterations: int
    capped: bool


def expand_macros_traced(text: str | None, macros: Mapping[str, str]) -> Expansion:
    """Expand `macros` in `text` and report how many passes it took.

    A pass applies every (find, replace) pair in mapping order. Expansion
    stops at the first pass that changes nothing, or after EXPANSION_CAP
    passes with a warning.
    """
    actual = ERROR_TEXT if text is None else text

    iterations = 0
    while iterations < EXPANSION_CAP:
        new_text = actual
        for find, replace in macros.items():
            new_text = new_text.replace(find, replace)
        if new_text == actual:
            break
        actual = new_text
        iterations += 1

    capped = iterations == EXPANSION_CAP
    if capped:
        logger.warning(
            "Expanded macros for %d iterations without reaching fixpoint, stopping. "
            "Make sure you don't have circular macro invocations",
            EXPANSION_CAP,
        )
    return Expansion(actual, iterations, capped)


def expand_macros(text: str | None, macros: Mapping[str, str]) -> str:
    return expand_macros_traced(text, macros).text

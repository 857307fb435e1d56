"""Command registry: named commands, colon functions and the lookup chain.

A registry is built once at startup (see builtins.default_registry()) and handed to
every parser. Extensions may keep registering afterwards; tables are replaced
copy-on-write under a lock so a concurrent parse always reads a complete
snapshot and no registration is lost.

// [LAW:one-source-of-truth] Command names resolve only through this registry.
// [LAW:single-enforcer] Registration goes through register_*; there is no removal.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rich.text import Text

    from book_text.core.span_state import SpanState


class CommandProcessor(Protocol):
    def __call__(self, state: SpanState) -> str:
        ...


class FunctionProcessor(Protocol):
    def __call__(self, parameter: str, state: SpanState) -> str:
        ...


class CommandLookup(Protocol):
    """Returns the replacement when it claims `body`, else None."""

    def __call__(self, registry: CommandRegistry, body: str, state: SpanState) -> str | Text | None:
        ...


class CommandRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._commands: Mapping[str, CommandProcessor] = MappingProxyType({})
        self._functions: Mapping[str, FunctionProcessor] = MappingProxyType({})
        self._lookups: tuple[CommandLookup, ...] = ()

    def register_command(self, processor: CommandProcessor, *names: str) -> None:
        with self._lock:
            updated = dict(self._commands)
            for name in names:
                updated[name] = processor
            self._commands = MappingProxyType(updated)

    def register_function(self, processor: FunctionProcessor, *names: str) -> None:
        with self._lock:
            updated = dict(self._functions)
            for name in names:
                updated[name] = processor
            self._functions = MappingProxyType(updated)

    def register_lookup(self, lookup: CommandLookup) -> None:
        with self._lock:
            self._lookups = self._lookups + (lookup,)

    def command(self, name: str) -> CommandProcessor | None:
        return self._commands.get(name)

    def function(self, name: str) -> FunctionProcessor | None:
        return self._functions.get(name)

    def lookups(self) -> tuple[CommandLookup, ...]:
        return self._lookups

    def command_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._commands))

    def function_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._functions))


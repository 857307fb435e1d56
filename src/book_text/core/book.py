"""Book context consumed by the text parser.

The parser never owns book data. It reads macros, entries, the default
namespace, the link color and the reader's display name from a Book, and
resolves keybinds through a KeybindLookup.

// [LAW:locality-or-seam] Everything outside the parser is reached through these types.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from rich.color import Color


_NAMESPACE_RE = re.compile(r"^[a-z0-9_.-]+$")
_PATH_RE = re.compile(r"^[a-z0-9_./-]*$")


class InvalidIdentifierError(ValueError):
    """Raised for an entry identifier with characters outside the allowed set."""


@dataclass(frozen=True)
class ResourceId:
    namespace: str
    path: str

    def __post_init__(self) -> None:
        if not _NAMESPACE_RE.match(self.namespace):
            raise InvalidIdentifierError(
                f"Non [a-z0-9_.-] character in namespace of location: {self}"
            )
        if not _PATH_RE.match(self.path):
            raise InvalidIdentifierError(
                f"Non [a-z0-9/._-] character in path of location: {self}"
            )

    @classmethod
    def parse(cls, text: str, default_namespace: str) -> ResourceId:
        """Parse `namespace:path`, or a bare `path` in the default namespace."""
        namespace, sep, path = text.partition(":")
        if not sep:
            return cls(default_namespace, text)
        return cls(namespace or default_namespace, path)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.path}"


@dataclass(frozen=True)
class BookEntry:
    """An entry that links can point at.

    anchors maps anchor name -> page index inside the entry.
    """

    entry_id: ResourceId
    name: str
    locked: bool = False
    anchors: Mapping[str, int] = field(default_factory=dict)

    def page_for_anchor(self, anchor: str) -> int:
        return self.anchors.get(anchor, -1)


PlayerName = str | Callable[[], str]


@dataclass
class Book:
    namespace: str
    macros: dict[str, str] = field(default_factory=dict)
    entries: dict[ResourceId, BookEntry] = field(default_factory=dict)
    link_color: Color = field(default_factory=lambda: Color.parse("#0000EE"))
    player_name: PlayerName = ""

    def entry(self, entry_id: ResourceId) -> BookEntry | None:
        return self.entries.get(entry_id)

    def add_entry(self, entry: BookEntry) -> None:
        self.entries[entry.entry_id] = entry

    def reader_name(self) -> str:
        if callable(self.player_name):
            return self.player_name()
        return self.player_name


# ─── Keybinds ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class KeyBinding:
    """A bound key: `name` is the binding id (e.g. `key.jump`), `action` its
    display name and `key_label` the label of the key currently bound."""

    name: str
    action: str
    key_label: str


class KeybindLookup(Protocol):
    def binding(self, name: str) -> KeyBinding | None:
        ...


class KeybindTable:
    """Name-keyed KeybindLookup over a fixed set of bindings."""

    def __init__(self, bindings: tuple[KeyBinding, ...] | list[KeyBinding] = ()) -> None:
        self._bindings = {b.name: b for b in bindings}

    def binding(self, name: str) -> KeyBinding | None:
        return self._bindings.get(name)


# ─── Messages ─────────────────────────────────────────────────────────────────

# Stand-in for a localization layer: message key -> str.format template.
DEFAULT_MESSAGES: dict[str, str] = {
    "keybind_missing": "No keybind found for {0}",
    "keybind": "Keybind: {0}",
    "external_link": "External Link",
    "locked": "Locked",
}


class Messages:
    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._table = dict(DEFAULT_MESSAGES)
        if overrides:
            self._table.update(overrides)

    def format(self, key: str, *args: object) -> str:
        template = self._table.get(key)
        if template is None:
            return key
        return template.format(*args)

"""Standard extension contract for adding book text commands.

An extension is any importable module exposing `register(registry)`. The hook
receives the shared CommandRegistry and may call register_command,
register_function or register_lookup on it.

// [LAW:locality-or-seam] Extensions talk to the registry API only, never parser internals.
"""

from __future__ import annotations

from typing import Protocol

from book_text.core.registry import CommandRegistry

HOOK_NAME = "register"


class ExtensionPlugin(Protocol):
    def register(self, registry: CommandRegistry) -> None:
        ...

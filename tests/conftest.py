"""Shared fixtures for book_text tests."""

import pytest

from book_text.core.book import Book, BookEntry, KeyBinding, KeybindTable, ResourceId
from book_text.core.builtins import install
from book_text.core.parser import BookTextParser
from book_text.core.registry import CommandRegistry


@pytest.fixture
def registry():
    """Fresh registry with built-ins; safe to extend inside one test."""
    return install(CommandRegistry())


@pytest.fixture
def book():
    b = Book(namespace="guide", player_name="Alex")
    b.add_entry(BookEntry(ResourceId("guide", "basics/intro"), "Introduction", anchors={"crafting": 5}))
    b.add_entry(BookEntry(ResourceId("guide", "secrets"), "Secrets", locked=True))
    b.add_entry(BookEntry(ResourceId("other", "tools"), "Tools"))
    return b


@pytest.fixture
def keybinds():
    return KeybindTable([
        KeyBinding("key.jump", "Jump", "Space"),
        KeyBinding("inventory", "Open Inventory", "E"),
    ])


@pytest.fixture
def parser(book, registry, keybinds):
    return BookTextParser(book, registry=registry, keybinds=keybinds)
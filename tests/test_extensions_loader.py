"""Tests for loading third-party command extensions by module name."""

import logging
import sys
import types

import pytest

from book_text.core.book import Book
from book_text.core.parser import BookTextParser
from book_text.extensions.loader import load_plugins


@pytest.fixture
def fake_module(monkeypatch):
    """Install a throwaway module under `name` for the duration of a test."""

    def install(name, **attrs):
        module = types.ModuleType(name)
        for key, value in attrs.items():
            setattr(module, key, value)
        monkeypatch.setitem(sys.modules, name, module)
        return module

    return install


def test_extension_registers_command_and_function(fake_module, registry):
    def register(reg):
        reg.register_command(lambda state: "♥", "heart")
        reg.register_function(lambda param, state: param.upper(), "shout")

    fake_module("ext_hearts", register=register)
    assert load_plugins(registry, ["ext_hearts"]) == {}

    spans = BookTextParser(Book(namespace="g"), registry=registry).parse("$(heart) $(shout:hey)")
    assert [s.text for s in spans] == ["", "♥", " ", "HEY", ""]


def test_extension_can_override_builtin(fake_module, registry):
    fake_module("ext_br", register=lambda reg: reg.register_command(lambda state: "<br>", "br"))
    load_plugins(registry, ["ext_br"])
    spans = BookTextParser(Book(namespace="g"), registry=registry).parse("a$(br)b")
    assert "<br>" in [s.text for s in spans]


def test_missing_module_is_recorded_not_raised(registry, caplog):
    with caplog.at_level(logging.WARNING, logger="book_text.extensions.loader"):
        errors = load_plugins(registry, ["no_such_module_for_book_text"])
    assert errors["no_such_module_for_book_text"].startswith("import failed")
    assert "not loaded" in caplog.text


def test_module_without_hook_is_recorded(fake_module, registry):
    fake_module("ext_empty")
    errors = load_plugins(registry, ["ext_empty"])
    assert "missing required register" in errors["ext_empty"]


def test_failing_hook_does_not_stop_later_extensions(fake_module, registry):
    def bad(reg):
        raise ValueError("nope")

    fake_module("ext_bad", register=bad)
    fake_module("ext_good", register=lambda reg: reg.register_command(lambda s: "ok", "good"))
    errors = load_plugins(registry, ["ext_bad", "", "ext_good"])
    assert list(errors) == ["ext_bad"]
    assert "nope" in errors["ext_bad"]
    assert registry.command("good") is not None

"""Settings file I/O for book-text.

Reads a JSON settings file at XDG_CONFIG_HOME/book-text/settings.json and
resolves it, plus BOOK_TEXT_* environment overrides, into ParserSettings.

Import as: import book_text.io.settings
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from rich.color import Color, ColorParseError

logger = logging.getLogger(__name__)

DEFAULT_SPACE_WIDTH = 4
DEFAULT_LINK_COLOR = "#0000EE"
DEFAULT_NAMESPACE = "book"

_ENV_SPACE_WIDTH = "BOOK_TEXT_SPACE_WIDTH"
_ENV_LINK_COLOR = "BOOK_TEXT_LINK_COLOR"
_ENV_NAMESPACE = "BOOK_TEXT_NAMESPACE"
_ENV_PLUGINS = "BOOK_TEXT_PLUGINS"


@dataclass(frozen=True)
class ParserSettings:
    space_width: int = DEFAULT_SPACE_WIDTH
    link_color: Color = field(default_factory=lambda: Color.parse(DEFAULT_LINK_COLOR))
    namespace: str = DEFAULT_NAMESPACE
    macros: Mapping[str, str] = field(default_factory=dict)
    plugins: tuple[str, ...] = ()


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / book-text / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "book-text" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


# ─── Normalization ────────────────────────────────────────────────────────────


def _normalize_space_width(value: object) -> int:
    if value is None:
        return DEFAULT_SPACE_WIDTH
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("invalid space_width %r, using %d", value, DEFAULT_SPACE_WIDTH)
        return DEFAULT_SPACE_WIDTH
    return max(0, parsed)


def _normalize_link_color(value: object) -> Color:
    raw = str(value or "").strip() or DEFAULT_LINK_COLOR
    try:
        return Color.parse(raw)
    except ColorParseError:
        logger.warning("invalid link_color %r, using %s", value, DEFAULT_LINK_COLOR)
        return Color.parse(DEFAULT_LINK_COLOR)


def _normalize_namespace(value: object) -> str:
    return str(value or "").strip().lower() or DEFAULT_NAMESPACE


def _normalize_macros(value: object) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("ignoring macros setting of type %s", type(value).__name__)
        return {}
    return {str(k): str(v) for k, v in value.items()}


def _normalize_plugins(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return ()
    return tuple(name for name in (str(item).strip() for item in items) if name)


def resolve_settings(
    data: Mapping[str, object],
    environ: Mapping[str, str] | None = None,
) -> ParserSettings:
    """Build ParserSettings from file data, letting environment variables win."""
    env = os.environ if environ is None else environ
    # // [LAW:dataflow-not-control-flow] One override pass, then one normalization pass.
    merged = dict(data)
    if _ENV_SPACE_WIDTH in env:
        merged["space_width"] = env[_ENV_SPACE_WIDTH]
    if _ENV_LINK_COLOR in env:
        merged["link_color"] = env[_ENV_LINK_COLOR]
    if _ENV_NAMESPACE in env:
        merged["namespace"] = env[_ENV_NAMESPACE]
    if _ENV_PLUGINS in env:
        merged["plugins"] = env[_ENV_PLUGINS]

    return ParserSettings(
        space_width=_normalize_space_width(merged.get("space_width")),
        link_color=_normalize_link_color(merged.get("link_color")),
        namespace=_normalize_namespace(merged.get("namespace")),
        macros=_normalize_macros(merged.get("macros")),
        plugins=_normalize_plugins(merged.get("plugins")),
    )


def get_settings() -> ParserSettings:
    return resolve_settings(load_settings())

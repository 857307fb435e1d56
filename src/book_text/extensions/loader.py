"""Extension loading by module name.

// [LAW:single-enforcer] Extension import + hook validation happens only here.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable

from book_text.core.registry import CommandRegistry
from book_text.extensions.plugin_api import HOOK_NAME

logger = logging.getLogger(__name__)


def _load_one(registry: CommandRegistry, module_name: str) -> str | None:
    """Load one extension; return an error description, or None on success."""
    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        return f"import failed: {e}"

    hook = getattr(module, HOOK_NAME, None)
    if hook is None or not callable(hook):
        return f"missing required {HOOK_NAME}(registry) hook"
    try:
        hook(registry)
    except Exception as e:
        return f"{HOOK_NAME} failed: {e}"
    return None


def load_plugins(registry: CommandRegistry, module_names: Iterable[str]) -> dict[str, str]:
    """Import each module and run its register hook against `registry`.

    Returns module name -> error for every extension that failed; failures
    are logged, never raised, so one broken extension cannot stop the others.
    """
    errors: dict[str, str] = {}
    for raw_name in module_names:
        module_name = str(raw_name or "").strip()
        if not module_name:
            continue
        error = _load_one(registry, module_name)
        if error is None:
            logger.debug("loaded book text extension %s", module_name)
            continue
        errors[module_name] = error
        logger.warning("book text extension %s not loaded: %s", module_name, error)
    return errors

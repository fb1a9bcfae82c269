"""Helpers for resolving the optional md2web configuration file."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from .errors import Md2WebError

DEFAULT_CONFIG_NAME = "md2web.json"
CONFIG_ENV_VAR = "MD2WEB_CONFIG"
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

DEFAULTS: Dict[str, Any] = {
    "default_template_path": os.path.join(PACKAGE_DIR, "template.html"),
    "default_lang": "zh-TW",
    "template_cache_size": 32,
    "watch_step_ms": 100,
    "watch_debounce_ms": 1600,
    "pdf_format": "A4",
    "pdf_margins": {
        "top": "20mm",
        "bottom": "20mm",
        "left": "15mm",
        "right": "15mm",
    },
}


class ConfigError(Md2WebError):
    """Raised when runtime configuration cannot be loaded."""


def _resolve_config_path(path: Optional[str]) -> Optional[str]:
    """Return the config path to load, or None when no file applies.

    An explicit ``path`` or the environment override must exist; the
    implicit ``md2web.json`` in the working directory is optional.
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        expanded = os.path.abspath(os.path.expanduser(explicit))
        if os.path.isfile(expanded):
            return expanded
        raise ConfigError(f"Configuration file not found: {explicit}")

    candidate = os.path.join(os.getcwd(), DEFAULT_CONFIG_NAME)
    if os.path.isfile(candidate):
        return candidate
    return None


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the JSON config (if any) layered over ``DEFAULTS``."""
    resolved: Dict[str, Any] = dict(DEFAULTS)
    config_path = _resolve_config_path(path)
    if config_path is None:
        return resolved

    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {config_path}")

    base_dir = os.path.dirname(config_path)
    for key, value in data.items():
        if isinstance(value, str) and key.endswith("_path"):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value

    for key in ("template_cache_size", "watch_step_ms", "watch_debounce_ms"):
        try:
            resolved[key] = int(resolved[key])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{key} must be an integer") from exc

    return resolved

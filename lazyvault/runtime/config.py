"""Startup configuration from the environment and an optional JSON file.

The store address, token, and default mount come from required environment
variables. Tuning knobs live in a read-only JSON config file; access to it is
defensive, so a malformed or missing file falls back to defaults.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..discovery.walker import DEFAULT_WALK_WORKERS
from ..errors import ConfigurationError
from ..store.client import DEFAULT_REQUEST_TIMEOUT
from ..view.model import DEFAULT_SCROLL_OFF

APP_NAME = "lazyvault"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STYLE = "monokai"

ENV_ADDR = "VAULT_ADDR"
ENV_TOKEN = "VAULT_TOKEN"
ENV_MOUNT = "VAULT_MOUNT"


@dataclass(frozen=True)
class Settings:
    addr: str
    token: str
    mount: str
    scroll_off: int = DEFAULT_SCROLL_OFF
    walk_workers: int = DEFAULT_WALK_WORKERS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    style: str = DEFAULT_STYLE


def must_get_env(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return a required environment value or raise ``ConfigurationError``."""
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is None:
        raise ConfigurationError(f"Environment variable {name} must be set")
    return value


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(data: dict[str, object], key: str, default: int, minimum: int = 1) -> int:
    """Read an integer option, rejecting booleans and values below ``minimum``."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= minimum else default


def _positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _style_name(data: dict[str, object]) -> str:
    value = data.get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def load_settings(environ: Mapping[str, str] | None = None, *, require_mount: bool = True) -> Settings:
    """Build ``Settings`` from the environment plus the optional config file."""
    env = os.environ if environ is None else environ
    addr = must_get_env(ENV_ADDR, env)
    token = must_get_env(ENV_TOKEN, env)
    mount = must_get_env(ENV_MOUNT, env) if require_mount else env.get(ENV_MOUNT, "")
    data = load_config()
    return Settings(
        addr=addr,
        token=token,
        mount=mount,
        scroll_off=_positive_int(data, "scroll_off", DEFAULT_SCROLL_OFF, minimum=0),
        walk_workers=_positive_int(data, "walk_workers", DEFAULT_WALK_WORKERS),
        request_timeout=_positive_float(data, "request_timeout", DEFAULT_REQUEST_TIMEOUT),
        style=_style_name(data),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_STYLE",
    "ENV_ADDR",
    "ENV_MOUNT",
    "ENV_TOKEN",
    "Settings",
    "load_config",
    "load_settings",
    "must_get_env",
]

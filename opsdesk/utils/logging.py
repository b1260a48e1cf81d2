"""Root logger setup for the console.

The level comes from, in order: ``OPSDESK_LOG_LEVEL`` (a name such as
``WARNING`` or a number), a truthy ``OPSDESK_DEBUG``, then the debug toggle
in Settings. Environment values always win so an operator can turn on
request tracing without touching saved preferences.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LEVEL_ENV = "OPSDESK_LOG_LEVEL"
DEBUG_ENV = "OPSDESK_DEBUG"
_TRUTHY = {"1", "true", "yes", "on"}
# Third-party loggers that stay at INFO or above even in DEBUG mode.
_QUIET_LOGGERS = ("urllib3", "requests", "watchfiles", "uvicorn.access")


def parse_level(value: int | str | None, fallback: int = logging.INFO) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a logging level."""
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else fallback


def env_log_level() -> Optional[int]:
    """Level forced by the environment, or None when it sets nothing."""
    explicit = os.getenv(LEVEL_ENV)
    if explicit and explicit.strip():
        return parse_level(explicit)
    if (os.getenv(DEBUG_ENV) or "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def env_debug_requested() -> bool:
    level = env_log_level()
    return level is not None and level <= logging.DEBUG


def _set_root_level(level: int) -> None:
    logging.getLogger().setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def configure_root(default_level: int | str = logging.INFO) -> int:
    """Install the compact console format once and return the effective level."""
    env_level = env_log_level()
    level = env_level if env_level is not None else parse_level(default_level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    _set_root_level(level)
    return level


def apply_debug_toggle(debug_enabled: bool) -> int:
    """Follow the Settings debug switch unless the environment pins a level."""
    env_level = env_log_level()
    if env_level is not None:
        level = env_level
    else:
        level = logging.DEBUG if debug_enabled else logging.INFO
    _set_root_level(level)
    return level


__all__ = [
    "DEBUG_ENV",
    "LEVEL_ENV",
    "apply_debug_toggle",
    "configure_root",
    "env_debug_requested",
    "env_log_level",
    "parse_level",
]

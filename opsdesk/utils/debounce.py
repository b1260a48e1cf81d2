"""Keyed debounce timers driven by a UI scheduler.

View-models receive a :class:`DebounceScheduler` and call ``schedule`` on
every keystroke; each call replaces the pending timer for the same key so the
callback only runs once the input has been quiet for ``delay_ms``. The web
runtime passes NiceGUI one-shot timers in as ``schedule``/``cancel``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


ScheduleFn = Callable[[int, Callable[[], None]], Any]
CancelFn = Callable[[Any], None]

LOGGER = logging.getLogger(__name__)


@dataclass
class DebounceHandle:
    """Timer token associated with a single debounce channel.

    Attributes:
        key: Channel key (for example ``"search"``).
        token: Scheduler token returned by the UI scheduler implementation.
    """
    key: str
    token: Any


class DebounceScheduler:
    """Manage one pending timer per key using an injected UI scheduler."""

    def __init__(self, schedule: ScheduleFn, cancel: CancelFn) -> None:
        """Store schedule/cancel functions and initialize the handle registry.

        Args:
            schedule: Function compatible with ``after(delay_ms, callback)``.
            cancel: Function that stops a token returned by ``schedule``.
        """
        self._schedule = schedule
        self._cancel = cancel
        self._handles: Dict[str, DebounceHandle] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Replace any pending timer for ``key`` with a new one.

        The handle is dropped before ``callback`` runs, so callbacks may
        schedule again without cancelling themselves.
        """
        delay = max(1, int(delay_ms))
        self.cancel(key)

        def _fire() -> None:
            self._handles.pop(key, None)
            callback()

        token = self._schedule(delay, _fire)
        self._handles[key] = DebounceHandle(key=key, token=token)

    def cancel(self, key: str) -> None:
        """Cancel the pending timer for ``key``, if any."""
        handle = self._handles.pop(key, None)
        if not handle:
            return
        try:
            self._cancel(handle.token)
        except Exception:
            LOGGER.debug("Ignoring cancel failure for debounce key %s", key, exc_info=True)

    def cancel_all(self) -> None:
        """Cancel every pending timer."""
        for key in list(self._handles.keys()):
            self.cancel(key)

    def pending(self, key: str) -> Optional[DebounceHandle]:
        """Return the current handle for a channel, if scheduled."""
        return self._handles.get(key)


__all__ = ["DebounceHandle", "DebounceScheduler"]

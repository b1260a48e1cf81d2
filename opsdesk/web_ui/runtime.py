"""NiceGUI runtime orchestration for the console.

This module composes settings, local storage and one :class:`AppController`
per browser client. It never imports NiceGUI so it can be exercised without a
running server.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import tempfile
import time
from typing import Any, Callable, Dict, Mapping, Optional

from opsdesk.adapters.resource_mock import ResourceApiMock, demo_records
from opsdesk.adapters.storage_local import STORAGE_ROOT_ENV, StorageLocal
from opsdesk.app.controller import AppController
from opsdesk.utils.logging import apply_debug_toggle, configure_root
from opsdesk.viewmodels.session_vm import SessionVM
from opsdesk.viewmodels.settings_vm import SettingsVM


LOGGER = logging.getLogger(__name__)

UPLOAD_DIR_NAME = "opsdesk_web_uploads"
DOWNLOAD_DIR_NAME = "opsdesk_web_downloads"
MAX_CLIENTS = 200
CLIENT_IDLE_TTL_S = 8 * 60 * 60


@dataclass
class ClientSession:
    """Per-browser state: its own controller (and cookie jar) plus the auth gate."""

    controller: AppController
    session_vm: SessionVM
    last_seen: float = 0.0


class WebRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(
        self,
        *,
        mock: bool = False,
        storage: Optional[StorageLocal] = None,
        max_clients: int = MAX_CLIENTS,
        idle_ttl_s: float = CLIENT_IDLE_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings_vm = SettingsVM()
        self.storage = storage or StorageLocal(root_dir=os.environ.get(STORAGE_ROOT_ENV) or ".")
        # Shared across clients so every browser sees the same demo data.
        self.backend: Optional[ResourceApiMock] = (
            ResourceApiMock(records=demo_records()) if mock else None
        )
        # Browser ids in least-recently-seen order; the oldest go first.
        self._clients: OrderedDict[str, ClientSession] = OrderedDict()
        self.max_clients = max(1, int(max_clients))
        self.idle_ttl_s = float(idle_ttl_s)
        self._clock = clock
        self._load_settings_defaults()
        configure_root()
        self._apply_logging()

    @property
    def is_mock(self) -> bool:
        return self.backend is not None

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------
    def client(self, client_id: str) -> ClientSession:
        """Return (creating on first use) the session state for one browser.

        Idle sessions are evicted first, then the least recently seen ones
        once more than ``max_clients`` browsers are tracked.
        """
        key = str(client_id)
        now = self._clock()
        self._evict_idle(now)
        session = self._clients.get(key)
        if session is None:
            controller = AppController(self.settings_vm, backend=self.backend)
            session = ClientSession(controller=controller, session_vm=controller.make_session_vm())
            controller.on_auth_lost = session.session_vm.expire
            self._clients[key] = session
            LOGGER.debug("New browser client %s (%d active)", key, len(self._clients))
        else:
            self._clients.move_to_end(key)
        session.last_seen = now
        while len(self._clients) > self.max_clients:
            oldest = next(iter(self._clients))
            LOGGER.info("Evicting browser client %s (limit %d)", oldest, self.max_clients)
            self.drop_client(oldest)
        return session

    def drop_client(self, client_id: str) -> None:
        session = self._clients.pop(str(client_id), None)
        if session is not None:
            session.controller.close()

    def client_count(self) -> int:
        return len(self._clients)

    def _evict_idle(self, now: float) -> None:
        for key, session in list(self._clients.items()):
            if now - session.last_seen <= self.idle_ttl_s:
                break
            LOGGER.debug("Dropping idle browser client %s", key)
            self.drop_client(key)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        """Validate, persist and apply settings; every client reconnects lazily.

        Raises:
            ValueError: The payload holds unknown keys or invalid values, or
                the resulting API URL is not http(s).
        """
        candidate = SettingsVM(config=self.settings_vm.config)
        candidate.debug_logging = self.settings_vm.debug_logging
        candidate.apply_dict(payload)
        if not candidate.is_valid():
            raise ValueError("API base URL must start with http:// or https://")

        self.settings_vm.apply_dict(candidate.to_dict())
        self.storage.save_user_prefs(self.settings_vm.to_dict())
        self._apply_logging()
        for session in self._clients.values():
            # Adapters are rebuilt, so cookies are gone: force a fresh check.
            session.controller.reset()
            session.session_vm.user = None
            session.session_vm.is_loading = True

    def export_settings_json(self) -> bytes:
        return json.dumps(self.settings_payload(), ensure_ascii=False, indent=2).encode("utf-8")

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def persist_upload(self, filename: str, content: bytes) -> Path:
        """Write a browser upload to a temp folder, keeping its base name."""
        folder = Path(tempfile.gettempdir()) / UPLOAD_DIR_NAME
        folder.mkdir(parents=True, exist_ok=True)
        target = folder / Path(filename or "upload.xlsx").name
        target.write_bytes(content)
        return target

    def download_dir(self) -> Path:
        folder = Path(tempfile.gettempdir()) / DOWNLOAD_DIR_NAME
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply_logging(self) -> None:
        level = apply_debug_toggle(self.settings_vm.debug_logging)
        LOGGER.debug("Root log level now %s", logging.getLevelName(level))

    def _load_settings_defaults(self) -> None:
        try:
            payload = self.storage.load_user_prefs()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not load local settings defaults: %s", exc)
            return
        try:
            self.settings_vm.apply_dict(payload)
        except ValueError as exc:
            LOGGER.warning("Could not apply local settings defaults: %s", exc)


__all__ = ["ClientSession", "WebRuntime"]

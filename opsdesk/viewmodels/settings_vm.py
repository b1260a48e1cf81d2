from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Mapping, Optional

from ..utils.logging import env_debug_requested

API_URL_ENV = "OPSDESK_API_URL"
DEFAULT_API_URL = "http://localhost:8000"


def _default_api_url() -> str:
    return (os.getenv(API_URL_ENV) or DEFAULT_API_URL).strip().rstrip("/")


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_base_url: str = ""
    api_prefix: str = "/api"
    request_timeout_s: int = 10
    search_debounce_ms: int = 500

    def __post_init__(self) -> None:
        if not self.api_base_url:
            self.api_base_url = _default_api_url()


class SettingsVM:
    """Keeps app settings UI state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = env_debug_requested()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url(value))

    @property
    def api_prefix(self) -> str:
        return self.config.api_prefix

    @api_prefix.setter
    def api_prefix(self, value: str) -> None:
        self.config = replace(self.config, api_prefix=self._coerce_prefix(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, minimum=1)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def search_debounce_ms(self) -> int:
        return self.config.search_debounce_ms

    @search_debounce_ms.setter
    def search_debounce_ms(self, value: int) -> None:
        coerced = self._coerce_int("search_debounce_ms", value, minimum=0)
        self.config = replace(self.config, search_debounce_ms=coerced)

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        url = self.api_base_url
        return url.startswith("http://") or url.startswith("https://")

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        if "api_base_url" in payload:
            self.api_base_url = payload["api_base_url"]
        if "api_prefix" in payload:
            self.api_prefix = payload["api_prefix"]
        if "request_timeout_s" in payload:
            self.request_timeout_s = payload["request_timeout_s"]
        if "search_debounce_ms" in payload:
            self.search_debounce_ms = payload["search_debounce_ms"]
        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_url(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string.")
        normalized = value.strip().rstrip("/")
        return normalized or _default_api_url()

    @staticmethod
    def _coerce_prefix(value: Any) -> str:
        if value is None:
            return ""
        cleaned = str(value).strip().strip("/")
        return f"/{cleaned}" if cleaned else ""

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: int = 0) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if coerced < minimum:
            raise ValueError(f"{name} must be at least {minimum}.")
        return coerced

"""Common plumbing for the Django REST adapters.

Every adapter talks to the same backend through one :class:`RetryingSession`
so the login cookie and CSRF token are shared. Subclasses only build URLs and
shape payloads; status handling and JSON decoding live here.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .api_errors import error_from_response
from .http_client import HttpConfig, RetryingSession

DEFAULT_API_PREFIX = "/api"


class RestAdapterBase:
    """Base URL handling, status mapping and JSON decoding for REST adapters."""

    def __init__(
        self,
        base_url: str,
        *,
        api_prefix: str = DEFAULT_API_PREFIX,
        request_timeout_s: int = 10,
        retries: int = 0,
        session: Optional[RetryingSession] = None,
    ) -> None:
        if not base_url or not str(base_url).strip():
            raise ValueError(f"{type(self).__name__} requires a base URL")
        self.base_url = str(base_url).strip().rstrip("/")
        prefix = str(api_prefix or "").strip().strip("/")
        self.api_prefix = f"/{prefix}" if prefix else ""
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = session or RetryingSession(self.cfg, csrf_url=self._make_url("/"))

    def close(self) -> None:
        """Close the shared session; sibling adapters lose it too."""
        self.session.close()

    def _make_url(self, path: str) -> str:
        """Join ``path`` under the API prefix, keeping DRF trailing slashes."""
        cleaned = "/" + str(path).strip("/")
        if cleaned == "/":
            return f"{self.base_url}{self.api_prefix}/"
        return f"{self.base_url}{self.api_prefix}{cleaned}/"

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        raise error_from_response(resp, ctx)

    @staticmethod
    def _json_any(resp: requests.Response) -> Any:
        """Decode a JSON body; an empty body (``204 No Content``) yields ``{}``."""
        if not getattr(resp, "content", b"") and not getattr(resp, "text", ""):
            return {}
        try:
            return resp.json()
        except ValueError:
            snippet = getattr(resp, "text", "")[:400]
            raise RuntimeError(f"Invalid JSON response: {snippet}")

    @classmethod
    def _json_dict(cls, resp: requests.Response, ctx: str) -> Dict[str, Any]:
        data = cls._json_any(resp)
        if not isinstance(data, dict):
            raise RuntimeError(f"{ctx}: expected object response")
        return data


__all__ = ["DEFAULT_API_PREFIX", "RestAdapterBase"]

"""Shared HTTP transport utilities for REST adapters.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations share timeout policy, optional retry behavior, session
cookies, and the Django CSRF header.

Dependencies:
    - ``requests`` for network I/O and the cookie jar.
    - ``opsdesk.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by ``ResourceRestAdapter``, ``AuthRestAdapter`` and
      ``ProfileRestAdapter``; one session per adapter process so the login
      cookie is shared by every call.
    - Used only inside adapter layer methods; use cases interact through ports.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests import exceptions as req_exc

from opsdesk.adapters.api_errors import ApiTimeoutError

LOGGER = logging.getLogger(__name__)

CSRF_COOKIE = "csrftoken"
CSRF_HEADER = "X-CSRFToken"


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for JSON API calls.
        download_timeout_s: Default timeout in seconds for file transfers.
        retries: Number of retry attempts after the initial request. User
            actions are never retried by default.
    """
    request_timeout_s: int = 10
    download_timeout_s: int = 60
    retries: int = 0


class RetryingSession:
    """Shared requests wrapper with CSRF headers and retry loops.

    This class is transport-only. Callers provide endpoint URLs and decide how
    to map non-2xx responses into domain/use-case errors.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        csrf_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a session.

        Args:
            cfg: Shared timeout and retry settings.
            csrf_url: Endpoint fetched once to obtain the ``csrftoken`` cookie
                when a mutating request finds none in the jar.
            session: Existing ``requests.Session`` to share cookies with.
        """
        self.session = session or requests.Session()
        self.cfg = cfg
        self.csrf_url = csrf_url

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    def csrf_token(self) -> Optional[str]:
        """Return the CSRF cookie value, priming it from ``csrf_url`` once."""
        token = self.session.cookies.get(CSRF_COOKIE)
        if token or not self.csrf_url:
            return token
        try:
            self.session.get(self.csrf_url, timeout=self.cfg.request_timeout_s)
        except (req_exc.Timeout, req_exc.ConnectionError):
            LOGGER.debug("CSRF priming request to %s failed", self.csrf_url, exc_info=True)
            return None
        return self.session.cookies.get(CSRF_COOKIE)

    def _headers(
        self,
        accept: str = "application/json",
        json_body: bool = False,
        mutating: bool = False,
    ) -> Dict[str, str]:
        """Build request headers for adapter calls.

        Args:
            accept: ``Accept`` header value expected by the caller.
            json_body: Whether to add ``Content-Type: application/json``.
            mutating: Whether to attach the CSRF header.
        """
        headers = {"Accept": accept}
        if json_body:
            headers["Content-Type"] = "application/json"
        if mutating:
            token = self.csrf_token()
            if token:
                headers[CSRF_HEADER] = token
        return headers

    def _attempt(self, context: str, url: str, send: Callable[[], requests.Response]) -> requests.Response:
        last_err: ApiTimeoutError | None = None
        attempts = max(0, self.cfg.retries) + 1
        for attempt in range(attempts):
            try:
                return send()
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                LOGGER.debug("%s failed (attempt %d/%d): %s", context, attempt + 1, attempts, exc)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err

    # ------------------------------------------------------------------
    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a GET request.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        return self._attempt(
            f"GET {url}",
            url,
            lambda: self.session.get(
                url,
                params=params,
                headers=self._headers(accept=accept),
                timeout=timeout or self.cfg.request_timeout_s,
            ),
        )

    def _send_json(
        self,
        method: str,
        url: str,
        json_body: Optional[Dict[str, Any]],
        timeout: Optional[int],
    ) -> requests.Response:
        data = None if json_body is None else json.dumps(json_body)
        return self._attempt(
            f"{method} {url}",
            url,
            lambda: self.session.request(
                method,
                url,
                data=data,
                headers=self._headers(json_body=json_body is not None, mutating=True),
                timeout=timeout or self.cfg.request_timeout_s,
            ),
        )

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a JSON POST request with the CSRF header."""
        return self._send_json("POST", url, json_body, timeout)

    def patch(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a JSON PATCH request with the CSRF header."""
        return self._send_json("PATCH", url, json_body, timeout)

    def delete(self, url: str, *, timeout: Optional[int] = None) -> requests.Response:
        """Send a DELETE request with the CSRF header."""
        return self._send_json("DELETE", url, None, timeout)

    def post_multipart(
        self,
        url: str,
        *,
        files: Dict[str, Any],
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a multipart POST request with retry-safe file handle rewinds.

        Side Effects:
            Seeks file handles to offset ``0`` before each attempt so a retry
            never sends a partial upload.
        """

        def _send() -> requests.Response:
            for value in files.values():
                handle = None
                if hasattr(value, "seek"):
                    handle = value
                elif isinstance(value, tuple) and len(value) >= 2:
                    candidate = value[1]
                    if hasattr(candidate, "seek"):
                        handle = candidate
                if handle is not None:
                    handle.seek(0)
            return self.session.post(
                url,
                files=files,
                headers=self._headers(accept="application/json", mutating=True),
                timeout=timeout or self.cfg.download_timeout_s,
            )

        return self._attempt(f"POST {url}", url, _send)


__all__ = ["CSRF_COOKIE", "CSRF_HEADER", "HttpConfig", "RetryingSession"]

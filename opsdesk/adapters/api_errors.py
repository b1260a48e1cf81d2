"""Typed failures raised by the REST adapters and helpers to read DRF error bodies.

Django REST Framework reports problems in a handful of shapes:

* ``{"detail": "Not found."}`` for permission, auth and lookup errors,
* ``{"field": ["msg", ...], "non_field_errors": [...]}`` for validation,
* ``{"error": "..."}`` or ``{"message": "..."}`` from custom views,
* an HTML page when a proxy or the debug server answers instead.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

# Keys carrying a human message rather than a field name, in lookup order.
MESSAGE_KEYS = ("detail", "message", "error", "non_field_errors")
_META_KEYS = ("code", "error_code", "success", "status")
_SNIPPET_LIMIT = 400
_TEXT_LIMIT = 200


class ApiError(RuntimeError):
    """Base class for REST adapter failures.

    ``payload`` is the decoded error body (or a text snippet) and ``context``
    names the adapter call, e.g. ``create[contract-workers]``.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.context = context

    @property
    def server_message(self) -> Optional[str]:
        """Human text supplied by the backend, if any."""
        return server_text(self.payload)

    @property
    def field_errors(self) -> List[str]:
        return field_error_lines(self.payload)


class ApiClientError(ApiError):
    """HTTP 4xx from the backend (validation, auth, missing record)."""


class ApiServerError(ApiError):
    """HTTP 5xx from the backend."""


class ApiTimeoutError(ApiError):
    """The backend could not be reached or did not answer in time."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


def error_from_response(resp: Any, ctx: str) -> ApiError:
    """Build the typed error for a non-2xx response."""
    status = int(resp.status_code)
    payload = read_error_body(resp)
    detail = server_text(payload)
    message = f"{ctx}: {detail} (HTTP {status})" if detail else f"{ctx}: HTTP {status}"
    if 400 <= status < 500:
        return ApiClientError(message, status=status, payload=payload, context=ctx)
    if status >= 500:
        return ApiServerError(message, status=status, payload=payload, context=ctx)
    return ApiError(message, status=status, payload=payload, context=ctx)


def read_error_body(resp: Any) -> Any:
    """Decoded JSON body, else a text snippet, else None. Never raises."""
    try:
        return resp.json()
    except ValueError:
        snippet = getattr(resp, "text", "") or ""
        return snippet[:_SNIPPET_LIMIT] or None


def server_text(payload: Any) -> Optional[str]:
    """First human-readable message in an error body.

    HTML error pages are not user-presentable and yield None.
    """
    if isinstance(payload, str):
        text = payload.strip()
        if not text or text.startswith("<"):
            return None
        return text
    if isinstance(payload, list):
        for item in payload:
            found = server_text(item)
            if found:
                return found
        return None
    if isinstance(payload, Mapping):
        for key in MESSAGE_KEYS:
            found = server_text(payload.get(key))
            if found:
                return found
    return None


def field_error_lines(payload: Any) -> List[str]:
    """Flatten a DRF validation body into ``"field: message"`` lines.

    ``{"email": ["Enter a valid email address."]}`` becomes
    ``["email: Enter a valid email address."]``. Message and meta keys are
    skipped; nested serializers are joined with a dot.
    """
    if not isinstance(payload, Mapping):
        return []
    lines: List[str] = []
    for key, value in payload.items():
        if key in MESSAGE_KEYS or key in _META_KEYS:
            continue
        if isinstance(value, Mapping):
            lines.extend(f"{key}.{line}" for line in field_error_lines(value))
            continue
        text = _messages_text(value)
        if text:
            lines.append(f"{key}: {text}")
    return lines


def _messages_text(value: Any) -> Optional[str]:
    """Join up to three messages of one field with ``; ``."""
    if value is None:
        return None
    items = value if isinstance(value, list) else [value]
    parts = [str(item).strip() for item in items if item is not None and str(item).strip()]
    if not parts:
        return None
    return "; ".join(parts[:3])[:_TEXT_LIMIT]


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "MESSAGE_KEYS",
    "error_from_response",
    "field_error_lines",
    "read_error_body",
    "server_text",
]

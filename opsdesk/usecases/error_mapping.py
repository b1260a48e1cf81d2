"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from opsdesk.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    field_error_lines,
    server_text,
)
from opsdesk.domain.ports import UseCaseError

_VALIDATION_STATUSES = (400, 422)


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    ``default_message`` is the generic text for the action ("Failed to load
    tenders"); it is used whenever the backend did not supply anything more
    specific, and transport failures append the caught error's text to it.
    """
    if isinstance(exc, UseCaseError):
        return exc
    generic = default_message or "Request failed"
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", _compose_error_message(generic, str(exc)))
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        payload = exc.payload
        text = server_text(payload)
        if status in _VALIDATION_STATUSES:
            lines = field_error_lines(payload)
            if lines:
                return UseCaseError("INVALID_PARAMS", "\n".join(lines), meta={"fields": lines})
            return UseCaseError("INVALID_PARAMS", text or _compose_error_message(generic, None))
        if status in (401, 403):
            return UseCaseError("AUTH_FAILED", text or "Authentication required.")
        if status == 404:
            return UseCaseError("NOT_FOUND", _compose_error_message(generic, None))
        if text:
            return UseCaseError("REQUEST_FAILED", text)
        label = f"{generic} (HTTP {status})" if status else generic
        return UseCaseError("REQUEST_FAILED", _compose_error_message(label, None))
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", server_text(exc.payload) or "Server error, try again.")
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))
    if isinstance(exc, ValueError):
        return UseCaseError("INVALID_INPUT", str(exc) or generic)

    return UseCaseError(default_code, _compose_error_message(generic, str(exc)))


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    """Compose a user-facing error message with optional hint text."""
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


__all__ = ["map_api_error"]

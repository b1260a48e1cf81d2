from __future__ import annotations

import pytest

from opsdesk.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from opsdesk.domain.ports import UseCaseError
from opsdesk.usecases.error_mapping import map_api_error


def _map(exc: Exception) -> UseCaseError:
    return map_api_error(exc, default_code="LIST_FAILED", default_message="Failed to load tenders")


def test_use_case_errors_pass_through() -> None:
    original = UseCaseError("NO_SELECTION", "Pick one")

    assert _map(original) is original


def test_timeout_appends_transport_text() -> None:
    err = _map(ApiTimeoutError("Read timed out"))

    assert err.code == "REQUEST_TIMEOUT"
    assert err.message == "Failed to load tenders: Read timed out"


@pytest.mark.parametrize("status", [400, 422])
def test_validation_without_fields_uses_server_text(status: int) -> None:
    err = _map(ApiClientError("x", status=status, payload={"detail": "Bad filter"}))

    assert err.code == "INVALID_PARAMS"
    assert err.message == "Bad filter"


def test_validation_joins_field_lines() -> None:
    payload = {"email": ["Taken."], "phone_number": ["Too long."]}

    err = _map(ApiClientError("x", status=400, payload=payload))

    assert err.message == "email: Taken.\nphone_number: Too long."
    assert err.meta["fields"] == ["email: Taken.", "phone_number: Too long."]


@pytest.mark.parametrize(
    "payload, message",
    [({"detail": "Session expired"}, "Session expired"), (None, "Authentication required.")],
)
def test_auth_failures(payload, message) -> None:
    err = _map(ApiClientError("x", status=401, payload=payload))

    assert err.code == "AUTH_FAILED"
    assert err.message == message


def test_other_client_errors() -> None:
    assert _map(ApiClientError("x", status=404)).message == "Failed to load tenders."
    assert _map(ApiClientError("x", status=409, payload={"error": "Locked"})).message == "Locked"

    err = _map(ApiClientError("x", status=409))
    assert err.code == "REQUEST_FAILED"
    assert err.message == "Failed to load tenders (HTTP 409)."


def test_server_and_generic_errors() -> None:
    assert _map(ApiServerError("x", status=503, payload={"detail": "Maintenance"})).message == "Maintenance"
    assert _map(ApiError("odd")).code == "API_ERROR"
    assert _map(ValueError("Client name is required.")).code == "INVALID_INPUT"

    err = _map(RuntimeError("socket closed"))
    assert err.code == "LIST_FAILED"
    assert err.message == "Failed to load tenders: socket closed"

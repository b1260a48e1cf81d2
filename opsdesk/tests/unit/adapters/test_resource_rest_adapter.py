from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from opsdesk.adapters.api_errors import ApiClientError, ApiServerError
from opsdesk.adapters.auth_rest import AuthRestAdapter, ProfileRestAdapter
from opsdesk.adapters.resource_rest import SPREADSHEET_MIME, ResourceRestAdapter


class _ResponseStub:
    def __init__(self, payload: Any = None, status_code: int = 200, content: Optional[bytes] = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = "" if payload is None else str(payload)
        self.content = content if content is not None else (b"" if payload is None else b"x")

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


class _SessionStub:
    """Stands in for ``RetryingSession``; returns queued responses in order."""

    def __init__(self, responses: Sequence[_ResponseStub]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def _next(self, **call: Any) -> _ResponseStub:
        self.calls.append(call)
        if not self._responses:
            raise RuntimeError("No stub response configured")
        return self._responses.pop(0)

    def get(self, url: str, *, params=None, accept="application/json", timeout=None):
        return self._next(method="GET", url=url, params=params, accept=accept, timeout=timeout)

    def post(self, url: str, *, json_body=None, timeout=None):
        return self._next(method="POST", url=url, json_body=json_body)

    def patch(self, url: str, *, json_body=None, timeout=None):
        return self._next(method="PATCH", url=url, json_body=json_body)

    def delete(self, url: str, *, timeout=None):
        return self._next(method="DELETE", url=url)

    def post_multipart(self, url: str, *, files, timeout=None):
        name, _handle, mime = files["file"]
        return self._next(method="MULTIPART", url=url, filename=name, mime=mime)


def _adapter(*responses: _ResponseStub) -> tuple[ResourceRestAdapter, _SessionStub]:
    adapter = ResourceRestAdapter("http://backend.local/", api_prefix="api")
    stub = _SessionStub(responses)
    adapter.session = stub  # type: ignore[assignment]
    return adapter, stub


def test_requires_base_url() -> None:
    with pytest.raises(ValueError):
        ResourceRestAdapter("  ")


def test_list_builds_trailing_slash_url_and_passes_params() -> None:
    adapter, stub = _adapter(_ResponseStub({"results": [{"id": 1}], "count": 1}))

    data = adapter.list("contract-workers", {"search": "John", "page": 1})

    assert data["count"] == 1
    assert stub.calls[0]["url"] == "http://backend.local/api/contract-workers/"
    assert stub.calls[0]["params"] == {"search": "John", "page": 1}


def test_list_wraps_bare_array() -> None:
    adapter, _ = _adapter(_ResponseStub([{"id": 1}, {"id": 2}]))

    assert adapter.list("firms", {"page": 1}) == {"results": [{"id": 1}, {"id": 2}], "count": 2}


def test_detail_update_and_delete_urls() -> None:
    adapter, stub = _adapter(
        _ResponseStub({"id": 5}),
        _ResponseStub({"id": 5, "status": "Active"}),
        _ResponseStub(None, status_code=204),
    )

    adapter.retrieve("amcs", 5)
    adapter.update("amcs", "5", {"status": "Active"})
    adapter.delete("amcs", 5)

    assert [call["method"] for call in stub.calls] == ["GET", "PATCH", "DELETE"]
    assert all(call["url"] == "http://backend.local/api/amcs/5/" for call in stub.calls)
    assert stub.calls[1]["json_body"] == {"status": "Active"}


def test_statistics_and_actions() -> None:
    adapter, stub = _adapter(
        _ResponseStub({"total": 3}),
        _ResponseStub({"status": "approved"}),
        _ResponseStub({"approved_count": 2}),
    )

    assert adapter.statistics("tasks", {"filter": "today"}) == {"total": 3}
    adapter.action("tasks", "approve", record_id=9)
    adapter.action("tasks", "bulk-approve", body={"task_ids": [1, 2]})

    assert stub.calls[0]["url"] == "http://backend.local/api/tasks/statistics/"
    assert stub.calls[0]["params"] == {"filter": "today"}
    assert stub.calls[1]["url"] == "http://backend.local/api/tasks/9/approve/"
    assert stub.calls[1]["json_body"] == {}
    assert stub.calls[2]["url"] == "http://backend.local/api/tasks/bulk-approve/"
    assert stub.calls[2]["json_body"] == {"task_ids": [1, 2]}


def test_billing_and_dashboard_urls() -> None:
    adapter, stub = _adapter(
        _ResponseStub({"id": 12, "paid": True}),
        _ResponseStub({"total_clients": 4}),
    )

    assert adapter.update_billing(12, {"paid": True})["paid"] is True
    assert adapter.dashboard() == {"total_clients": 4}

    assert stub.calls[0]["method"] == "PATCH"
    assert stub.calls[0]["url"] == "http://backend.local/api/amc-billings/12/"
    assert stub.calls[0]["json_body"] == {"paid": True}
    assert stub.calls[1]["url"] == "http://backend.local/api/dashboard/stats/"


def test_missing_billing_is_client_error() -> None:
    adapter, _ = _adapter(_ResponseStub({"detail": "Not found."}, status_code=404))

    with pytest.raises(ApiClientError) as info:
        adapter.update_billing(99, {"paid": False})

    assert info.value.status == 404
    assert info.value.context == "update_billing[99]"


def test_validation_error_is_typed_client_error() -> None:
    adapter, _ = _adapter(_ResponseStub({"email": ["Enter a valid email address."]}, status_code=400))

    with pytest.raises(ApiClientError) as info:
        adapter.create("contract-workers", {"email": "x"})

    assert info.value.status == 400
    assert info.value.field_errors == ["email: Enter a valid email address."]
    assert info.value.context == "create[contract-workers]"


def test_server_error_is_typed() -> None:
    adapter, _ = _adapter(_ResponseStub("<html>boom</html>", status_code=502))

    with pytest.raises(ApiServerError) as info:
        adapter.list("tenders", {"page": 1})

    assert info.value.server_message is None


def test_bulk_upload_posts_spreadsheet(tmp_path: Path) -> None:
    sheet = tmp_path / "workers.xlsx"
    sheet.write_bytes(b"PK")
    adapter, stub = _adapter(_ResponseStub({"success_count": 1, "failed_count": 0, "errors": []}))

    result = adapter.bulk_upload("contract-workers", sheet)

    assert result["success_count"] == 1
    assert stub.calls[0]["url"] == "http://backend.local/api/contract-workers/bulk-upload/"
    assert stub.calls[0]["filename"] == "workers.xlsx"
    assert stub.calls[0]["mime"] == SPREADSHEET_MIME


def test_bulk_upload_missing_file(tmp_path: Path) -> None:
    adapter, stub = _adapter()

    with pytest.raises(FileNotFoundError):
        adapter.bulk_upload("contract-workers", tmp_path / "missing.xlsx")
    assert stub.calls == []


def test_download_template_returns_bytes() -> None:
    adapter, stub = _adapter(_ResponseStub({}, content=b"PK\x03\x04"))

    assert adapter.download_template("contract-workers") == b"PK\x03\x04"
    assert stub.calls[0]["url"] == "http://backend.local/api/contract-workers/template/"
    assert stub.calls[0]["accept"] == SPREADSHEET_MIME


def test_auth_and_profile_endpoints() -> None:
    auth = AuthRestAdapter("http://backend.local")
    profile = ProfileRestAdapter("http://backend.local")
    stub = _SessionStub(
        [
            _ResponseStub({"user": {"id": 1}}),
            _ResponseStub({"user": {"id": 1}}),
            _ResponseStub(None, status_code=204),
            _ResponseStub({"id": 1}),
            _ResponseStub({"id": 1, "city": "Pune"}),
        ]
    )
    auth.session = stub  # type: ignore[assignment]
    profile.session = stub  # type: ignore[assignment]

    auth.login("owner", "pw", True)
    auth.current_user()
    auth.logout()
    profile.get_profile()
    profile.update_profile({"city": "Pune"})

    assert [call["url"] for call in stub.calls] == [
        "http://backend.local/api/authentication/owner/login/",
        "http://backend.local/api/authentication/user/",
        "http://backend.local/api/authentication/logout/",
        "http://backend.local/api/profile/",
        "http://backend.local/api/profile/",
    ]
    assert stub.calls[0]["json_body"] == {"login_identifier": "owner", "password": "pw", "remember_me": True}
    assert stub.calls[4]["method"] == "PATCH"

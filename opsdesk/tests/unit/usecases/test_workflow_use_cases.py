from __future__ import annotations

from pathlib import Path

import pytest

from opsdesk.adapters.resource_mock import ResourceApiMock
from opsdesk.domain.ports import UseCaseError
from opsdesk.usecases.profile import LoadProfile, UpdateProfile
from opsdesk.usecases.review_tasks import ApproveTask, BulkApproveTasks, BulkDeleteTasks, RejectTask
from opsdesk.usecases.session import LoadCurrentUser, Login, Logout
from opsdesk.usecases.worker_spreadsheets import TEMPLATE_FILENAME, BulkImportWorkers, DownloadWorkerTemplate


@pytest.fixture
def backend() -> ResourceApiMock:
    mock = ResourceApiMock()
    mock.seed(
        "tasks",
        [
            {"id": 1, "task_name": "Inspect", "approval_status": "pending"},
            {"id": 2, "task_name": "Paint", "approval_status": "pending"},
            {"id": 3, "task_name": "Clean", "approval_status": "pending"},
        ],
    )
    return mock


# ---------- Spreadsheets ----------


def test_bulk_import_rejects_non_excel_before_upload(backend, tmp_path: Path) -> None:
    sheet = tmp_path / "workers.csv"
    sheet.write_text("a,b")

    with pytest.raises(UseCaseError) as info:
        BulkImportWorkers(backend)(sheet)

    assert info.value.code == "BULK_FILE_INVALID"
    assert backend.calls == []


def test_bulk_import_missing_file(backend, tmp_path: Path) -> None:
    with pytest.raises(UseCaseError) as info:
        BulkImportWorkers(backend)(tmp_path / "gone.xlsx")

    assert info.value.code == "BULK_FILE_NOT_FOUND"


def test_bulk_import_maps_result(backend, tmp_path: Path) -> None:
    sheet = tmp_path / "Workers.XLSX"
    sheet.write_bytes(b"PK")
    backend.upload_result = {"success_count": 4, "failed_count": 1, "errors": [{"row": 6, "error": "Bad email"}]}

    result = BulkImportWorkers(backend)(sheet)

    assert result.success_count == 4
    assert result.failed_count == 1
    assert result.errors == ("Row 6: Bad email",)
    assert backend.calls_for("bulk_upload") == [("bulk_upload", "contract-workers", str(sheet))]


def test_template_download_writes_file(backend, tmp_path: Path) -> None:
    target = DownloadWorkerTemplate(backend)(tmp_path / "downloads")

    assert target == tmp_path / "downloads" / TEMPLATE_FILENAME
    assert target.read_bytes().startswith(b"PK")


# ---------- Task review ----------


def test_approve_and_reject(backend) -> None:
    ApproveTask(backend)(1)
    RejectTask(backend)(2, "  Incomplete photos ")

    rows = {row["id"]: row for row in backend.records["tasks"]}
    assert rows[1]["approval_status"] == "approved"
    assert rows[2]["approval_status"] == "rejected"
    assert backend.calls[-1][2] == ("reject", 2, {"reason": "Incomplete photos"})


def test_reject_requires_reason(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        RejectTask(backend)(2, "   ")

    assert info.value.code == "REASON_REQUIRED"
    assert backend.calls == []


def test_bulk_actions_dedupe_ids(backend) -> None:
    approved = BulkApproveTasks(backend)(["1", 1, 2])
    deleted = BulkDeleteTasks(backend)([3])

    assert approved.processed_count == 2
    assert deleted.processed_count == 1
    assert backend.calls_for("action")[0][2] == ("bulk-approve", None, {"task_ids": [1, 2]})
    assert [row["id"] for row in backend.records["tasks"]] == [1, 2]


def test_bulk_actions_need_selection(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        BulkDeleteTasks(backend)([])

    assert info.value.code == "NO_SELECTION"


def test_approve_missing_task_is_not_found(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        ApproveTask(backend)(42)

    assert info.value.code == "NOT_FOUND"
    assert info.value.message == "Failed to approve task."


# ---------- Session ----------


def test_login_requires_both_fields(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        Login(backend)("  ", "secret")

    assert info.value.code == "CREDENTIALS_REQUIRED"
    assert backend.calls == []


def test_login_failure_uses_server_text(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        Login(backend)("owner", "wrong")

    assert info.value.code == "AUTH_FAILED"
    assert info.value.message == "Invalid credentials"


def test_login_current_user_logout(backend) -> None:
    user = Login(backend)(" owner ", "owner123", True)
    assert user.username == "owner"
    assert user.is_authorized

    assert LoadCurrentUser(backend)().email == "owner@example.com"

    Logout(backend)()
    with pytest.raises(UseCaseError) as info:
        LoadCurrentUser(backend)()
    assert info.value.code == "AUTH_FAILED"


# ---------- Profile ----------


def test_profile_load_and_update(backend) -> None:
    assert LoadProfile(backend)().username == "owner"

    updated = UpdateProfile(backend)({"username": "owner", "city": "Pune"})

    assert updated.city == "Pune"
    assert backend.calls_for("update_profile")[0][2]["city"] == "Pune"


def test_profile_password_mismatch_is_validation_error(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        UpdateProfile(backend)(
            {"current_password": "a", "new_password": "abcdef", "confirm_password": "abcxyz"}
        )

    assert info.value.code == "VALIDATION_ERROR"
    assert "do not match" in info.value.message
    assert backend.calls_for("update_profile") == []


def test_partial_import_keeps_each_row_error(backend, tmp_path: Path) -> None:
    sheet = tmp_path / "workers.xls"
    sheet.write_bytes(b"\xd0\xcf")
    backend.upload_result = {
        "success_count": 10,
        "failed_count": 2,
        "errors": [{"row": 4, "error": "Duplicate Aadhar"}, {"row": 9, "error": "Missing email"}],
    }

    result = BulkImportWorkers(backend)(sheet)

    assert (result.success_count, result.failed_count) == (10, 2)
    assert result.errors == ("Row 4: Duplicate Aadhar", "Row 9: Missing email")

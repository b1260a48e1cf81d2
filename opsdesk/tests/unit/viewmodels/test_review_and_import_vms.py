from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

from opsdesk.domain.entities import BulkActionResult, BulkUploadResult, ResourcePage, Task
from opsdesk.domain.ports import UseCaseError
from opsdesk.viewmodels.tasks_vm import TaskListVM
from opsdesk.viewmodels.workers_vm import ContractWorkerListVM, summarize_upload_errors


class Recorder:
    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.alerts: List[Tuple[str, str, str]] = []

    def alert(self, title: str, message: str, level: str) -> None:
        self.alerts.append((title, message, level))

    def fetch_page(self, spec, query) -> ResourcePage:
        self.calls.append(("list", query.page))
        return ResourcePage(items=(Task(id=1), Task(id=2), Task(id=3)), count=3, total_pages=1)

    def statistics(self, spec, query):
        self.calls.append(("statistics",))
        return {}

    def kinds(self) -> List[str]:
        return [call[0] for call in self.calls]


# ---------- Contract workers ----------


def _workers_vm(rec: Recorder, result: BulkUploadResult | Exception) -> ContractWorkerListVM:
    def bulk_import(path):
        rec.calls.append(("bulk_import", str(path)))
        if isinstance(result, Exception):
            raise result
        return result

    return ContractWorkerListVM(
        fetch_page=rec.fetch_page,
        fetch_statistics=rec.statistics,
        bulk_import=bulk_import,
        download_template=lambda target: Path(target) / "contract_workers_template.xlsx",
        on_alert=rec.alert,
    )


def test_upload_errors_are_capped_at_ten_lines() -> None:
    errors = tuple(f"Row {n}: bad" for n in range(2, 14))
    text = summarize_upload_errors(BulkUploadResult(success_count=0, failed_count=12, errors=errors))

    lines = text.split("\n")
    assert len(lines) == 11
    assert lines[0] == "Row 2: bad"
    assert lines[-1] == "... and 2 more errors"


def test_partial_import_refetches_and_warns() -> None:
    rec = Recorder()
    errors = tuple(f"Row {n}: bad" for n in range(2, 14))
    vm = _workers_vm(rec, BulkUploadResult(success_count=5, failed_count=12, errors=errors))

    result = vm.bulk_import("/tmp/workers.xlsx")

    assert result is not None and vm.last_upload is result
    assert rec.kinds() == ["bulk_import", "list", "statistics"]
    assert rec.alerts[0] == ("Success", "Successfully imported 5 worker(s).", "success")
    title, message, level = rec.alerts[1]
    assert (title, level) == ("Import Warnings", "warning")
    assert message.startswith("12 row(s) failed to import.\nRow 2: bad")
    assert message.endswith("... and 2 more errors")
    assert vm.is_uploading is False


def test_import_with_no_successes_does_not_refetch() -> None:
    rec = Recorder()
    vm = _workers_vm(rec, BulkUploadResult(success_count=0, failed_count=1, errors=("Row 2: bad",)))

    vm.bulk_import("/tmp/workers.xlsx")

    assert rec.kinds() == ["bulk_import"]
    assert [alert[0] for alert in rec.alerts] == ["Import Warnings"]


def test_import_failure_alerts() -> None:
    rec = Recorder()
    vm = _workers_vm(rec, UseCaseError("BULK_FILE_INVALID", "Please select an Excel file (.xlsx or .xls)"))

    assert vm.bulk_import("/tmp/workers.csv") is None
    assert rec.alerts == [("Error", "Please select an Excel file (.xlsx or .xls)", "error")]
    assert vm.is_uploading is False


def test_template_download_alerts_success(tmp_path: Path) -> None:
    rec = Recorder()
    vm = _workers_vm(rec, BulkUploadResult())

    path = vm.download_template(tmp_path)

    assert path == tmp_path / "contract_workers_template.xlsx"
    assert rec.alerts == [("Success", "Template downloaded successfully.", "success")]


# ---------- Tasks ----------


def _tasks_vm(rec: Recorder, result: BulkActionResult | None = None) -> TaskListVM:
    def bulk(name):
        def run(ids):
            rec.calls.append((name, list(ids)))
            return result or BulkActionResult(processed_count=len(ids))

        return run

    return TaskListVM(
        fetch_page=rec.fetch_page,
        fetch_statistics=rec.statistics,
        approve=lambda task_id: rec.calls.append(("approve", task_id)),
        reject=lambda task_id, reason: rec.calls.append(("reject", task_id, reason)),
        bulk_approve=bulk("bulk_approve"),
        bulk_delete=bulk("bulk_delete"),
        on_alert=rec.alert,
    )


def test_reject_needs_reason() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)

    assert vm.reject(4, "  ") is False
    assert rec.calls == []
    assert rec.alerts == [("Validation Error", "Please provide a reason for rejection.", "warning")]


def test_approve_and_reject_refetch() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)

    assert vm.approve(4)
    assert vm.reject(5, "Blurry photo")

    assert rec.kinds() == ["approve", "list", "statistics", "reject", "list", "statistics"]
    assert rec.alerts[-1] == ("Success", "Task rejected successfully.", "success")


def test_bulk_approve_uses_selection_and_clears_it() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)
    vm.fetch_list()
    vm.select_all()
    vm.toggle_selected(2)
    rec.calls.clear()

    assert vm.bulk_approve(None, lambda _: True)

    assert rec.calls[0] == ("bulk_approve", [1, 3])
    assert vm.selected == set()
    assert rec.alerts[-1] == ("Success", "Successfully approved 2 task(s).", "success")


def test_bulk_actions_without_selection() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)

    assert vm.bulk_approve(None, lambda _: True) is False
    assert vm.bulk_delete(None, lambda _: True) is False
    assert [alert[0] for alert in rec.alerts] == ["No Selection", "No Selection"]
    assert rec.calls == []


def test_bulk_delete_confirms_with_count() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)
    asked: List[str] = []

    def decline(subject: str) -> bool:
        asked.append(subject)
        return False

    assert vm.bulk_delete([3, "1", 3], decline) is False
    assert asked == ["2 task(s)"]
    assert rec.calls == []

    assert vm.bulk_delete([3, 1], lambda _: True)
    assert rec.calls[0] == ("bulk_delete", [1, 3])


def test_bulk_approve_asks_before_sending() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec)
    asked: List[str] = []

    def decline(subject: str) -> bool:
        asked.append(subject)
        return False

    assert vm.bulk_approve([4, 5], decline) is False
    assert asked == ["2 task(s)"]
    assert rec.calls == []


def test_bulk_approve_reports_backend_counts_and_errors() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec, BulkActionResult(processed_count=1, errors=("Task 5 is already approved",)))

    assert vm.bulk_approve([4, 5], lambda _: True)

    assert rec.alerts == [
        ("Success", "Successfully approved 1 task(s). Errors: Task 5 is already approved", "success")
    ]


def test_bulk_delete_mentions_skipped_tasks() -> None:
    rec = Recorder()
    vm = _tasks_vm(rec, BulkActionResult(processed_count=1, skipped_count=1))

    assert vm.bulk_delete([1, 2], lambda _: True)

    assert rec.alerts[-1] == (
        "Success",
        "Successfully deleted 1 task(s). 1 task(s) were not found (may have been already deleted).",
        "success",
    )


def test_review_failure_alerts_without_refetch() -> None:
    rec = Recorder()

    def failing(task_id):
        raise UseCaseError("NOT_FOUND", "Failed to approve task.")

    vm = TaskListVM(fetch_page=rec.fetch_page, approve=failing, on_alert=rec.alert)

    assert vm.approve(9) is False
    assert rec.calls == []
    assert rec.alerts == [("Error", "Failed to approve task.", "error")]

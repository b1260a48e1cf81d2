"""Use cases for the task approval workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from opsdesk.domain.entities import BulkActionResult
from opsdesk.domain.mapping import map_bulk_action_result
from opsdesk.domain.ports import RecordId, ResourcePort, UseCaseError
from opsdesk.domain.resources import TASKS
from opsdesk.usecases.error_mapping import map_api_error


def _normalize_ids(task_ids: Iterable[RecordId]) -> List[int]:
    ids: List[int] = []
    for task_id in task_ids:
        value = int(task_id)
        if value not in ids:
            ids.append(value)
    if not ids:
        raise UseCaseError("NO_SELECTION", "Please select at least one task.")
    return ids


@dataclass
class ApproveTask:
    resource_port: ResourcePort

    def __call__(self, task_id: RecordId) -> None:
        try:
            self.resource_port.action(TASKS.path, "approve", record_id=task_id)
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="APPROVE_FAILED",
                default_message="Failed to approve task",
            ) from exc


@dataclass
class RejectTask:
    """Reject a task; the backend requires a reason."""

    resource_port: ResourcePort

    def __call__(self, task_id: RecordId, reason: str) -> None:
        text = (reason or "").strip()
        if not text:
            raise UseCaseError("REASON_REQUIRED", "Please provide a reason for rejection.")
        try:
            self.resource_port.action(TASKS.path, "reject", record_id=task_id, body={"reason": text})
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="REJECT_FAILED",
                default_message="Failed to reject task",
            ) from exc


@dataclass
class BulkApproveTasks:
    resource_port: ResourcePort

    def __call__(self, task_ids: Iterable[RecordId]) -> BulkActionResult:
        ids = _normalize_ids(task_ids)
        try:
            payload = self.resource_port.action(TASKS.path, "bulk-approve", body={"task_ids": ids})
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="BULK_APPROVE_FAILED",
                default_message="Failed to approve tasks",
            ) from exc
        return map_bulk_action_result(payload)


@dataclass
class BulkDeleteTasks:
    resource_port: ResourcePort

    def __call__(self, task_ids: Iterable[RecordId]) -> BulkActionResult:
        ids = _normalize_ids(task_ids)
        try:
            payload = self.resource_port.action(TASKS.path, "bulk-delete", body={"task_ids": ids})
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="BULK_DELETE_FAILED",
                default_message="Failed to delete tasks",
            ) from exc
        return map_bulk_action_result(payload)


__all__ = ["ApproveTask", "BulkApproveTasks", "BulkDeleteTasks", "RejectTask"]

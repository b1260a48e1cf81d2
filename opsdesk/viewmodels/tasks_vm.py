from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Set

from ..domain.entities import BulkActionResult
from ..domain.ports import RecordId, UseCaseError
from ..domain.resources import TASKS
from .list_vm import ConfirmFn, ResourceListVM

LOGGER = logging.getLogger(__name__)


class TaskListVM(ResourceListVM):
    """Task list with row selection and the approval workflow."""

    def __init__(
        self,
        *,
        approve: Optional[Callable[[RecordId], None]] = None,
        reject: Optional[Callable[[RecordId, str], None]] = None,
        bulk_approve: Optional[Callable[[Iterable[RecordId]], BulkActionResult]] = None,
        bulk_delete: Optional[Callable[[Iterable[RecordId]], BulkActionResult]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(TASKS, **kwargs)
        self._approve = approve
        self._reject = reject
        self._bulk_approve = bulk_approve
        self._bulk_delete = bulk_delete
        self.selected: Set[int] = set()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def toggle_selected(self, task_id: RecordId) -> None:
        key = int(task_id)
        if key in self.selected:
            self.selected.discard(key)
        else:
            self.selected.add(key)
        self._notify()

    def select_all(self, enabled: bool = True) -> None:
        self.selected = {item.id for item in self.items} if enabled else set()
        self._notify()

    def _resolve_ids(self, task_ids: Optional[Iterable[RecordId]]) -> List[int]:
        source = self.selected if task_ids is None else task_ids
        return sorted({int(task_id) for task_id in source})

    # ------------------------------------------------------------------
    # Review commands
    # ------------------------------------------------------------------
    def approve(self, task_id: RecordId) -> bool:
        approve = self._require(self._approve, "approve")
        return self._review(lambda: approve(task_id), "Task approved successfully.")

    def reject(self, task_id: RecordId, reason: str) -> bool:
        if not (reason or "").strip():
            self._alert("Validation Error", "Please provide a reason for rejection.", "warning")
            return False
        reject = self._require(self._reject, "reject")
        return self._review(lambda: reject(task_id, reason), "Task rejected successfully.")

    def bulk_approve(self, task_ids: Optional[Iterable[RecordId]], confirm: ConfirmFn) -> bool:
        ids = self._resolve_ids(task_ids)
        if not ids:
            self._alert("No Selection", "Please select at least one task to approve.", "warning")
            return False
        if not confirm(f"{len(ids)} task(s)"):
            return False
        return self._review(
            lambda: self._require(self._bulk_approve, "bulk approve")(ids),
            lambda result: bulk_summary("approved", result),
            clear_selection=True,
        )

    def bulk_delete(self, task_ids: Optional[Iterable[RecordId]], confirm: ConfirmFn) -> bool:
        ids = self._resolve_ids(task_ids)
        if not ids:
            self._alert("No Selection", "Please select at least one task to delete.", "warning")
            return False
        if not confirm(f"{len(ids)} task(s)"):
            return False
        return self._review(
            lambda: self._require(self._bulk_delete, "bulk delete")(ids),
            lambda result: bulk_summary("deleted", result),
            clear_selection=True,
        )

    @staticmethod
    def _require(fn: Optional[Callable[..., Any]], name: str) -> Callable[..., Any]:
        if fn is None:
            raise RuntimeError(f"tasks: {name} is not configured")
        return fn

    def _review(
        self,
        call: Callable[[], Any],
        success_message: str | Callable[[Any], str],
        *,
        clear_selection: bool = False,
    ) -> bool:
        try:
            result = call()
        except UseCaseError as err:
            LOGGER.error("tasks: review action failed: %s", err.message)
            self._alert("Error", err.message, "error")
            return False
        if clear_selection:
            self.selected = set()
        self.fetch_list()
        self.refresh_statistics()
        message = success_message(result) if callable(success_message) else success_message
        self._alert("Success", message, "success")
        return True


def bulk_summary(verb: str, result: BulkActionResult) -> str:
    """``Successfully approved 1 task(s). Errors: Task 5 is already approved``."""
    message = f"Successfully {verb} {result.processed_count} task(s)."
    if result.skipped_count > 0:
        message += f" {result.skipped_count} task(s) were not found (may have been already deleted)."
    if result.errors:
        message += f" Errors: {', '.join(result.errors)}"
    return message


__all__ = ["TaskListVM", "bulk_summary"]

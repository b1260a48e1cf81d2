from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from ..domain.entities import BulkUploadResult
from ..domain.ports import UseCaseError
from ..domain.resources import CONTRACT_WORKERS
from .list_vm import ResourceListVM

LOGGER = logging.getLogger(__name__)

MAX_LISTED_ERRORS = 10

BulkImportFn = Callable[[str | Path], BulkUploadResult]
DownloadTemplateFn = Callable[[str | Path], Path]


def summarize_upload_errors(result: BulkUploadResult, limit: int = MAX_LISTED_ERRORS) -> str:
    """Render the first ``limit`` row errors, one per line, plus an overflow note."""
    lines = list(result.errors[:limit])
    hidden = len(result.errors) - len(lines)
    if hidden > 0:
        lines.append(f"... and {hidden} more errors")
    return "\n".join(lines)


class ContractWorkerListVM(ResourceListVM):
    """Contract worker list with spreadsheet import and template download."""

    def __init__(
        self,
        *,
        bulk_import: Optional[BulkImportFn] = None,
        download_template: Optional[DownloadTemplateFn] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(CONTRACT_WORKERS, **kwargs)
        self._bulk_import = bulk_import
        self._download_template = download_template
        self.is_uploading: bool = False
        self.last_upload: Optional[BulkUploadResult] = None

    def bulk_import(self, file_path: str | Path) -> Optional[BulkUploadResult]:
        """Upload a worker sheet; refetch when any row was imported."""
        if self._bulk_import is None:
            raise RuntimeError("contract-workers: bulk import is not configured")
        self.is_uploading = True
        self._notify()
        try:
            result = self._bulk_import(file_path)
        except UseCaseError as err:
            LOGGER.error("Bulk upload failed: %s", err.message)
            self.is_uploading = False
            self._alert("Error", err.message, "error")
            self._notify()
            return None
        self.is_uploading = False
        self.last_upload = result
        LOGGER.info(
            "Bulk upload finished: %d imported, %d failed",
            result.success_count,
            result.failed_count,
        )

        if result.success_count > 0:
            self._alert(
                "Success",
                f"Successfully imported {result.success_count} worker(s).",
                "success",
            )
            self.fetch_list()
            self.refresh_statistics()
        if result.failed_count > 0:
            details = summarize_upload_errors(result)
            message = f"{result.failed_count} row(s) failed to import."
            if details:
                message = f"{message}\n{details}"
            self._alert("Import Warnings", message, "warning")
        self._notify()
        return result

    def download_template(self, target_dir: str | Path) -> Optional[Path]:
        if self._download_template is None:
            raise RuntimeError("contract-workers: template download is not configured")
        try:
            path = self._download_template(target_dir)
        except UseCaseError as err:
            LOGGER.error("Template download failed: %s", err.message)
            self._alert("Error", err.message, "error")
            return None
        self._alert("Success", "Template downloaded successfully.", "success")
        return path


__all__ = ["ContractWorkerListVM", "MAX_LISTED_ERRORS", "summarize_upload_errors"]

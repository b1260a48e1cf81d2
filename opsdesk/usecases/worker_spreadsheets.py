"""Use cases for the contract-worker spreadsheet import and its template."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from opsdesk.domain.entities import BulkUploadResult
from opsdesk.domain.mapping import map_bulk_upload_result
from opsdesk.domain.ports import ResourcePort, UseCaseError
from opsdesk.domain.resources import CONTRACT_WORKERS
from opsdesk.usecases.error_mapping import map_api_error

SPREADSHEET_SUFFIXES = (".xlsx", ".xls")
TEMPLATE_FILENAME = "contract_workers_template.xlsx"


@dataclass
class BulkImportWorkers:
    """Upload an Excel sheet of workers to ``bulk-upload``."""

    resource_port: ResourcePort

    def __call__(self, file_path: str | Path) -> BulkUploadResult:
        path = Path(file_path).expanduser()
        if path.suffix.lower() not in SPREADSHEET_SUFFIXES:
            raise UseCaseError("BULK_FILE_INVALID", "Please select an Excel file (.xlsx or .xls)")
        if not path.is_file():
            raise UseCaseError("BULK_FILE_NOT_FOUND", f"Upload file not found: {path}")

        try:
            payload = self.resource_port.bulk_upload(CONTRACT_WORKERS.path, path)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="BULK_UPLOAD_FAILED",
                default_message="Failed to upload file",
            ) from exc
        return map_bulk_upload_result(payload)


@dataclass
class DownloadWorkerTemplate:
    """Fetch the import template and write it into ``target_dir``."""

    resource_port: ResourcePort

    def __call__(self, target_dir: str | Path) -> Path:
        try:
            content = self.resource_port.download_template(CONTRACT_WORKERS.path)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="TEMPLATE_DOWNLOAD_FAILED",
                default_message="Failed to download template",
            ) from exc

        out_dir = Path(target_dir).expanduser()
        out_dir.mkdir(parents=True, exist_ok=True)
        target = out_dir / TEMPLATE_FILENAME
        target.write_bytes(content)
        return target


__all__ = ["BulkImportWorkers", "DownloadWorkerTemplate", "TEMPLATE_FILENAME"]

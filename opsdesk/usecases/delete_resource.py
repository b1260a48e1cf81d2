from __future__ import annotations

from dataclasses import dataclass

from opsdesk.domain.ports import RecordId, ResourcePort, UseCaseError
from opsdesk.domain.resources import ResourceSpec
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class DeleteResource:
    """Delete one record; confirmation is the caller's job."""

    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, record_id: RecordId) -> None:
        try:
            self.resource_port.delete(spec.path, record_id)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="DELETE_FAILED",
                default_message=f"Failed to delete {spec.singular}",
            ) from exc


__all__ = ["DeleteResource"]

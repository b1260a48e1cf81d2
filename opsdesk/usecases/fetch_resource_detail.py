from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from opsdesk.domain.ports import RecordId, ResourcePort, UseCaseError
from opsdesk.domain.resources import ResourceSpec
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class FetchResourceDetail:
    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, record_id: RecordId) -> Any:
        try:
            payload = self.resource_port.retrieve(spec.path, record_id)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="DETAIL_FAILED",
                default_message=f"Failed to load {spec.singular} details",
            ) from exc
        return spec.map_detail(payload)


__all__ = ["FetchResourceDetail"]

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from opsdesk.domain.ports import ResourcePort, UseCaseError
from opsdesk.domain.query import ListQuery
from opsdesk.domain.resources import ResourceSpec
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class FetchStatistics:
    """Load the aggregate tiles shown above a resource list."""

    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, query: ListQuery) -> Dict[str, Any]:
        if not spec.has_statistics:
            return {}
        try:
            payload = self.resource_port.statistics(spec.path, spec.stats_params(query))
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="STATISTICS_FAILED",
                default_message=f"Failed to load {spec.label.lower()} statistics",
            ) from exc
        return dict(payload) if isinstance(payload, dict) else {}


__all__ = ["FetchStatistics"]

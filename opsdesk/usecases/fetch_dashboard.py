from __future__ import annotations

from dataclasses import dataclass

from opsdesk.domain.entities import DashboardStats
from opsdesk.domain.mapping import map_dashboard_stats
from opsdesk.domain.ports import ResourcePort, UseCaseError
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class FetchDashboard:
    resource_port: ResourcePort

    def __call__(self) -> DashboardStats:
        try:
            payload = self.resource_port.dashboard()
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="DASHBOARD_FAILED",
                default_message="Failed to load dashboard data",
            ) from exc
        return map_dashboard_stats(payload)


__all__ = ["FetchDashboard"]

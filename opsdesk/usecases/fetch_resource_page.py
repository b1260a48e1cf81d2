"""Use case for fetching one page of a resource collection."""

from __future__ import annotations

from dataclasses import dataclass

from opsdesk.domain.entities import ResourcePage
from opsdesk.domain.mapping import extract_results
from opsdesk.domain.ports import ResourcePort, UseCaseError
from opsdesk.domain.query import ListQuery, to_params, total_pages
from opsdesk.domain.resources import ResourceSpec
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class FetchResourcePage:
    """Serialize the query, call the list endpoint and map every row."""

    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, query: ListQuery) -> ResourcePage:
        params = to_params(query, spec.filters)
        try:
            payload = self.resource_port.list(spec.path, params)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LIST_FAILED",
                default_message=f"Failed to load {spec.label.lower()}",
            ) from exc

        rows, count = extract_results(payload)
        return ResourcePage(
            items=tuple(spec.map_list_item(row) for row in rows),
            count=count,
            total_pages=total_pages(count),
        )


__all__ = ["FetchResourcePage"]

"""Registry describing each admin resource the console manages.

A :class:`ResourceSpec` is everything the generic list controller needs to
drive one page: the collection path, its filter dimensions, the mappers for
list rows and details, the payload builders, and whether statistics tiles
exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from . import mapping, payloads
from .query import FilterDimension, ListQuery

Mapper = Callable[[Any], Any]
Builder = Callable[[Mapping[str, Any]], Dict[str, Any]]
StatisticsParams = Callable[[ListQuery], Dict[str, Any]]


@dataclass(frozen=True)
class ResourceSpec:
    """Static description of one collection endpoint."""

    key: str
    path: str
    label: str
    singular: str
    map_list_item: Mapper
    map_detail: Mapper
    build_create: Builder
    build_update: Builder
    filters: Tuple[FilterDimension, ...] = ()
    has_statistics: bool = False
    statistics_params: Optional[StatisticsParams] = None

    def dimension(self, name: str) -> FilterDimension:
        for dim in self.filters:
            if dim.name == name:
                return dim
        known = ", ".join(dim.name for dim in self.filters) or "none"
        raise ValueError(f"Unknown filter '{name}' for {self.key}; known filters: {known}.")

    def stats_params(self, query: ListQuery) -> Dict[str, Any]:
        if self.statistics_params is None:
            return {}
        return self.statistics_params(query)


def _task_statistics_params(query: ListQuery) -> Dict[str, Any]:
    period = query.filter_value("date_filter")
    return {} if period == "all" else {"filter": period}


CONTRACT_WORKERS = ResourceSpec(
    key="contract-workers",
    path="contract-workers",
    label="Contract Workers",
    singular="contract worker",
    map_list_item=mapping.map_worker_list_item,
    map_detail=mapping.map_worker_detail,
    build_create=payloads.build_worker_create,
    build_update=payloads.build_worker_update,
    filters=(
        FilterDimension("worker_type", payloads.WORKER_TYPES, label="Worker type"),
        FilterDimension("availability", ("assigned", "available"), label="Availability"),
    ),
    has_statistics=True,
)

AMCS = ResourceSpec(
    key="amcs",
    path="amcs",
    label="AMCs",
    singular="AMC",
    map_list_item=mapping.map_amc_list_item,
    map_detail=mapping.map_amc_detail,
    build_create=payloads.build_amc_create,
    build_update=payloads.build_amc_update,
    filters=(
        FilterDimension("status", payloads.AMC_STATUSES, label="Status"),
        FilterDimension("billing_cycle", payloads.AMC_BILLING_CYCLES, label="Billing cycle"),
        FilterDimension("expiring_days", ("7", "15", "30"), label="Expiring within (days)"),
    ),
    has_statistics=True,
)

FIRMS = ResourceSpec(
    key="firms",
    path="firms",
    label="Firms",
    singular="firm",
    map_list_item=mapping.map_firm,
    map_detail=mapping.map_firm,
    build_create=payloads.build_firm_body,
    build_update=payloads.build_firm_body,
    filters=(FilterDimension("firm_type", payloads.FIRM_TYPES, label="Firm type"),),
)

BANK_ACCOUNTS = ResourceSpec(
    key="bank-accounts",
    path="bank-accounts",
    label="Bank Accounts",
    singular="bank account",
    map_list_item=mapping.map_bank_account,
    map_detail=mapping.map_bank_account,
    build_create=payloads.build_bank_account_body,
    build_update=payloads.build_bank_account_body,
)

TENDERS = ResourceSpec(
    key="tenders",
    path="tenders",
    label="Tenders",
    singular="tender",
    map_list_item=mapping.map_tender_list_item,
    map_detail=mapping.map_tender_detail,
    build_create=payloads.build_tender_body,
    build_update=payloads.build_tender_body,
    filters=(
        FilterDimension("status", payloads.TENDER_STATUSES, label="Status"),
        FilterDimension("pending_emds", ("yes",), encode={"yes": "true"}, label="Pending EMDs"),
    ),
    has_statistics=True,
)

TASKS = ResourceSpec(
    key="tasks",
    path="tasks",
    label="Tasks",
    singular="task",
    map_list_item=mapping.map_task_list_item,
    map_detail=mapping.map_task_detail,
    build_create=payloads.build_task_body,
    build_update=payloads.build_task_body,
    filters=(
        FilterDimension(
            "status",
            payloads.TASK_STATUSES,
            encode=dict(payloads.TASK_STATUS_TO_BACKEND),
            label="Status",
        ),
        FilterDimension("approval_status", ("pending", "approved", "rejected"), label="Approval"),
        FilterDimension("date_filter", ("today", "this_week", "this_month"), label="Period"),
        FilterDimension("project", free_form=True, label="Project"),
    ),
    has_statistics=True,
    statistics_params=_task_statistics_params,
)

CLIENTS = ResourceSpec(
    key="clients",
    path="clients",
    label="Clients",
    singular="client",
    map_list_item=mapping.map_client_list_item,
    map_detail=mapping.map_client_detail,
    build_create=payloads.build_client_create,
    build_update=payloads.build_client_update,
    filters=(
        FilterDimension(
            "has_active_amc",
            ("yes", "no"),
            encode={"yes": "true", "no": "false"},
            label="Active AMC",
        ),
    ),
    has_statistics=True,
)

RESOURCES: Dict[str, ResourceSpec] = {
    spec.key: spec
    for spec in (CONTRACT_WORKERS, AMCS, FIRMS, BANK_ACCOUNTS, TENDERS, TASKS, CLIENTS)
}


def get_resource(key: str) -> ResourceSpec:
    try:
        return RESOURCES[key]
    except KeyError:
        raise ValueError(f"Unknown resource '{key}'.") from None


__all__ = [
    "AMCS",
    "BANK_ACCOUNTS",
    "CLIENTS",
    "CONTRACT_WORKERS",
    "FIRMS",
    "RESOURCES",
    "ResourceSpec",
    "TASKS",
    "TENDERS",
    "get_resource",
]

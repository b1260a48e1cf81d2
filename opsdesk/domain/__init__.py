"""Domain package exports for projections, queries and the resource registry."""

from .entities import (
    PAGE_SIZE,
    Activity,
    Amc,
    AmcBilling,
    BankAccount,
    BulkActionResult,
    BulkUploadResult,
    Client,
    ContractWorker,
    DashboardStats,
    ExpiringAmc,
    Firm,
    Profile,
    ResourcePage,
    Task,
    Tender,
    TenderFinancials,
    User,
)
from .query import ALL, FilterDimension, ListQuery, to_params, total_pages
from .resources import RESOURCES, ResourceSpec, get_resource

__all__ = [
    "ALL",
    "Activity",
    "Amc",
    "AmcBilling",
    "BankAccount",
    "BulkActionResult",
    "BulkUploadResult",
    "Client",
    "ContractWorker",
    "DashboardStats",
    "ExpiringAmc",
    "FilterDimension",
    "Firm",
    "ListQuery",
    "PAGE_SIZE",
    "Profile",
    "RESOURCES",
    "ResourcePage",
    "ResourceSpec",
    "Task",
    "Tender",
    "TenderFinancials",
    "User",
    "get_resource",
    "to_params",
    "total_pages",
]

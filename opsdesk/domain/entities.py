"""View-model projections of backend records shared by use cases and view models.

Every projection is transient: it is built when a list or detail fetch
resolves and discarded with the page that holds it. Projections are frozen so
a collection can only change by being replaced wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

DEFAULT_COUNTRY = "India"
UNKNOWN_NAME = "Unknown"
PAGE_SIZE = 20


@dataclass(frozen=True)
class User:
    """Authenticated operator returned by the session endpoints."""

    id: int = 0
    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    is_staff: bool = False
    is_superuser: bool = False

    @property
    def is_authorized(self) -> bool:
        """Console access requires staff or superuser rights."""
        return self.is_staff or self.is_superuser

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username


@dataclass(frozen=True)
class ContractWorker:
    """Contract worker row or detail projection."""

    id: int
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    worker_code: str = ""
    """Display code ``CW-{id}``; the backend has no separate worker number."""
    email: str = ""
    phone: str = ""
    date_of_birth: str = ""
    gender: str = "Male"
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    country: str = DEFAULT_COUNTRY
    worker_type: str = ""
    monthly_salary: float = 0.0
    aadhar_number: str = ""
    uan_number: str = ""
    department: str = ""
    bank_name: str = ""
    bank_account_number: str = ""
    bank_ifsc: str = ""
    bank_branch: str = ""
    status: str = "Available"
    availability_status: str = "available"
    project_id: Optional[int] = None
    project_name: str = ""
    created_at: str = ""


@dataclass(frozen=True)
class AmcBilling:
    """One billing period of an AMC contract."""

    id: int
    amc_id: int = 0
    bill_number: str = ""
    period_from: str = ""
    period_to: str = ""
    amount: float = 0.0
    paid: bool = False
    payment_date: str = ""
    payment_mode: str = ""


@dataclass(frozen=True)
class Amc:
    """Annual maintenance contract projection."""

    id: int
    client_id: int = 0
    client_name: str = ""
    amc_number: str = ""
    start_date: str = ""
    end_date: str = ""
    status: str = ""
    billing_cycle: str = ""
    amount: float = 0.0
    notes: str = ""
    created_at: str = ""
    updated_at: str = ""
    billings: Tuple[AmcBilling, ...] = ()


@dataclass(frozen=True)
class Firm:
    """Firm registered under an owner profile."""

    id: int
    firm_name: str = ""
    firm_type: str = ""
    owner_profile_id: int = 0
    owner_profile_name: str = UNKNOWN_NAME
    official_email: str = ""
    official_mobile: str = ""
    address: str = ""
    gst_number: str = ""
    pan_number: str = ""
    created_at: str = ""


@dataclass(frozen=True)
class Profile:
    """Current operator profile."""

    id: int = 0
    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    date_of_birth: str = ""
    gender: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pin_code: str = ""
    country: str = ""
    aadhar_number: str = ""
    pan_number: str = ""
    photo_url: str = ""


@dataclass(frozen=True)
class BankAccount:
    """Bank account attached to an employee profile."""

    id: int
    profile_id: int = 0
    profile_name: str = UNKNOWN_NAME
    bank_name: str = ""
    account_number: str = ""
    account_holder_name: str = UNKNOWN_NAME
    ifsc_code: str = ""
    branch: str = ""
    created_at: str = ""


@dataclass(frozen=True)
class TenderFinancials:
    """EMD and security-deposit figures derived from a tender detail."""

    tender_id: int
    emd_amount: float = 0.0
    emd_refundable: bool = True
    sd1_amount: float = 0.0
    sd1_refunded: bool = False
    sd1_refund_date: str = ""
    sd2_amount: float = 0.0
    sd2_refunded: bool = False
    sd2_refund_date: str = ""
    dd_date: str = ""
    dd_number: str = ""
    dd_amount: Optional[float] = None
    dd_beneficiary_name: str = ""
    dd_bank_name: str = ""


@dataclass(frozen=True)
class Tender:
    """Tender projection."""

    id: int
    name: str = ""
    reference_number: str = ""
    description: str = ""
    filed_date: str = ""
    start_date: str = ""
    end_date: str = ""
    estimated_value: float = 0.0
    status: str = ""
    created_at: str = ""
    updated_at: str = ""
    financials: Optional[TenderFinancials] = None


@dataclass(frozen=True)
class Task:
    """Task projection; statuses use the console vocabulary (Open/Rejected)."""

    id: int
    employee_id: int = 0
    employee_name: str = ""
    project_id: Optional[int] = None
    project_name: str = ""
    description: str = ""
    date: str = ""
    location: str = ""
    time_taken_minutes: int = 0
    status: str = "Open"
    approval_status: str = "pending"
    priority: str = "Medium"
    internal_notes: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class Client:
    """Client projection."""

    id: int
    name: str = ""
    business_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pin_code: str = ""
    country: str = DEFAULT_COUNTRY
    primary_contact_name: str = ""
    primary_contact_email: str = ""
    primary_contact_phone: str = ""
    notes: str = ""
    tags: Tuple[str, ...] = ()
    amc_count: int = 0
    open_projects: int = 0
    outstanding_amount: float = 0.0
    last_activity: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class BulkUploadResult:
    """Outcome of a spreadsheet import; errors stay one message per row."""

    success_count: int = 0
    failed_count: int = 0
    errors: Tuple[str, ...] = ()


T = TypeVar("T")


@dataclass(frozen=True)
class ResourcePage(Generic[T]):
    """One fetched page of projections plus the backend's total count."""

    items: Tuple[T, ...] = ()
    count: int = 0
    total_pages: int = 1


Statistics = Dict[str, Any]


@dataclass(frozen=True)
class BulkActionResult:
    """Summary returned by task bulk approve/delete endpoints."""

    processed_count: int = 0
    skipped_count: int = 0
    errors: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExpiringAmc:
    """AMC ending within the dashboard's look-ahead window."""

    client_name: str = ""
    amc_number: str = ""
    expiry_date: str = ""
    days_left: int = 0


@dataclass(frozen=True)
class Activity:
    id: int
    action: str = ""
    description: str = ""
    created_at: str = ""
    created_by: str = ""


@dataclass(frozen=True)
class DashboardStats:
    """Landing-page figures: four counters plus the two feed lists."""

    total_clients: int = 0
    active_amcs: int = 0
    active_tenders: int = 0
    tasks_in_progress: int = 0
    expiring_amcs: Tuple[ExpiringAmc, ...] = ()
    recent_activities: Tuple[Activity, ...] = ()

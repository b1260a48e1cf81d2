"""Total mapping functions from backend JSON records to view-model projections.

Every mapper accepts ``Any``: a payload that is not a mapping, a ``None``
field or a value of the wrong type falls back to the projection default
instead of raising. List mappers read the slim list serializer; detail
mappers read the full record and fill in the fields only it carries.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .entities import (
    DEFAULT_COUNTRY,
    UNKNOWN_NAME,
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
    Task,
    Tender,
    TenderFinancials,
    User,
)

_TASK_STATUS_FROM_BACKEND = {
    "Draft": "Open",
    "In Progress": "In Progress",
    "Completed": "Completed",
    "Canceled": "Rejected",
}


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def as_record(payload: Any) -> Mapping[str, Any]:
    """Return ``payload`` when it is a mapping, otherwise an empty dict."""
    return payload if isinstance(payload, Mapping) else {}


def text(record: Mapping[str, Any], key: str, default: str = "") -> str:
    value = record.get(key)
    if value is None or isinstance(value, (dict, list)):
        return default
    rendered = str(value)
    return rendered if rendered else default


def number(value: Any, default: float = 0.0) -> float:
    """Parse decimals the backend serializes as strings (``"12000.00"``)."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed


def integer(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default


def optional_id(value: Any) -> Optional[int]:
    parsed = integer(value, 0)
    return parsed if parsed > 0 else None


def flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split ``"Asha Rani Devi"`` into ``("Asha", "Rani Devi")``."""
    parts = full_name.split(" ") if full_name else []
    first = parts[0] if parts else ""
    last = " ".join(parts[1:])
    return first, last


def extract_results(payload: Any) -> Tuple[List[Mapping[str, Any]], int]:
    """Return ``(rows, count)`` from a paginated list response.

    A bare JSON array is accepted as an unpaginated list whose count is its
    length. Non-mapping rows are dropped.
    """
    if isinstance(payload, list):
        rows = [row for row in payload if isinstance(row, Mapping)]
        return rows, len(rows)
    record = as_record(payload)
    raw = record.get("results")
    rows = [row for row in raw if isinstance(row, Mapping)] if isinstance(raw, list) else []
    count = integer(record.get("count"), len(rows))
    return rows, max(0, count)


# ---------------------------------------------------------------------------
# Contract workers
# ---------------------------------------------------------------------------


def _worker_common(record: Mapping[str, Any]) -> dict:
    full_name = text(record, "full_name")
    first, last = split_full_name(full_name)
    record_id = integer(record.get("id"))
    project_id = optional_id(record.get("project"))
    return {
        "id": record_id,
        "first_name": first,
        "last_name": last,
        "name": full_name,
        "worker_code": f"CW-{record_id}",
        "email": text(record, "email"),
        "phone": text(record, "phone_number"),
        "worker_type": text(record, "worker_type"),
        "monthly_salary": number(record.get("monthly_salary")),
        "department": text(record, "department"),
        "project_id": project_id,
        "project_name": text(record, "project_name"),
        "created_at": text(record, "created_at"),
    }


def map_worker_list_item(payload: Any) -> ContractWorker:
    record = as_record(payload)
    availability = text(record, "availability_status", "available")
    return ContractWorker(
        **_worker_common(record),
        status="Assigned" if availability == "assigned" else "Available",
        availability_status=availability,
    )


def map_worker_detail(payload: Any) -> ContractWorker:
    """Map a worker detail; assignment is derived from the project link."""
    record = as_record(payload)
    common = _worker_common(record)
    bank = as_record(record.get("bank_account"))
    assigned = common["project_id"] is not None
    return ContractWorker(
        **common,
        date_of_birth=text(record, "date_of_birth"),
        gender="Female" if text(record, "gender").lower() == "female" else "Male",
        address=text(record, "address"),
        city=text(record, "city"),
        state=text(record, "state"),
        pincode=text(record, "pin_code"),
        country=text(record, "country", DEFAULT_COUNTRY),
        aadhar_number=text(record, "aadhar_no"),
        uan_number=text(record, "uan_number"),
        bank_name=text(bank, "bank_name"),
        bank_account_number=text(bank, "account_number"),
        bank_ifsc=text(bank, "ifsc_code"),
        bank_branch=text(bank, "branch"),
        status="Assigned" if assigned else "Available",
        availability_status="assigned" if assigned else "available",
    )


# ---------------------------------------------------------------------------
# AMCs
# ---------------------------------------------------------------------------


def map_amc_billing(payload: Any, amc_id: int = 0) -> AmcBilling:
    record = as_record(payload)
    return AmcBilling(
        id=integer(record.get("id")),
        amc_id=amc_id,
        bill_number=text(record, "bill_number"),
        period_from=text(record, "period_from"),
        period_to=text(record, "period_to"),
        amount=number(record.get("amount")),
        paid=flag(record.get("paid")),
        payment_date=text(record, "payment_date"),
        payment_mode=text(record, "payment_mode"),
    )


def map_amc_list_item(payload: Any) -> Amc:
    record = as_record(payload)
    created = text(record, "created_at")
    return Amc(
        id=integer(record.get("id")),
        client_id=integer(record.get("client_id")),
        client_name=text(record, "client_name"),
        amc_number=text(record, "amc_number"),
        start_date=text(record, "start_date"),
        end_date=text(record, "end_date"),
        status=text(record, "status"),
        billing_cycle=text(record, "billing_cycle"),
        amount=number(record.get("amount")),
        created_at=created,
        updated_at=created,
    )


def map_amc_detail(payload: Any) -> Amc:
    record = as_record(payload)
    amc_id = integer(record.get("id"))
    billings = record.get("billings")
    rows: Iterable[Any] = billings if isinstance(billings, list) else ()
    return Amc(
        id=amc_id,
        client_id=integer(record.get("client_id") or record.get("client")),
        client_name=text(record, "client_name"),
        amc_number=text(record, "amc_number"),
        start_date=text(record, "start_date"),
        end_date=text(record, "end_date"),
        status=text(record, "status"),
        billing_cycle=text(record, "billing_cycle"),
        amount=number(record.get("amount")),
        notes=text(record, "notes"),
        created_at=text(record, "created_at"),
        updated_at=text(record, "updated_at"),
        billings=tuple(map_amc_billing(row, amc_id) for row in rows),
    )


# ---------------------------------------------------------------------------
# Firms and bank accounts
# ---------------------------------------------------------------------------


def map_firm(payload: Any) -> Firm:
    """Map a firm list item or detail; both serializers share one shape."""
    record = as_record(payload)
    return Firm(
        id=integer(record.get("id")),
        firm_name=text(record, "firm_name"),
        firm_type=text(record, "type_display") or text(record, "firm_type"),
        owner_profile_id=integer(record.get("firm_owner_profile")),
        owner_profile_name=text(record, "firm_owner_name", UNKNOWN_NAME),
        official_email=text(record, "official_email"),
        official_mobile=text(record, "official_mobile_number"),
        address=text(record, "address"),
        gst_number=text(record, "gst_number"),
        pan_number=text(record, "pan_number"),
        created_at=text(record, "created_at"),
    )


def map_bank_account(payload: Any) -> BankAccount:
    record = as_record(payload)
    profile_name = text(record, "profile_name")
    return BankAccount(
        id=integer(record.get("id")),
        profile_id=integer(record.get("profile_id")),
        profile_name=profile_name or UNKNOWN_NAME,
        bank_name=text(record, "bank_name"),
        account_number=text(record, "account_number"),
        account_holder_name=text(record, "account_holder_name") or profile_name or UNKNOWN_NAME,
        ifsc_code=text(record, "ifsc_code"),
        branch=text(record, "branch"),
        created_at=text(record, "created_at"),
    )


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


def map_tender_list_item(payload: Any) -> Tender:
    record = as_record(payload)
    created = text(record, "created_at")
    return Tender(
        id=integer(record.get("id")),
        name=text(record, "name"),
        reference_number=text(record, "reference_number"),
        filed_date=text(record, "filed_date"),
        start_date=text(record, "start_date"),
        end_date=text(record, "end_date"),
        estimated_value=number(record.get("estimated_value")),
        status=text(record, "status"),
        created_at=created,
        updated_at=created,
    )


def _find_deposit(deposits: Iterable[Any], deposit_type: str) -> Mapping[str, Any]:
    for entry in deposits:
        record = as_record(entry)
        if record.get("deposit_type") == deposit_type:
            return record
    return {}


def map_tender_financials(payload: Any) -> TenderFinancials:
    """Derive EMD and security-deposit figures from a tender detail."""
    record = as_record(payload)
    raw_deposits = record.get("deposits")
    deposits = raw_deposits if isinstance(raw_deposits, list) else []
    sd1 = _find_deposit(deposits, "EMD_Security1")
    sd2 = _find_deposit(deposits, "EMD_Security2")
    dd_source = sd1 or sd2
    dd_amount = number(dd_source.get("dd_amount")) if dd_source else None
    return TenderFinancials(
        tender_id=integer(record.get("id")),
        emd_amount=number(record.get("total_emd_cost")),
        emd_refundable=text(record, "status") != "Awarded",
        sd1_amount=number(record.get("security_deposit_1")),
        sd1_refunded=flag(sd1.get("is_refunded")),
        sd1_refund_date=text(sd1, "refund_date"),
        sd2_amount=number(record.get("security_deposit_2")),
        sd2_refunded=flag(sd2.get("is_refunded")),
        sd2_refund_date=text(sd2, "refund_date"),
        dd_date=text(sd1, "dd_date") or text(sd2, "dd_date"),
        dd_number=text(sd1, "dd_number") or text(sd2, "dd_number"),
        dd_amount=dd_amount,
        dd_beneficiary_name=text(sd1, "dd_beneficiary_name") or text(sd2, "dd_beneficiary_name"),
        dd_bank_name=text(sd1, "bank_name") or text(sd2, "bank_name"),
    )


def map_tender_detail(payload: Any) -> Tender:
    record = as_record(payload)
    status = text(record, "status")
    return Tender(
        id=integer(record.get("id")),
        name=text(record, "name"),
        reference_number=text(record, "reference_number"),
        description=text(record, "description"),
        filed_date=text(record, "filed_date"),
        start_date=text(record, "start_date"),
        end_date=text(record, "end_date"),
        estimated_value=number(record.get("estimated_value")),
        status=status if status in {"Draft", "Filed", "Awarded", "Lost"} else "Closed",
        created_at=text(record, "created_at"),
        updated_at=text(record, "updated_at"),
        financials=map_tender_financials(record),
    )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def task_status_from_backend(value: Any) -> str:
    return _TASK_STATUS_FROM_BACKEND.get(value, "Open") if isinstance(value, str) else "Open"


def _task_common(record: Mapping[str, Any]) -> dict:
    return {
        "id": integer(record.get("id")),
        "employee_id": integer(record.get("employee")),
        "employee_name": text(record, "employee_name"),
        "project_id": optional_id(record.get("project")),
        "project_name": text(record, "project_name"),
        "description": text(record, "task_name"),
        "date": text(record, "deadline"),
        "location": text(record, "location"),
        "time_taken_minutes": integer(record.get("time_taken_minutes")),
        "status": task_status_from_backend(record.get("status")),
        "approval_status": text(record, "approval_status", "pending"),
        "created_at": text(record, "created_at"),
    }


def map_task_list_item(payload: Any) -> Task:
    record = as_record(payload)
    common = _task_common(record)
    return Task(**common, updated_at=common["created_at"])


def map_task_detail(payload: Any) -> Task:
    record = as_record(payload)
    return Task(
        **_task_common(record),
        internal_notes=text(record, "internal_notes"),
        updated_at=text(record, "updated_at"),
    )


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


def _client_name(record: Mapping[str, Any]) -> str:
    full = text(record, "full_name")
    if full:
        return full
    return f"{text(record, 'first_name')} {text(record, 'last_name')}".strip()


def map_client_list_item(payload: Any) -> Client:
    record = as_record(payload)
    name = _client_name(record)
    created = text(record, "created_at")
    return Client(
        id=integer(record.get("id")),
        name=name,
        primary_contact_name=name,
        primary_contact_email=text(record, "email"),
        primary_contact_phone=text(record, "phone_number"),
        amc_count=1 if flag(record.get("has_active_amc")) else 0,
        last_activity=created,
        created_at=created,
        updated_at=created,
    )


def map_client_detail(payload: Any) -> Client:
    record = as_record(payload)
    name = _client_name(record)
    created = text(record, "created_at")
    updated = text(record, "updated_at")
    return Client(
        id=integer(record.get("id")),
        name=name or "Client",
        address=text(record, "address"),
        city=text(record, "city"),
        state=text(record, "state"),
        pin_code=text(record, "pin_code"),
        country=text(record, "country", DEFAULT_COUNTRY),
        primary_contact_name=text(record, "primary_contact_name") or name,
        primary_contact_email=text(record, "email"),
        primary_contact_phone=text(record, "phone_number"),
        notes=text(record, "notes"),
        last_activity=updated or created,
        created_at=created,
        updated_at=updated,
    )


# ---------------------------------------------------------------------------
# Profile, session and bulk responses
# ---------------------------------------------------------------------------


def map_profile(payload: Any) -> Profile:
    record = as_record(payload)
    return Profile(
        id=integer(record.get("id")),
        username=text(record, "username"),
        email=text(record, "email"),
        first_name=text(record, "first_name"),
        last_name=text(record, "last_name"),
        phone_number=text(record, "phone_number"),
        date_of_birth=text(record, "date_of_birth"),
        gender=text(record, "gender"),
        address=text(record, "address"),
        city=text(record, "city"),
        state=text(record, "state"),
        pin_code=text(record, "pin_code"),
        country=text(record, "country"),
        aadhar_number=text(record, "aadhar_number"),
        pan_number=text(record, "pan_number"),
        photo_url=text(record, "photo_url"),
    )


def map_user(payload: Any) -> User:
    """Map ``/authentication/user/`` which wraps the user as ``{"user": {...}}``."""
    record = as_record(payload)
    user = as_record(record.get("user")) or record
    return User(
        id=integer(user.get("id")),
        username=text(user, "username"),
        email=text(user, "email"),
        first_name=text(user, "first_name"),
        last_name=text(user, "last_name"),
        is_staff=flag(user.get("is_staff")),
        is_superuser=flag(user.get("is_superuser")),
    )


def _messages(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    out: List[str] = []
    for item in value:
        if item is None:
            continue
        if isinstance(item, Mapping):
            message = text(item, "error") or text(item, "message")
            row = item.get("row")
            if message and row is not None:
                out.append(f"Row {row}: {message}")
            elif message:
                out.append(message)
            continue
        rendered = str(item).strip()
        if rendered:
            out.append(rendered)
    return tuple(out)


def map_bulk_upload_result(payload: Any) -> BulkUploadResult:
    record = as_record(payload)
    return BulkUploadResult(
        success_count=max(0, integer(record.get("success_count"))),
        failed_count=max(0, integer(record.get("failed_count"))),
        errors=_messages(record.get("errors")),
    )


def map_bulk_action_result(payload: Any) -> BulkActionResult:
    record = as_record(payload)
    return BulkActionResult(
        processed_count=max(
            0,
            integer(
                record.get("approved_count", record.get("deleted_count", record.get("processed_count")))
            ),
        ),
        skipped_count=max(0, integer(record.get("skipped_count"))),
        errors=_messages(record.get("errors")),
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def _rows(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def map_dashboard_stats(payload: Any) -> DashboardStats:
    """Counters default to 0; feed rows that are not objects are skipped."""
    record = as_record(payload)
    expiring = tuple(
        ExpiringAmc(
            client_name=text(row, "client_name"),
            amc_number=text(row, "amc_number"),
            expiry_date=text(row, "amc_expiry_date"),
            days_left=max(0, integer(row.get("expiry_count_days"))),
        )
        for row in _rows(record.get("expiring_amcs"))
    )
    activities = tuple(
        Activity(
            id=integer(row.get("id")),
            action=text(row, "action"),
            description=text(row, "description"),
            created_at=text(row, "created_at"),
            created_by=text(row, "created_by_username"),
        )
        for row in _rows(record.get("recent_activities"))
    )
    return DashboardStats(
        total_clients=max(0, integer(record.get("total_clients"))),
        active_amcs=max(0, integer(record.get("active_amcs_count"))),
        active_tenders=max(0, integer(record.get("active_tenders_count"))),
        tasks_in_progress=max(0, integer(record.get("in_progress_tasks_count"))),
        expiring_amcs=expiring,
        recent_activities=activities,
    )


__all__ = [
    "as_record",
    "extract_results",
    "flag",
    "integer",
    "map_amc_billing",
    "map_amc_detail",
    "map_amc_list_item",
    "map_bank_account",
    "map_bulk_action_result",
    "map_bulk_upload_result",
    "map_client_detail",
    "map_client_list_item",
    "map_dashboard_stats",
    "map_firm",
    "map_profile",
    "map_task_detail",
    "map_task_list_item",
    "map_tender_detail",
    "map_tender_financials",
    "map_tender_list_item",
    "map_user",
    "map_worker_detail",
    "map_worker_list_item",
    "number",
    "optional_id",
    "split_full_name",
    "task_status_from_backend",
    "text",
]

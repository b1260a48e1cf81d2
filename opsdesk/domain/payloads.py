"""Request-body builders for create and update calls.

Each resource has its own convention for blank fields:

- contract workers: on update phone and bank fields are sent as ``""`` so they
  can be cleared; on create they are omitted when blank.
- AMCs: create coerces ``Pending`` to ``Active``; update sends only truthy
  fields and never ``Pending``; a billing row marked paid is stamped with the
  payment date and ``Bank Transfer``.
- clients: create sends trimmed optional fields only when non-empty; update
  sends every key present in the form, empty strings included.
- firms, bank accounts and the profile: blank optionals are sent as ``None``.
- tasks: console statuses are translated to backend statuses.

Builders take a plain mapping of form values and raise ``ValueError`` on
input the backend would reject outright.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

Form = Mapping[str, Any]
Body = Dict[str, Any]

WORKER_TYPES = ("Unskilled", "Semi-Skilled", "Skilled")
AMC_STATUSES = ("Active", "Pending", "Expired", "Canceled")
AMC_BILLING_CYCLES = ("Monthly", "Quarterly", "Half-yearly", "Yearly")
FIRM_TYPES = ("Proprietorship", "Partnership", "Pvt Ltd", "LLP")
TENDER_STATUSES = ("Draft", "Filed", "Awarded", "Lost", "Closed")
TASK_STATUSES = ("Open", "In Progress", "Completed", "Rejected")
TASK_STATUS_TO_BACKEND = {
    "Open": "Draft",
    "In Progress": "In Progress",
    "Completed": "Completed",
    "Rejected": "Canceled",
}
MIN_PASSWORD_LENGTH = 6
DEFAULT_PAYMENT_MODE = "Bank Transfer"

_WORKER_CLEARABLE = {
    "phone": "phone_number",
    "bank_name": "bank_name",
    "bank_account_number": "bank_account_number",
    "bank_ifsc": "ifsc_code",
    "bank_branch": "bank_branch",
}
_WORKER_OPTIONAL = {
    "date_of_birth": "date_of_birth",
    "address": "address",
    "city": "city",
    "state": "state",
    "pincode": "pin_code",
    "country": "country",
    "uan_number": "uan_number",
    "department": "department",
}
_CLIENT_FIELDS = {
    "primary_contact_email": "email",
    "primary_contact_phone": "phone_number",
    "primary_contact_name": "primary_contact_name",
    "notes": "notes",
    "address": "address",
    "city": "city",
    "state": "state",
    "pin_code": "pin_code",
    "country": "country",
}
_PROFILE_NULLABLE = (
    "date_of_birth",
    "gender",
    "address",
    "city",
    "state",
    "pin_code",
    "country",
    "aadhar_number",
    "pan_number",
    "phone_number",
)
_PASSWORD_FIELDS = ("current_password", "new_password", "confirm_password")


def _str(form: Form, key: str) -> str:
    value = form.get(key)
    if value is None:
        return ""
    return str(value)


def _or_none(form: Form, key: str) -> Optional[str]:
    value = _str(form, key)
    return value if value else None


def _to_float(value: Any) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


# ---------------------------------------------------------------------------
# Contract workers
# ---------------------------------------------------------------------------


def build_worker_body(form: Form, *, updating: bool) -> Body:
    body: Body = {
        "first_name": _str(form, "first_name"),
        "last_name": _str(form, "last_name"),
        "email": _str(form, "email"),
        "worker_type": _str(form, "worker_type") or "Semi-Skilled",
        "monthly_salary": _to_float(form.get("monthly_salary")),
        "aadhar_no": _str(form, "aadhar_number"),
        "gender": "male" if _str(form, "gender").lower() != "female" else "female",
    }
    if body["worker_type"] not in WORKER_TYPES:
        raise ValueError(f"Unknown worker type {body['worker_type']!r}.")
    for source, target in _WORKER_CLEARABLE.items():
        value = _str(form, source)
        if value:
            body[target] = value
        elif updating:
            body[target] = ""
    for source, target in _WORKER_OPTIONAL.items():
        value = _str(form, source)
        if value:
            body[target] = value
    project = _to_int(form.get("project_id"))
    if project is not None:
        body["project"] = project
    return body


def build_worker_create(form: Form) -> Body:
    return build_worker_body(form, updating=False)


def build_worker_update(form: Form) -> Body:
    return build_worker_body(form, updating=True)


# ---------------------------------------------------------------------------
# AMCs
# ---------------------------------------------------------------------------


def build_amc_create(form: Form) -> Body:
    """Build an AMC create body; ``Pending`` is not a backend status."""
    status = _str(form, "status")
    if not status or status == "Pending":
        status = "Active"
    return {
        "client": _to_int(form.get("client_id")),
        "amc_number": _str(form, "amc_number"),
        "amount": _to_float(form.get("amount")),
        "start_date": _str(form, "start_date"),
        "end_date": _str(form, "end_date"),
        "billing_cycle": _str(form, "billing_cycle"),
        "status": status,
        "notes": form.get("notes"),
    }


def build_amc_update(form: Form) -> Body:
    body: Body = {}
    client = _to_int(form.get("client_id"))
    if client:
        body["client"] = client
    if form.get("amc_number"):
        body["amc_number"] = form["amc_number"]
    if form.get("amount") is not None and form.get("amount") != "":
        body["amount"] = _to_float(form["amount"])
    for key in ("start_date", "end_date", "billing_cycle"):
        if form.get(key):
            body[key] = form[key]
    status = form.get("status")
    if status and status != "Pending":
        body["status"] = status
    if form.get("notes") is not None:
        body["notes"] = form["notes"]
    return body


def build_billing_payment(paid: bool, payment_date: str) -> Body:
    """Toggle body for one AMC billing row.

    Marking paid stamps ``payment_date`` and the default payment mode;
    marking unpaid sends ``paid`` alone.
    """
    if not paid:
        return {"paid": False}
    date_text = str(payment_date or "").strip()
    if not date_text:
        raise ValueError("Payment date is required.")
    return {"paid": True, "payment_date": date_text, "payment_mode": DEFAULT_PAYMENT_MODE}


# ---------------------------------------------------------------------------
# Firms and bank accounts
# ---------------------------------------------------------------------------


def build_firm_body(form: Form) -> Body:
    firm_type = _or_none(form, "firm_type")
    if firm_type is not None and firm_type not in FIRM_TYPES:
        raise ValueError(f"Unknown firm type {firm_type!r}.")
    return {
        "firm_name": _str(form, "firm_name"),
        "firm_type": firm_type,
        "firm_owner_profile": _to_int(form.get("owner_profile_id")),
        "official_email": _or_none(form, "official_email"),
        "official_mobile_number": _or_none(form, "official_mobile"),
        "address": _or_none(form, "address"),
        "gst_number": _or_none(form, "gst_number"),
        "pan_number": _or_none(form, "pan_number"),
    }


def build_bank_account_body(form: Form) -> Body:
    profile_id = _to_int(form.get("profile_id"))
    if profile_id is None:
        raise ValueError("Please select a profile")
    return {
        "profile_id": profile_id,
        "bank_name": _str(form, "bank_name"),
        "account_number": _str(form, "account_number"),
        "ifsc_code": _str(form, "ifsc_code"),
        "branch": _or_none(form, "branch"),
    }


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


def build_tender_body(form: Form) -> Body:
    """Build a tender body, adding DD details for each security deposit set."""
    body: Body = {
        "name": _str(form, "name"),
        "reference_number": _str(form, "reference_number"),
        "description": _str(form, "description"),
        "filed_date": _str(form, "filed_date"),
        "start_date": _str(form, "start_date"),
        "end_date": _str(form, "end_date"),
        "estimated_value": _to_float(form.get("estimated_value")),
        "status": _str(form, "status") or "Draft",
    }
    dd_date = _str(form, "dd_date")
    dd_number = _str(form, "dd_number")
    if not (dd_date and dd_number):
        return body
    for slot in (1, 2):
        amount = _to_float(form.get(f"sd{slot}_amount"))
        if not amount:
            continue
        prefix = f"security_deposit_{slot}_dd_"
        body[prefix + "date"] = dd_date
        body[prefix + "number"] = dd_number
        body[prefix + "amount"] = amount
        body[prefix + "bank_name"] = _str(form, "dd_bank_name")
        body[prefix + "beneficiary_name"] = _str(form, "dd_beneficiary_name")
    return body


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def task_status_to_backend(status: str) -> str:
    try:
        return TASK_STATUS_TO_BACKEND[status]
    except KeyError:
        raise ValueError(f"Unknown task status {status!r}.") from None


def build_task_body(form: Form) -> Body:
    body: Body = {
        "task_name": _str(form, "description"),
        "deadline": _str(form, "date"),
        "location": _str(form, "location"),
        "estimated_time": _to_int(form.get("time_taken_minutes")) or 0,
        "internal_notes": _str(form, "internal_notes"),
    }
    project = _to_int(form.get("project_id"))
    if project:
        body["project"] = project
    employee = _to_int(form.get("employee_id"))
    if employee:
        body["employee"] = employee
    status = _str(form, "status")
    if status:
        body["status"] = task_status_to_backend(status)
    return body


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


def build_client_create(form: Form) -> Body:
    name = _str(form, "name").strip()
    if not name:
        raise ValueError("Client name is required.")
    body: Body = {"first_name": name}
    for source, target in _CLIENT_FIELDS.items():
        value = _str(form, source).strip()
        if value:
            body[target] = value
    return body


def build_client_update(form: Form) -> Body:
    """Send every present field so cleared inputs reach the backend."""
    body: Body = {}
    if "name" in form:
        body["first_name"] = _str(form, "name").strip()
    for source, target in _CLIENT_FIELDS.items():
        if source in form:
            body[target] = _str(form, source)
    return body


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


def validate_password_change(form: Form) -> bool:
    """Return True when a complete, valid password change is requested.

    Raises:
        ValueError: Some but not all password fields are filled, the new
            password differs from its confirmation, or it is too short.
    """
    values = [_str(form, key) for key in _PASSWORD_FIELDS]
    if not any(values):
        return False
    if not all(values):
        raise ValueError("Please fill all password fields to change password")
    _, new, confirm = values
    if new != confirm:
        raise ValueError("New password and confirm password do not match")
    if len(new) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    return True


def build_profile_update(form: Form) -> Body:
    changing_password = validate_password_change(form)
    body: Body = {
        "username": _str(form, "username"),
        "email": _str(form, "email"),
        "first_name": _str(form, "first_name"),
        "last_name": _str(form, "last_name"),
    }
    for key in _PROFILE_NULLABLE:
        body[key] = _or_none(form, key)
    if changing_password:
        for key in _PASSWORD_FIELDS:
            body[key] = _str(form, key)
    return body


__all__ = [
    "AMC_BILLING_CYCLES",
    "AMC_STATUSES",
    "DEFAULT_PAYMENT_MODE",
    "FIRM_TYPES",
    "TASK_STATUSES",
    "TENDER_STATUSES",
    "WORKER_TYPES",
    "build_amc_create",
    "build_amc_update",
    "build_bank_account_body",
    "build_billing_payment",
    "build_client_create",
    "build_client_update",
    "build_firm_body",
    "build_profile_update",
    "build_task_body",
    "build_tender_body",
    "build_worker_create",
    "build_worker_update",
    "task_status_to_backend",
    "validate_password_change",
]

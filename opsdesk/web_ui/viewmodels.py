"""Thin web-facing viewmodels for NiceGUI bindings.

These viewmodels hold browser form state and translate to/from the core
viewmodels and domain records without adding I/O or orchestration logic.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from opsdesk.domain import payloads
from opsdesk.viewmodels.settings_vm import SettingsVM


BROWSER_SETTINGS_KEY = "opsdesk.web.settings.v1"


def _as_int(value: Any, default: int) -> int:
    """Convert mixed values to int with deterministic fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


@dataclass
class WebSettingsVM:
    """Browser-editable settings projection for NiceGUI forms."""

    api_base_url: str = ""
    api_prefix: str = "/api"
    request_timeout_s: int = 10
    search_debounce_ms: int = 500
    debug_logging: bool = False

    @classmethod
    def from_settings_vm(cls, settings_vm: SettingsVM) -> "WebSettingsVM":
        """Build browser form state from the core ``SettingsVM`` snapshot."""
        return cls.from_payload(settings_vm.to_dict())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WebSettingsVM":
        """Build browser form state from a ``SettingsVM.to_dict`` shaped mapping."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping.")
        return cls(
            api_base_url=str(payload.get("api_base_url") or ""),
            api_prefix=str(payload.get("api_prefix") or ""),
            request_timeout_s=_as_int(payload.get("request_timeout_s"), 10),
            search_debounce_ms=_as_int(payload.get("search_debounce_ms"), 500),
            debug_logging=bool(payload.get("debug_logging")),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize browser form state using ``SettingsVM`` payload shape."""
        return {
            "api_base_url": str(self.api_base_url or "").strip(),
            "api_prefix": str(self.api_prefix or ""),
            "request_timeout_s": _as_int(self.request_timeout_s, 10),
            "search_debounce_ms": _as_int(self.search_debounce_ms, 500),
            "debug_logging": bool(self.debug_logging),
        }

    def apply_to_settings_vm(self, settings_vm: SettingsVM) -> None:
        """Push browser form values into the core settings viewmodel."""
        settings_vm.apply_dict(self.to_payload())


def parse_settings_json(text: str) -> Dict[str, Any]:
    """Parse imported settings JSON into a mapping payload."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Imported settings must be a JSON object.")
    return dict(raw)


@dataclass
class LoginFormVM:
    """Form state for the sign-in page."""

    login_identifier: str = ""
    password: str = ""
    remember_me: bool = False

    def clear_password(self) -> None:
        self.password = ""


# ---------------------------------------------------------------------------
# Editor forms and table columns per resource
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FormField:
    """One input in a resource editor dialog.

    ``kind`` is ``text``, ``number``, ``date``, ``select``, ``textarea`` or
    ``password``; ``options`` applies to ``select`` only.
    """

    name: str
    label: str
    kind: str = "text"
    options: Tuple[str, ...] = ()
    required: bool = False


EDITOR_FIELDS: Dict[str, Tuple[FormField, ...]] = {
    "contract-workers": (
        FormField("first_name", "First name", required=True),
        FormField("last_name", "Last name"),
        FormField("email", "Email", required=True),
        FormField("phone", "Phone"),
        FormField("gender", "Gender", "select", ("Male", "Female")),
        FormField("date_of_birth", "Date of birth", "date"),
        FormField("worker_type", "Worker type", "select", payloads.WORKER_TYPES),
        FormField("monthly_salary", "Monthly salary", "number"),
        FormField("department", "Department"),
        FormField("aadhar_number", "Aadhar number"),
        FormField("uan_number", "UAN number"),
        FormField("address", "Address", "textarea"),
        FormField("city", "City"),
        FormField("state", "State"),
        FormField("pincode", "Pincode"),
        FormField("country", "Country"),
        FormField("bank_name", "Bank name"),
        FormField("bank_account_number", "Account number"),
        FormField("bank_ifsc", "IFSC code"),
        FormField("bank_branch", "Branch"),
        FormField("project_id", "Project ID", "number"),
    ),
    "amcs": (
        FormField("client_id", "Client ID", "number", required=True),
        FormField("amc_number", "AMC number", required=True),
        FormField("amount", "Amount", "number"),
        FormField("start_date", "Start date", "date"),
        FormField("end_date", "End date", "date"),
        FormField("billing_cycle", "Billing cycle", "select", payloads.AMC_BILLING_CYCLES),
        FormField("status", "Status", "select", payloads.AMC_STATUSES),
        FormField("notes", "Notes", "textarea"),
    ),
    "firms": (
        FormField("firm_name", "Firm name", required=True),
        FormField("firm_type", "Firm type", "select", payloads.FIRM_TYPES),
        FormField("owner_profile_id", "Owner profile ID", "number"),
        FormField("official_email", "Official email"),
        FormField("official_mobile", "Official mobile"),
        FormField("address", "Address", "textarea"),
        FormField("gst_number", "GST number"),
        FormField("pan_number", "PAN number"),
    ),
    "bank-accounts": (
        FormField("profile_id", "Profile ID", "number", required=True),
        FormField("bank_name", "Bank name", required=True),
        FormField("account_number", "Account number", required=True),
        FormField("ifsc_code", "IFSC code", required=True),
        FormField("branch", "Branch"),
    ),
    "tenders": (
        FormField("name", "Name", required=True),
        FormField("reference_number", "Reference number", required=True),
        FormField("description", "Description", "textarea"),
        FormField("filed_date", "Filed date", "date"),
        FormField("start_date", "Start date", "date"),
        FormField("end_date", "End date", "date"),
        FormField("estimated_value", "Estimated value", "number"),
        FormField("status", "Status", "select", payloads.TENDER_STATUSES),
        FormField("sd1_amount", "Security deposit 1", "number"),
        FormField("sd2_amount", "Security deposit 2", "number"),
        FormField("dd_date", "DD date", "date"),
        FormField("dd_number", "DD number"),
        FormField("dd_bank_name", "DD bank"),
        FormField("dd_beneficiary_name", "DD beneficiary"),
    ),
    "tasks": (
        FormField("description", "Task", required=True),
        FormField("date", "Deadline", "date"),
        FormField("location", "Location"),
        FormField("time_taken_minutes", "Estimated minutes", "number"),
        FormField("project_id", "Project ID", "number"),
        FormField("employee_id", "Employee ID", "number"),
        FormField("status", "Status", "select", payloads.TASK_STATUSES),
        FormField("internal_notes", "Internal notes", "textarea"),
    ),
    "clients": (
        FormField("name", "Name", required=True),
        FormField("primary_contact_name", "Contact name"),
        FormField("primary_contact_email", "Contact email"),
        FormField("primary_contact_phone", "Contact phone"),
        FormField("address", "Address", "textarea"),
        FormField("city", "City"),
        FormField("state", "State"),
        FormField("pin_code", "PIN code"),
        FormField("country", "Country"),
        FormField("notes", "Notes", "textarea"),
    ),
}

TABLE_COLUMNS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "contract-workers": (
        ("name", "Name"),
        ("email", "Email"),
        ("phone", "Phone"),
        ("worker_type", "Type"),
        ("monthly_salary", "Salary"),
        ("availability_status", "Availability"),
        ("project_name", "Project"),
    ),
    "amcs": (
        ("amc_number", "AMC #"),
        ("client_name", "Client"),
        ("amount", "Amount"),
        ("billing_cycle", "Billing"),
        ("start_date", "Start"),
        ("end_date", "End"),
        ("status", "Status"),
    ),
    "firms": (
        ("firm_name", "Firm"),
        ("firm_type", "Type"),
        ("owner_profile_name", "Owner"),
        ("official_email", "Email"),
        ("official_mobile", "Mobile"),
    ),
    "bank-accounts": (
        ("account_holder_name", "Holder"),
        ("bank_name", "Bank"),
        ("account_number", "Account"),
        ("ifsc_code", "IFSC"),
        ("branch", "Branch"),
    ),
    "tenders": (
        ("name", "Name"),
        ("reference_number", "Reference"),
        ("filed_date", "Filed"),
        ("estimated_value", "Value"),
        ("status", "Status"),
    ),
    "tasks": (
        ("description", "Task"),
        ("employee_name", "Employee"),
        ("project_name", "Project"),
        ("date", "Deadline"),
        ("status", "Status"),
        ("approval_status", "Approval"),
    ),
    "clients": (
        ("name", "Name"),
        ("primary_contact_name", "Contact"),
        ("primary_contact_email", "Email"),
        ("city", "City"),
        ("amc_count", "AMCs"),
    ),
}

_FINANCIAL_LABELS: Tuple[Tuple[str, str], ...] = (
    ("emd_amount", "EMD amount"),
    ("emd_refundable", "EMD refundable"),
    ("sd1_amount", "Security deposit 1"),
    ("sd1_refunded", "SD1 refunded"),
    ("sd1_refund_date", "SD1 refund date"),
    ("sd2_amount", "Security deposit 2"),
    ("sd2_refunded", "SD2 refunded"),
    ("sd2_refund_date", "SD2 refund date"),
    ("dd_date", "DD date"),
    ("dd_number", "DD number"),
    ("dd_amount", "DD amount"),
    ("dd_bank_name", "DD bank"),
    ("dd_beneficiary_name", "DD beneficiary"),
)

BILLING_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("bill_number", "Bill #"),
    ("period_from", "From"),
    ("period_to", "To"),
    ("amount", "Amount"),
    ("status", "Status"),
    ("payment_date", "Paid on"),
)


def _display(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (tuple, list)):
        return ", ".join(str(item) for item in value) or "-"
    return str(value)


def detail_rows(resource_key: str, record: Any) -> List[Tuple[str, str]]:
    """Read-only ``(label, value)`` pairs for a record's detail dialog.

    Table columns come first, then the editor inputs the table does not
    show. Nested financials and billings have their own helpers.
    """
    values = asdict(record) if is_dataclass(record) else dict(record or {})
    labels: Dict[str, str] = {}
    for name, label in TABLE_COLUMNS.get(resource_key, ()):
        labels.setdefault(name, label)
    for spec in EDITOR_FIELDS.get(resource_key, ()):
        if spec.name in values:
            labels.setdefault(spec.name, spec.label)
    return [(label, _display(values.get(name))) for name, label in labels.items()]


def financial_rows(financials: Any) -> List[Tuple[str, str]]:
    """Tender EMD, deposit and DD figures; empty when the tender has none."""
    if financials is None:
        return []
    values = asdict(financials) if is_dataclass(financials) else dict(financials)
    return [(label, _display(values.get(name))) for name, label in _FINANCIAL_LABELS]


def billing_table_rows(billings: Sequence[Any]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for billing in billings:
        rows.append(
            {
                "id": billing.id,
                "bill_number": billing.bill_number or f"#{billing.id}",
                "period_from": billing.period_from,
                "period_to": billing.period_to,
                "amount": billing.amount,
                "paid": billing.paid,
                "status": "Paid" if billing.paid else "Unpaid",
                "payment_date": billing.payment_date or "-",
            }
        )
    return rows


def editor_fields(resource_key: str) -> Tuple[FormField, ...]:
    try:
        return EDITOR_FIELDS[resource_key]
    except KeyError:
        raise ValueError(f"No editor defined for '{resource_key}'.") from None


def table_columns(resource_key: str) -> List[Dict[str, Any]]:
    """Column definitions in the shape ``ui.table`` expects."""
    return [
        {"name": name, "label": label, "field": name, "align": "left", "sortable": False}
        for name, label in TABLE_COLUMNS.get(resource_key, ())
    ]


def form_from_record(resource_key: str, record: Any = None) -> Dict[str, Any]:
    """Initial editor values: blanks for a new record, the record's values otherwise.

    Nested tender financials are flattened so their ``sd1_amount``/``dd_*``
    keys line up with the editor inputs.
    """
    fields = editor_fields(resource_key)
    values: Dict[str, Any] = {}
    if record is not None:
        values = asdict(record) if is_dataclass(record) else dict(record)
        financials = values.pop("financials", None)
        if isinstance(financials, Mapping):
            values.update({k: v for k, v in financials.items() if k != "tender_id"})
    form: Dict[str, Any] = {}
    for spec in fields:
        value = values.get(spec.name)
        if value is None:
            value = spec.options[0] if (spec.kind == "select" and spec.options and record is None) else ""
        form[spec.name] = value
    return form


def missing_required(resource_key: str, form: Mapping[str, Any]) -> Optional[str]:
    """Label of the first empty required input, or None."""
    for spec in editor_fields(resource_key):
        if spec.required and str(form.get(spec.name) or "").strip() == "":
            return spec.label
    return None


def statistics_tiles(statistics: Mapping[str, Any], limit: int = 6) -> List[Tuple[str, str]]:
    """Flat ``(label, value)`` pairs for the scalar entries of a statistics payload."""
    tiles: List[Tuple[str, str]] = []
    for key, value in statistics.items():
        if isinstance(value, (Mapping, list, tuple)):
            continue
        tiles.append((str(key).replace("_", " ").capitalize(), str(value)))
        if len(tiles) >= limit:
            break
    return tiles


def filter_options(values: Sequence[str]) -> Dict[str, str]:
    options = {"all": "All"}
    options.update({value: value.replace("_", " ").capitalize() for value in values})
    return options

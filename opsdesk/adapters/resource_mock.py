from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..domain.entities import PAGE_SIZE
from ..domain.ports import Payload, RecordId, ResourcePath

from .api_errors import ApiClientError

# Query params whose record field has a different name.
_PARAM_FIELDS = {"availability": "availability_status"}
_TEMPLATE_BYTES = b"PK\x03\x04opsdesk-template"


@dataclass
class ResourceApiMock:
    """Offline substitute for the REST adapters with deterministic responses.

    Implements the resource, auth and profile ports over in-memory records
    stored in backend shape. Every call is appended to ``calls`` as
    ``(operation, resource, detail)`` so tests can assert on traffic.
    """

    page_size: int = PAGE_SIZE
    records: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    statistics_payloads: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    upload_result: Dict[str, Any] = field(
        default_factory=lambda: {"success_count": 0, "failed_count": 0, "errors": []}
    )
    user: Dict[str, Any] = field(
        default_factory=lambda: {
            "id": 1,
            "username": "owner",
            "email": "owner@example.com",
            "first_name": "Site",
            "last_name": "Owner",
            "is_staff": True,
            "is_superuser": True,
        }
    )
    password: str = "owner123"
    dashboard_payload: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.calls: List[Tuple[str, str, Any]] = []
        self.profile: Dict[str, Any] = dict(self.user)
        self._logged_in = False
        self._failures: Dict[str, List[Exception]] = {}
        self._next_ids: Dict[str, int] = {
            resource: max((int(row.get("id", 0)) for row in rows), default=0) + 1
            for resource, rows in self.records.items()
        }

    # ---------- Test helpers ----------

    def fail_next(self, operation: str, exc: Exception) -> None:
        """Make the next call to ``operation`` raise ``exc``."""
        self._failures.setdefault(operation, []).append(exc)

    def seed(self, resource: ResourcePath, rows: List[Mapping[str, Any]]) -> None:
        stored = self.records.setdefault(resource, [])
        for row in rows:
            record = dict(row)
            if "id" not in record:
                record["id"] = self._allocate_id(resource)
            else:
                self._next_ids[resource] = max(self._next_ids.get(resource, 1), int(record["id"]) + 1)
            stored.append(record)

    def calls_for(self, operation: str, resource: Optional[str] = None) -> List[Tuple[str, str, Any]]:
        return [
            call
            for call in self.calls
            if call[0] == operation and (resource is None or call[1] == resource)
        ]

    def _record(self, operation: str, resource: str, detail: Any = None) -> None:
        self.calls.append((operation, resource, detail))
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def _allocate_id(self, resource: str) -> int:
        next_id = self._next_ids.get(resource, 1)
        self._next_ids[resource] = next_id + 1
        return next_id

    def _find(self, resource: str, record_id: RecordId) -> Dict[str, Any]:
        for row in self.records.get(resource, []):
            if int(row.get("id", 0)) == int(record_id):
                return row
        raise ApiClientError(
            f"{resource}/{record_id}: Not found. (HTTP 404)",
            status=404,
            payload={"detail": "Not found."},
            context=f"retrieve[{resource}/{record_id}]",
        )

    # ---------- ResourcePort ----------

    @staticmethod
    def _matches(row: Mapping[str, Any], params: Mapping[str, Any]) -> bool:
        search = str(params.get("search") or "").lower()
        if search:
            haystack = " ".join(str(value) for value in row.values() if isinstance(value, (str, int)))
            if search not in haystack.lower():
                return False
        for key, wanted in params.items():
            if key in ("search", "page"):
                continue
            field_name = _PARAM_FIELDS.get(key, key)
            if field_name not in row:
                continue
            actual = row[field_name]
            actual_text = str(actual).lower() if isinstance(actual, bool) else str(actual)
            if actual_text != str(wanted):
                return False
        return True

    def list(self, resource: ResourcePath, params: Mapping[str, Any]) -> Payload:
        self._record("list", resource, dict(params))
        rows = [row for row in self.records.get(resource, []) if self._matches(row, params)]
        page = max(1, int(params.get("page") or 1))
        start = (page - 1) * self.page_size
        pages = max(1, math.ceil(len(rows) / self.page_size))
        return {
            "count": len(rows),
            "next": page + 1 if page < pages else None,
            "previous": page - 1 if page > 1 else None,
            "results": [dict(row) for row in rows[start:start + self.page_size]],
        }

    def retrieve(self, resource: ResourcePath, record_id: RecordId) -> Payload:
        self._record("retrieve", resource, record_id)
        return dict(self._find(resource, record_id))

    def create(self, resource: ResourcePath, body: Mapping[str, Any]) -> Payload:
        self._record("create", resource, dict(body))
        record = dict(body)
        record["id"] = self._allocate_id(resource)
        if "first_name" in record and "full_name" not in record:
            record["full_name"] = f"{record.get('first_name', '')} {record.get('last_name', '')}".strip()
        self.records.setdefault(resource, []).append(record)
        return dict(record)

    def update(self, resource: ResourcePath, record_id: RecordId, body: Mapping[str, Any]) -> Payload:
        self._record("update", resource, (record_id, dict(body)))
        record = self._find(resource, record_id)
        record.update(body)
        return dict(record)

    def delete(self, resource: ResourcePath, record_id: RecordId) -> None:
        self._record("delete", resource, record_id)
        record = self._find(resource, record_id)
        self.records[resource].remove(record)

    def statistics(self, resource: ResourcePath, params: Optional[Mapping[str, Any]] = None) -> Payload:
        self._record("statistics", resource, dict(params or {}))
        if resource in self.statistics_payloads:
            return dict(self.statistics_payloads[resource])
        return {"total": len(self.records.get(resource, []))}

    def action(
        self,
        resource: ResourcePath,
        name: str,
        *,
        record_id: Optional[RecordId] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Payload:
        self._record("action", resource, (name, record_id, dict(body or {})))
        if name in ("approve", "reject") and record_id is not None:
            record = self._find(resource, record_id)
            record["approval_status"] = "approved" if name == "approve" else "rejected"
            return dict(record)
        ids = [int(item) for item in (body or {}).get("task_ids", [])]
        if name == "bulk-approve":
            for row in self.records.get(resource, []):
                if int(row.get("id", 0)) in ids:
                    row["approval_status"] = "approved"
            return {"approved_count": len(ids)}
        if name == "bulk-delete":
            kept = [row for row in self.records.get(resource, []) if int(row.get("id", 0)) not in ids]
            deleted = len(self.records.get(resource, [])) - len(kept)
            self.records[resource] = kept
            return {"deleted_count": deleted}
        return {}

    def bulk_upload(self, resource: ResourcePath, file_path: str | Path) -> Payload:
        self._record("bulk_upload", resource, str(file_path))
        return dict(self.upload_result)

    def download_template(self, resource: ResourcePath) -> bytes:
        self._record("download_template", resource)
        return _TEMPLATE_BYTES

    def update_billing(self, billing_id: RecordId, body: Mapping[str, Any]) -> Payload:
        self._record("update_billing", "amc-billings", (billing_id, dict(body)))
        for amc in self.records.get("amcs", []):
            for billing in amc.get("billings") or []:
                if int(billing.get("id", 0)) == int(billing_id):
                    billing.update(body)
                    if not body.get("paid", True):
                        billing["payment_date"] = None
                        billing["payment_mode"] = None
                    return dict(billing)
        raise ApiClientError(
            f"amc-billings/{billing_id}: Not found. (HTTP 404)",
            status=404,
            payload={"detail": "Not found."},
            context=f"update_billing[{billing_id}]",
        )

    def dashboard(self) -> Payload:
        self._record("dashboard", "dashboard")
        if self.dashboard_payload is not None:
            return dict(self.dashboard_payload)
        records = self.records
        return {
            "total_clients": len(records.get("clients", [])),
            "active_amcs_count": sum(1 for row in records.get("amcs", []) if row.get("status") == "Active"),
            "active_tenders_count": sum(
                1 for row in records.get("tenders", []) if row.get("status") in ("Filed", "Awarded")
            ),
            "in_progress_tasks_count": sum(
                1 for row in records.get("tasks", []) if row.get("status") == "In Progress"
            ),
            "expiring_amcs": [],
            "recent_activities": [],
        }

    # ---------- AuthPort ----------

    def login(self, login_identifier: str, password: str, remember_me: bool = False) -> Payload:
        self._record("login", "authentication", login_identifier)
        known = {self.user.get("username"), self.user.get("email")}
        if login_identifier not in known or password != self.password:
            raise ApiClientError(
                "login: Invalid credentials (HTTP 401)",
                status=401,
                payload={"error": "Invalid credentials"},
                context="login",
            )
        self._logged_in = True
        return {"success": True, "message": "Login successful", "user": dict(self.user)}

    def current_user(self) -> Payload:
        self._record("current_user", "authentication")
        if not self._logged_in:
            raise ApiClientError(
                "current_user: Authentication credentials were not provided. (HTTP 403)",
                status=403,
                payload={"detail": "Authentication credentials were not provided."},
                context="current_user",
            )
        return {"user": dict(self.user)}

    def logout(self) -> None:
        self._record("logout", "authentication")
        self._logged_in = False

    # ---------- ProfilePort ----------

    def get_profile(self) -> Payload:
        self._record("get_profile", "profile")
        return dict(self.profile)

    def update_profile(self, body: Mapping[str, Any]) -> Payload:
        self._record("update_profile", "profile", dict(body))
        for key, value in body.items():
            if key.endswith("_password"):
                continue
            self.profile[key] = value
        return dict(self.profile)


def demo_records() -> Dict[str, List[Dict[str, Any]]]:
    """Sample backend records used by ``opsdesk-web --mock``."""
    workers = [
        {
            "id": idx,
            "full_name": name,
            "email": f"{name.split()[0].lower()}@example.com",
            "phone_number": f"98765{idx:05d}",
            "worker_type": worker_type,
            "monthly_salary": f"{salary}.00",
            "department": "Operations",
            "availability_status": "assigned" if idx % 3 == 0 else "available",
            "project": 1 if idx % 3 == 0 else None,
            "project_name": "Metro Line" if idx % 3 == 0 else None,
            "created_at": "2024-01-15T09:30:00Z",
        }
        for idx, (name, worker_type, salary) in enumerate(
            [
                ("John Mathew", "Skilled", 24000),
                ("Asha Rani", "Semi-Skilled", 18000),
                ("Ravi Kumar", "Unskilled", 14000),
                ("Johnson Das", "Skilled", 26000),
                ("Meena Iyer", "Semi-Skilled", 17500),
            ],
            start=1,
        )
    ]
    clients = [
        {
            "id": 1,
            "full_name": "Sunrise Apartments",
            "email": "admin@sunrise.example.com",
            "phone_number": "9811100001",
            "has_active_amc": True,
            "created_at": "2024-02-01T10:00:00Z",
        },
        {
            "id": 2,
            "full_name": "Lakeview Mall",
            "email": "facilities@lakeview.example.com",
            "phone_number": "9811100002",
            "has_active_amc": False,
            "created_at": "2024-03-12T10:00:00Z",
        },
    ]
    amcs = [
        {
            "id": 1,
            "client_id": 1,
            "client_name": "Sunrise Apartments",
            "amc_number": "AMC-2024-001",
            "start_date": "2024-04-01",
            "end_date": "2025-03-31",
            "status": "Active",
            "billing_cycle": "Quarterly",
            "amount": "120000.00",
            "created_at": "2024-03-20T10:00:00Z",
            "billings": [
                {
                    "id": 10 + quarter,
                    "bill_number": f"AMC-2024-001/Q{quarter}",
                    "period_from": start,
                    "period_to": end,
                    "amount": "30000.00",
                    "paid": quarter == 1,
                    "payment_date": "2024-06-28" if quarter == 1 else None,
                    "payment_mode": "Bank Transfer" if quarter == 1 else None,
                }
                for quarter, (start, end) in enumerate(
                    [
                        ("2024-04-01", "2024-06-30"),
                        ("2024-07-01", "2024-09-30"),
                        ("2024-10-01", "2024-12-31"),
                        ("2025-01-01", "2025-03-31"),
                    ],
                    start=1,
                )
            ],
        }
    ]
    tenders = [
        {
            "id": 1,
            "name": "Street lighting maintenance",
            "reference_number": "TND-2024-17",
            "filed_date": "2024-05-02",
            "start_date": "2024-06-01",
            "end_date": "2025-05-31",
            "estimated_value": "850000.00",
            "status": "Filed",
            "created_at": "2024-05-02T08:00:00Z",
        }
    ]
    tasks = [
        {
            "id": 1,
            "employee": 1,
            "employee_name": "John Mathew",
            "project": 1,
            "project_name": "Metro Line",
            "task_name": "Inspect pump room",
            "deadline": "2024-07-10",
            "location": "Block B",
            "time_taken_minutes": 90,
            "status": "Draft",
            "approval_status": "pending",
            "created_at": "2024-07-01T08:00:00Z",
        }
    ]
    firms = [
        {
            "id": 1,
            "firm_name": "Sharma Facility Services",
            "firm_type": "Pvt Ltd",
            "firm_owner_profile": 1,
            "firm_owner_name": "Site Owner",
            "official_email": "office@sharma.example.com",
            "created_at": "2023-11-01T08:00:00Z",
        }
    ]
    bank_accounts = [
        {
            "id": 1,
            "profile_id": 1,
            "profile_name": "Site Owner",
            "bank_name": "State Bank of India",
            "account_number": "00112233445",
            "ifsc_code": "SBIN0000123",
            "branch": "MG Road",
            "created_at": "2023-11-01T08:00:00Z",
        }
    ]
    return {
        "contract-workers": workers,
        "clients": clients,
        "amcs": amcs,
        "tenders": tenders,
        "tasks": tasks,
        "firms": firms,
        "bank-accounts": bank_accounts,
    }


__all__ = ["ResourceApiMock", "demo_records"]

from __future__ import annotations

from datetime import date

import pytest

from opsdesk.adapters.api_errors import ApiServerError
from opsdesk.adapters.resource_mock import ResourceApiMock, demo_records
from opsdesk.domain.ports import UseCaseError
from opsdesk.usecases.amc_billing import SetBillingPaid
from opsdesk.usecases.fetch_dashboard import FetchDashboard


@pytest.fixture
def backend() -> ResourceApiMock:
    return ResourceApiMock(records=demo_records())


def _fixed_day() -> date:
    return date(2024, 9, 30)


def _billing(backend: ResourceApiMock, billing_id: int) -> dict:
    rows = backend.records["amcs"][0]["billings"]
    return next(row for row in rows if row["id"] == billing_id)


# ---------- AMC billing ----------


def test_mark_paid_sends_date_and_mode(backend) -> None:
    billing = SetBillingPaid(backend, today=_fixed_day)(12, True, 1)

    assert billing.paid is True
    assert billing.payment_date == "2024-09-30"
    assert billing.payment_mode == "Bank Transfer"
    assert billing.amc_id == 1
    assert backend.calls_for("update_billing") == [
        (
            "update_billing",
            "amc-billings",
            (12, {"paid": True, "payment_date": "2024-09-30", "payment_mode": "Bank Transfer"}),
        )
    ]


def test_mark_unpaid_clears_payment_fields(backend) -> None:
    billing = SetBillingPaid(backend, today=_fixed_day)(11, False, 1)

    assert billing.paid is False
    assert billing.payment_date == ""
    assert backend.calls_for("update_billing")[0][2] == (11, {"paid": False})
    assert _billing(backend, 11)["payment_mode"] is None


def test_unknown_billing_is_not_found(backend) -> None:
    with pytest.raises(UseCaseError) as info:
        SetBillingPaid(backend, today=_fixed_day)(99, True)

    assert info.value.code == "NOT_FOUND"
    assert info.value.message == "Failed to update billing status."


def test_billing_server_failure_keeps_row_unchanged(backend) -> None:
    backend.fail_next("update_billing", ApiServerError("boom", status=500, payload={"detail": "Database down"}))

    with pytest.raises(UseCaseError) as info:
        SetBillingPaid(backend, today=_fixed_day)(12, True, 1)

    assert info.value.code == "SERVER_ERROR"
    assert info.value.message == "Database down"
    assert _billing(backend, 12)["paid"] is False


# ---------- Dashboard ----------


def test_dashboard_counts_demo_records(backend) -> None:
    stats = FetchDashboard(backend)()

    assert (stats.total_clients, stats.active_amcs, stats.active_tenders, stats.tasks_in_progress) == (2, 1, 1, 0)
    assert stats.expiring_amcs == ()
    assert stats.recent_activities == ()


def test_dashboard_maps_expiring_amcs_and_activity(backend) -> None:
    backend.dashboard_payload = {
        "total_clients": 5,
        "expiring_amcs": [
            {
                "client_name": "Sunrise Apartments",
                "amc_number": "AMC-2024-001",
                "amc_expiry_date": "2025-03-31",
                "expiry_count_days": 12,
            }
        ],
        "recent_activities": [
            {
                "id": 7,
                "action": "amc_created",
                "description": "AMC created",
                "created_at": "2025-03-01T09:00:00Z",
                "created_by_username": "owner",
            }
        ],
    }

    stats = FetchDashboard(backend)()

    assert stats.total_clients == 5
    assert stats.active_amcs == 0
    assert stats.expiring_amcs[0].days_left == 12
    assert stats.expiring_amcs[0].expiry_date == "2025-03-31"
    assert stats.recent_activities[0].created_by == "owner"


def test_dashboard_failure_uses_generic_message(backend) -> None:
    backend.fail_next("dashboard", RuntimeError("socket closed"))

    with pytest.raises(UseCaseError) as info:
        FetchDashboard(backend)()

    assert info.value.code == "DASHBOARD_FAILED"
    assert info.value.message == "Failed to load dashboard data: socket closed"

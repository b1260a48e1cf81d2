from __future__ import annotations

from datetime import date
from typing import List, Tuple

import pytest

from opsdesk.adapters.api_errors import ApiServerError
from opsdesk.adapters.resource_mock import ResourceApiMock, demo_records
from opsdesk.domain.entities import AmcBilling, DashboardStats
from opsdesk.domain.ports import UseCaseError
from opsdesk.usecases.amc_billing import SetBillingPaid
from opsdesk.usecases.fetch_dashboard import FetchDashboard
from opsdesk.usecases.fetch_resource_detail import FetchResourceDetail
from opsdesk.usecases.fetch_resource_page import FetchResourcePage
from opsdesk.viewmodels.amcs_vm import AmcListVM, billing_totals
from opsdesk.viewmodels.dashboard_vm import DashboardVM


@pytest.fixture
def backend() -> ResourceApiMock:
    return ResourceApiMock(records=demo_records())


def _amc_vm(backend: ResourceApiMock) -> AmcListVM:
    alerts: List[Tuple[str, str, str]] = []
    vm = AmcListVM(
        fetch_page=FetchResourcePage(backend),
        fetch_detail=FetchResourceDetail(backend),
        set_billing_paid=SetBillingPaid(backend, today=lambda: date(2024, 9, 30)),
        on_alert=lambda title, message, level: alerts.append((title, message, level)),
    )
    vm.alerts = alerts  # type: ignore[attr-defined]
    return vm


def test_billing_totals_split_paid_and_outstanding() -> None:
    rows = [
        AmcBilling(id=1, amount=100.0, paid=True),
        AmcBilling(id=2, amount=50.0),
        AmcBilling(id=3, amount=25.5),
    ]

    assert billing_totals(rows) == (175.5, 100.0, 75.5)
    assert billing_totals([]) == (0, 0, 0)


def test_toggle_marks_paid_and_reloads_open_amc(backend) -> None:
    vm = _amc_vm(backend)
    assert vm.open_detail(1) is True
    assert [row.paid for row in vm.billings] == [True, False, False, False]

    assert vm.toggle_billing_paid(12) is True

    assert [row.paid for row in vm.billings] == [True, True, False, False]
    assert vm.billings[1].payment_date == "2024-09-30"
    assert vm.updating_billing is None
    assert [call[0] for call in backend.calls] == ["retrieve", "update_billing", "retrieve"]
    assert billing_totals(vm.billings) == (120000.0, 60000.0, 60000.0)


def test_toggle_back_to_unpaid(backend) -> None:
    vm = _amc_vm(backend)
    vm.open_detail(1)

    assert vm.toggle_billing_paid(11) is True

    assert vm.billings[0].paid is False
    assert vm.billings[0].payment_date == ""
    assert backend.calls_for("update_billing")[0][2] == (11, {"paid": False})


def test_toggle_failure_alerts_and_keeps_rows(backend) -> None:
    vm = _amc_vm(backend)
    vm.open_detail(1)
    backend.fail_next("update_billing", ApiServerError("boom", status=500, payload={"detail": "Database down"}))

    assert vm.toggle_billing_paid(12) is False

    assert vm.alerts == [("Error", "Database down", "error")]
    assert vm.billings[1].paid is False
    assert vm.updating_billing is None
    assert len(backend.calls_for("retrieve")) == 1


def test_toggle_ignores_rows_of_other_amcs(backend) -> None:
    vm = _amc_vm(backend)

    assert vm.toggle_billing_paid(12) is False
    assert backend.calls_for("update_billing") == []


# ---------- Dashboard ----------


def test_dashboard_tiles_follow_counters(backend) -> None:
    changes: List[bool] = []
    vm = DashboardVM(load=FetchDashboard(backend), on_changed=lambda v: changes.append(v.is_loading))

    assert vm.tiles() == []
    vm.load()

    assert vm.tiles() == [
        ("Total Clients", "2"),
        ("Active AMCs", "1"),
        ("Active Tenders", "1"),
        ("Tasks In Progress", "0"),
    ]
    assert changes == [True, False]


def test_dashboard_error_keeps_previous_stats() -> None:
    stats = DashboardStats(total_clients=3)
    outcomes = [stats]

    def load() -> DashboardStats:
        if outcomes:
            return outcomes.pop()
        raise UseCaseError("DASHBOARD_FAILED", "Failed to load dashboard data.")

    vm = DashboardVM(load=load)
    vm.load()
    vm.load()

    assert vm.error == "Failed to load dashboard data."
    assert vm.stats is stats
    assert vm.is_loading is False

from __future__ import annotations

import pytest

from opsdesk.domain.entities import AmcBilling, Client, ContractWorker, Tender, TenderFinancials
from opsdesk.domain.resources import RESOURCES
from opsdesk.viewmodels.settings_vm import SettingsVM
from opsdesk.web_ui.viewmodels import (
    LoginFormVM,
    WebSettingsVM,
    billing_table_rows,
    detail_rows,
    editor_fields,
    filter_options,
    financial_rows,
    form_from_record,
    missing_required,
    parse_settings_json,
    statistics_tiles,
    table_columns,
)


def test_every_resource_has_editor_and_columns() -> None:
    for key in RESOURCES:
        assert editor_fields(key)
        assert table_columns(key)
    with pytest.raises(ValueError):
        editor_fields("payments")


def test_table_columns_shape() -> None:
    first = table_columns("tasks")[0]

    assert first == {"name": "description", "label": "Task", "field": "description", "align": "left", "sortable": False}


def test_new_form_defaults_selects_to_first_option() -> None:
    form = form_from_record("contract-workers")

    assert form["first_name"] == ""
    assert form["gender"] == "Male"
    assert form["worker_type"] == "Unskilled"


def test_edit_form_uses_record_values() -> None:
    worker = ContractWorker(id=4, first_name="Asha", phone="98", project_id=None, worker_type="Semi-Skilled")

    form = form_from_record("contract-workers", worker)

    assert form["first_name"] == "Asha"
    assert form["phone"] == "98"
    assert form["project_id"] == ""
    assert form["worker_type"] == "Semi-Skilled"
    assert "id" not in form


def test_tender_form_flattens_financials() -> None:
    tender = Tender(id=9, name="Bridge", financials=TenderFinancials(tender_id=9, dd_number="DD1", sd1_amount=250.0))

    form = form_from_record("tenders", tender)

    assert form["dd_number"] == "DD1"
    assert form["sd1_amount"] == 250.0
    assert "tender_id" not in form


def test_missing_required_reports_first_label() -> None:
    form = form_from_record("bank-accounts")
    form["profile_id"] = "3"

    assert missing_required("bank-accounts", form) == "Bank name"

    form.update(bank_name="SBI", account_number="1", ifsc_code="SBIN0")
    assert missing_required("bank-accounts", form) is None


def test_statistics_tiles_skip_nested_values() -> None:
    stats = {"total_workers": 12, "by_type": {"Skilled": 4}, "available": 8}

    assert statistics_tiles(stats) == [("Total workers", "12"), ("Available", "8")]
    assert len(statistics_tiles({f"k{n}": n for n in range(10)})) == 6


def test_filter_options_prepend_all() -> None:
    assert filter_options(("this_week", "today")) == {"all": "All", "this_week": "This week", "today": "Today"}


def test_web_settings_round_trip_into_core_vm() -> None:
    core = SettingsVM()
    form = WebSettingsVM.from_settings_vm(core)
    form.api_base_url = " https://ops.example.com "
    form.request_timeout_s = "30"

    form.apply_to_settings_vm(core)

    assert core.api_base_url == "https://ops.example.com"
    assert core.request_timeout_s == 30


def test_web_settings_from_bad_payload() -> None:
    with pytest.raises(ValueError):
        WebSettingsVM.from_payload(["not", "a", "mapping"])

    assert WebSettingsVM.from_payload({"request_timeout_s": "soon"}).request_timeout_s == 10


def test_parse_settings_json() -> None:
    assert parse_settings_json('{"api_prefix": "/api"}') == {"api_prefix": "/api"}
    with pytest.raises(ValueError):
        parse_settings_json("[1]")
    with pytest.raises(ValueError):
        parse_settings_json("{broken")


def test_login_form_clears_password() -> None:
    form = LoginFormVM("owner", "secret", True)

    form.clear_password()

    assert form.password == ""
    assert form.login_identifier == "owner"


def test_detail_rows_list_table_columns_then_editor_extras() -> None:
    client = Client(id=3, name="Lakeview Mall", city="Pune", amc_count=2, tags=("mall", "vip"))

    rows = dict(detail_rows("clients", client))

    assert list(rows)[:5] == ["Name", "Contact", "Email", "City", "AMCs"]
    assert rows["Name"] == "Lakeview Mall"
    assert rows["AMCs"] == "2"
    assert rows["Contact"] == "-"
    assert rows["PIN code"] == "-"


def test_financial_rows_for_tender() -> None:
    financials = TenderFinancials(tender_id=1, emd_amount=5000.0, sd1_amount=1000.0, sd1_refunded=True)

    rows = dict(financial_rows(financials))

    assert rows["EMD amount"] == "5000.0"
    assert rows["SD1 refunded"] == "Yes"
    assert rows["DD amount"] == "-"
    assert financial_rows(None) == []
    assert financial_rows(Tender(id=1).financials) == []


def test_billing_rows_show_paid_state() -> None:
    rows = billing_table_rows(
        [
            AmcBilling(id=11, bill_number="Q1", amount=300.0, paid=True, payment_date="2024-06-28"),
            AmcBilling(id=12, amount=300.0),
        ]
    )

    assert [(row["bill_number"], row["status"], row["payment_date"]) for row in rows] == [
        ("Q1", "Paid", "2024-06-28"),
        ("#12", "Unpaid", "-"),
    ]

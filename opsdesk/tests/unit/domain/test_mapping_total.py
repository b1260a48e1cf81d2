from __future__ import annotations

import json

import pytest

from opsdesk.domain import mapping
from opsdesk.domain.entities import DEFAULT_COUNTRY, UNKNOWN_NAME


ALL_MAPPERS = [
    mapping.map_worker_list_item,
    mapping.map_worker_detail,
    mapping.map_amc_list_item,
    mapping.map_amc_detail,
    mapping.map_firm,
    mapping.map_bank_account,
    mapping.map_tender_list_item,
    mapping.map_tender_detail,
    mapping.map_task_list_item,
    mapping.map_task_detail,
    mapping.map_client_list_item,
    mapping.map_client_detail,
    mapping.map_profile,
    mapping.map_user,
    mapping.map_bulk_upload_result,
    mapping.map_bulk_action_result,
    mapping.map_dashboard_stats,
]


HUGE_NUMBER_RECORD = json.loads(
    '{"id": 1, "monthly_salary": 1' + "0" * 400 + ', "amount": "1e999", "total_amount": "-inf", "count": "1e999"}'
)


@pytest.mark.parametrize("mapper", ALL_MAPPERS)
@pytest.mark.parametrize("payload", [None, [], "oops", 42, {}, {"id": None, "full_name": 7}, HUGE_NUMBER_RECORD])
def test_mappers_never_raise(mapper, payload) -> None:
    mapper(payload)


def test_worker_list_item_splits_name_and_derives_status() -> None:
    worker = mapping.map_worker_list_item(
        {
            "id": 7,
            "full_name": "Asha Rani Devi",
            "phone_number": "9876543210",
            "monthly_salary": "12000.50",
            "availability_status": "assigned",
            "worker_type": "Skilled",
        }
    )

    assert worker.first_name == "Asha"
    assert worker.last_name == "Rani Devi"
    assert worker.name == "Asha Rani Devi"
    assert worker.worker_code == "CW-7"
    assert worker.phone == "9876543210"
    assert worker.monthly_salary == 12000.5
    assert worker.status == "Assigned"


def test_worker_list_item_defaults() -> None:
    worker = mapping.map_worker_list_item({"id": 3, "monthly_salary": "abc"})

    assert worker.monthly_salary == 0.0
    assert worker.country == DEFAULT_COUNTRY
    assert worker.gender == "Male"
    assert worker.status == "Available"


def test_worker_detail_reads_bank_account_and_project() -> None:
    worker = mapping.map_worker_detail(
        {
            "id": 2,
            "full_name": "Meena",
            "gender": "FEMALE",
            "pin_code": "560001",
            "aadhar_no": "1234",
            "project": 5,
            "bank_account": {
                "bank_name": "SBI",
                "account_number": "001",
                "ifsc_code": "SBIN0001",
                "branch": "MG Road",
            },
        }
    )

    assert worker.first_name == "Meena"
    assert worker.last_name == ""
    assert worker.gender == "Female"
    assert worker.pincode == "560001"
    assert worker.aadhar_number == "1234"
    assert worker.bank_ifsc == "SBIN0001"
    assert worker.bank_branch == "MG Road"
    assert worker.project_id == 5
    assert worker.status == "Assigned"


def test_amc_detail_maps_billings_with_parent_id() -> None:
    amc = mapping.map_amc_detail(
        {
            "id": 11,
            "client": 4,
            "amount": "5000",
            "billings": [{"id": 1, "amount": "1250", "paid": "true"}, "junk"],
        }
    )

    assert amc.client_id == 4
    assert amc.amount == 5000.0
    assert len(amc.billings) == 2
    assert amc.billings[0].amc_id == 11
    assert amc.billings[0].paid is True
    assert amc.billings[1].id == 0


def test_firm_and_bank_account_unknown_names() -> None:
    firm = mapping.map_firm({"id": 1, "type_display": "LLP", "official_mobile_number": "99"})
    account = mapping.map_bank_account({"id": 2, "profile_name": ""})

    assert firm.firm_type == "LLP"
    assert firm.official_mobile == "99"
    assert firm.owner_profile_name == UNKNOWN_NAME
    assert account.profile_name == UNKNOWN_NAME
    assert account.account_holder_name == UNKNOWN_NAME


def test_tender_detail_financials_from_deposits() -> None:
    tender = mapping.map_tender_detail(
        {
            "id": 9,
            "status": "Awarded",
            "total_emd_cost": "1000",
            "security_deposit_1": "250",
            "deposits": [
                {
                    "deposit_type": "EMD_Security1",
                    "is_refunded": True,
                    "refund_date": "2024-02-01",
                    "dd_date": "2024-01-10",
                    "dd_number": "DD1",
                    "dd_amount": "250",
                    "bank_name": "HDFC",
                }
            ],
        }
    )

    financials = tender.financials
    assert financials is not None
    assert financials.tender_id == 9
    assert financials.emd_amount == 1000.0
    assert financials.emd_refundable is False
    assert financials.sd1_amount == 250.0
    assert financials.sd1_refunded is True
    assert financials.dd_number == "DD1"
    assert financials.dd_amount == 250.0
    assert financials.dd_bank_name == "HDFC"
    assert financials.sd2_refunded is False


def test_tender_detail_unknown_status_is_closed() -> None:
    assert mapping.map_tender_detail({"status": "Whatever"}).status == "Closed"


@pytest.mark.parametrize(
    "backend, console",
    [("Draft", "Open"), ("In Progress", "In Progress"), ("Completed", "Completed"), ("Canceled", "Rejected"), ("x", "Open"), (None, "Open")],
)
def test_task_status_from_backend(backend, console) -> None:
    assert mapping.task_status_from_backend(backend) == console


def test_task_list_item_fields() -> None:
    task = mapping.map_task_list_item(
        {"id": 4, "task_name": "Inspect pump", "deadline": "2024-03-01", "status": "Draft", "project": 0}
    )

    assert task.description == "Inspect pump"
    assert task.date == "2024-03-01"
    assert task.status == "Open"
    assert task.approval_status == "pending"
    assert task.priority == "Medium"
    assert task.project_id is None


def test_client_names() -> None:
    listed = mapping.map_client_list_item({"id": 1, "first_name": "Acme", "last_name": "Ltd", "has_active_amc": True})
    detail = mapping.map_client_detail({"id": 1})

    assert listed.name == "Acme Ltd"
    assert listed.amc_count == 1
    assert detail.name == "Client"
    assert detail.country == DEFAULT_COUNTRY


def test_map_user_unwraps_envelope() -> None:
    user = mapping.map_user({"user": {"id": 3, "username": "ops", "is_staff": True}})

    assert user.id == 3
    assert user.is_authorized is True
    assert user.display_name == "ops"


def test_bulk_upload_result_formats_row_errors() -> None:
    result = mapping.map_bulk_upload_result(
        {
            "success_count": 2,
            "failed_count": -1,
            "errors": [{"row": 3, "error": "Email exists"}, "Bad phone", None, ""],
        }
    )

    assert result.success_count == 2
    assert result.failed_count == 0
    assert result.errors == ("Row 3: Email exists", "Bad phone")


def test_extract_results_accepts_bare_list_and_pages() -> None:
    assert mapping.extract_results([{"id": 1}, "x"]) == ([{"id": 1}], 1)
    rows, count = mapping.extract_results({"results": [{"id": 1}], "count": "41"})
    assert rows == [{"id": 1}]
    assert count == 41
    assert mapping.extract_results({"results": None}) == ([], 0)


@pytest.mark.parametrize("value, expected", [("12", 12), ("12.7", 12), (float("inf"), 0), (float("nan"), 0), (True, 0), (None, 0)])
def test_integer_coercion(value, expected) -> None:
    assert mapping.integer(value) == expected


def test_out_of_range_numbers_fall_back_to_default() -> None:
    worker = mapping.map_worker_list_item(HUGE_NUMBER_RECORD)

    assert worker.monthly_salary == 0.0
    assert mapping.number("1e999") == 0.0
    assert mapping.number(float("-inf"), default=5.0) == 5.0
    assert mapping.integer("1e999") == 0


def test_dashboard_stats_skip_malformed_feed_rows() -> None:
    stats = mapping.map_dashboard_stats(
        {
            "total_clients": "12",
            "active_amcs_count": -3,
            "expiring_amcs": [
                "oops",
                {"client_name": "Lakeview Mall", "amc_number": "AMC-7", "expiry_count_days": "4"},
            ],
            "recent_activities": {"id": 1},
        }
    )

    assert stats.total_clients == 12
    assert stats.active_amcs == 0
    assert [(amc.client_name, amc.days_left) for amc in stats.expiring_amcs] == [("Lakeview Mall", 4)]
    assert stats.recent_activities == ()

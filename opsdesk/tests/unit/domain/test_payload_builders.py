from __future__ import annotations

import pytest

from opsdesk.domain import payloads


WORKER_FORM = {
    "first_name": "John",
    "last_name": "Mathew",
    "email": "john@example.com",
    "worker_type": "Skilled",
    "monthly_salary": "15000",
    "aadhar_number": "1111",
    "gender": "Female",
    "phone": "",
    "bank_name": "",
    "city": "",
    "project_id": "3",
}


def test_worker_create_omits_blank_optionals() -> None:
    body = payloads.build_worker_create(WORKER_FORM)

    assert body["monthly_salary"] == 15000.0
    assert body["aadhar_no"] == "1111"
    assert body["gender"] == "female"
    assert body["project"] == 3
    assert "phone_number" not in body
    assert "bank_name" not in body
    assert "city" not in body


def test_worker_update_sends_clearable_fields_as_empty() -> None:
    body = payloads.build_worker_update(WORKER_FORM)

    assert body["phone_number"] == ""
    assert body["bank_name"] == ""
    assert body["ifsc_code"] == ""
    assert "city" not in body


def test_worker_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        payloads.build_worker_create({**WORKER_FORM, "worker_type": "Expert"})


def test_amc_create_coerces_pending_to_active() -> None:
    body = payloads.build_amc_create({"client_id": "4", "status": "Pending", "amount": "100"})

    assert body["status"] == "Active"
    assert body["client"] == 4
    assert body["amount"] == 100.0


def test_amc_update_sends_only_truthy_fields() -> None:
    body = payloads.build_amc_update({"status": "Pending", "amc_number": "", "amount": "0", "notes": ""})

    assert body == {"amount": 0.0, "notes": ""}


def test_firm_blank_optionals_are_none() -> None:
    body = payloads.build_firm_body({"firm_name": "Acme", "official_mobile": "", "owner_profile_id": "2"})

    assert body["official_mobile_number"] is None
    assert body["firm_type"] is None
    assert body["firm_owner_profile"] == 2


def test_bank_account_requires_profile() -> None:
    with pytest.raises(ValueError, match="Please select a profile"):
        payloads.build_bank_account_body({"bank_name": "SBI"})


def test_bank_account_blank_branch_is_none() -> None:
    body = payloads.build_bank_account_body(
        {"profile_id": "1", "bank_name": "SBI", "account_number": "001", "ifsc_code": "SBIN0001", "branch": ""}
    )

    assert body["branch"] is None
    assert body["profile_id"] == 1


def test_tender_adds_dd_details_per_deposit() -> None:
    body = payloads.build_tender_body(
        {
            "name": "Bridge",
            "sd1_amount": "500",
            "sd2_amount": "",
            "dd_date": "2024-01-01",
            "dd_number": "77",
            "dd_bank_name": "SBI",
        }
    )

    assert body["status"] == "Draft"
    assert body["security_deposit_1_dd_number"] == "77"
    assert body["security_deposit_1_dd_amount"] == 500.0
    assert "security_deposit_2_dd_number" not in body


def test_task_body_maps_status() -> None:
    body = payloads.build_task_body({"description": "Fix", "date": "2024-05-05", "status": "Rejected", "employee_id": "9"})

    assert body["task_name"] == "Fix"
    assert body["deadline"] == "2024-05-05"
    assert body["status"] == "Canceled"
    assert body["employee"] == 9
    assert "project" not in body


def test_client_create_and_update_conventions() -> None:
    with pytest.raises(ValueError, match="Client name is required."):
        payloads.build_client_create({"name": "   "})

    created = payloads.build_client_create({"name": " Acme ", "primary_contact_email": " ", "city": "Pune"})
    assert created == {"first_name": "Acme", "city": "Pune"}

    updated = payloads.build_client_update({"city": "", "notes": "n"})
    assert updated == {"city": "", "notes": "n"}


def test_password_change_validation() -> None:
    assert payloads.validate_password_change({}) is False
    with pytest.raises(ValueError, match="fill all password fields"):
        payloads.validate_password_change({"new_password": "abcdef"})
    with pytest.raises(ValueError, match="do not match"):
        payloads.validate_password_change(
            {"current_password": "x", "new_password": "abcdef", "confirm_password": "abcdeg"}
        )
    with pytest.raises(ValueError, match="at least 6"):
        payloads.validate_password_change(
            {"current_password": "x", "new_password": "abc", "confirm_password": "abc"}
        )


def test_profile_update_nulls_blank_fields() -> None:
    body = payloads.build_profile_update({"username": "ops", "city": "", "gender": "male"})

    assert body["username"] == "ops"
    assert body["city"] is None
    assert body["gender"] == "male"
    assert "new_password" not in body


def test_amc_amount_out_of_range_is_zeroed() -> None:
    body = payloads.build_amc_create({"client_id": "4", "amount": 10**400})

    assert body["amount"] == 0.0


def test_billing_payment_bodies() -> None:
    assert payloads.build_billing_payment(False, "2024-09-30") == {"paid": False}
    assert payloads.build_billing_payment(True, "2024-09-30") == {
        "paid": True,
        "payment_date": "2024-09-30",
        "payment_mode": "Bank Transfer",
    }


def test_billing_payment_needs_a_date_when_paid() -> None:
    with pytest.raises(ValueError):
        payloads.build_billing_payment(True, " ")

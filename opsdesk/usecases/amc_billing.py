from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from opsdesk.domain.entities import AmcBilling
from opsdesk.domain.mapping import map_amc_billing
from opsdesk.domain.payloads import build_billing_payment
from opsdesk.domain.ports import RecordId, ResourcePort, UseCaseError
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class SetBillingPaid:
    """Mark one AMC billing row paid (dated today) or unpaid."""

    resource_port: ResourcePort
    today: Callable[[], date] = field(default=date.today)

    def __call__(self, billing_id: RecordId, paid: bool, amc_id: RecordId = 0) -> AmcBilling:
        try:
            body = build_billing_payment(paid, self.today().isoformat())
            payload = self.resource_port.update_billing(billing_id, body)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="BILLING_UPDATE_FAILED",
                default_message="Failed to update billing status",
            ) from exc
        return map_amc_billing(payload, int(amc_id or 0))


__all__ = ["SetBillingPaid"]

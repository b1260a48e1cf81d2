from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from ..domain.entities import AmcBilling
from ..domain.ports import RecordId, UseCaseError
from ..domain.resources import AMCS
from .list_vm import ResourceListVM

LOGGER = logging.getLogger(__name__)

SetBillingPaidFn = Callable[[RecordId, bool, RecordId], AmcBilling]


def billing_totals(billings: Iterable[AmcBilling]) -> Tuple[float, float, float]:
    """Return ``(total, paid, outstanding)`` over the billing rows."""
    rows = list(billings)
    total = sum(row.amount for row in rows)
    paid = sum(row.amount for row in rows if row.paid)
    return total, paid, total - paid


class AmcListVM(ResourceListVM):
    """AMC list whose detail view carries the billing schedule."""

    def __init__(self, *, set_billing_paid: Optional[SetBillingPaidFn] = None, **kwargs: Any) -> None:
        super().__init__(AMCS, **kwargs)
        self._set_billing_paid = set_billing_paid
        self.updating_billing: Optional[int] = None

    @property
    def billings(self) -> Tuple[AmcBilling, ...]:
        return tuple(getattr(self.detail, "billings", ()) or ())

    def toggle_billing_paid(self, billing_id: RecordId) -> bool:
        """Flip one row between paid and unpaid, then reload the open AMC."""
        if self._set_billing_paid is None:
            raise RuntimeError("amcs: billing updates are not configured")
        amc = self.detail
        billing = next((row for row in self.billings if row.id == int(billing_id)), None)
        if amc is None or billing is None:
            LOGGER.warning("amcs: billing %s is not part of the open AMC", billing_id)
            return False
        self.updating_billing = billing.id
        self._notify()
        try:
            self._set_billing_paid(billing.id, not billing.paid, amc.id)
        except UseCaseError as err:
            LOGGER.error("amcs: billing %s update failed: %s", billing.id, err.message)
            self._alert("Error", err.message, "error")
            return False
        finally:
            self.updating_billing = None
        refreshed = self._load_detail(amc.id)
        if refreshed is not None and self.detail_open:
            self.detail = refreshed
        self._notify()
        return True


__all__ = ["AmcListVM", "billing_totals"]

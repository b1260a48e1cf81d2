"""Landing-page state: headline counters plus expiring AMCs and activity."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from ..domain.entities import DashboardStats
from ..domain.ports import UseCaseError

LOGGER = logging.getLogger(__name__)


class DashboardVM:
    def __init__(
        self,
        *,
        load: Callable[[], DashboardStats],
        on_changed: Optional[Callable[["DashboardVM"], None]] = None,
    ) -> None:
        self._load = load
        self.on_changed = on_changed
        self.stats: Optional[DashboardStats] = None
        self.is_loading: bool = False
        self.error: Optional[str] = None

    def load(self) -> None:
        self.is_loading = True
        self.error = None
        self._notify()
        try:
            self.stats = self._load()
        except UseCaseError as err:
            LOGGER.error("Dashboard load failed: %s", err.message)
            self.error = err.message
        finally:
            self.is_loading = False
        self._notify()

    def tiles(self) -> List[Tuple[str, str]]:
        if self.stats is None:
            return []
        stats = self.stats
        return [
            ("Total Clients", str(stats.total_clients)),
            ("Active AMCs", str(stats.active_amcs)),
            ("Active Tenders", str(stats.active_tenders)),
            ("Tasks In Progress", str(stats.tasks_in_progress)),
        ]

    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed(self)


__all__ = ["DashboardVM"]

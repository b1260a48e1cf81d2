"""Adapter and use-case wiring for the console runtime.

This module owns lazy construction of the REST adapters and use-case objects
that depend on values in :class:`opsdesk.viewmodels.settings_vm.SettingsVM`,
and hands out viewmodels bound to them. Viewmodels receive thin callables that
resolve the current use case on every call, so a settings change followed by
:meth:`AppController.reset` takes effect without rebuilding pages.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..adapters.auth_rest import AuthRestAdapter, ProfileRestAdapter
from ..adapters.resource_rest import ResourceRestAdapter
from ..domain.ports import AuthPort, ProfilePort, ResourcePort, UseCaseError
from ..domain.resources import AMCS, CONTRACT_WORKERS, TASKS, get_resource
from ..usecases.amc_billing import SetBillingPaid
from ..usecases.delete_resource import DeleteResource
from ..usecases.fetch_dashboard import FetchDashboard
from ..usecases.fetch_resource_detail import FetchResourceDetail
from ..usecases.fetch_resource_page import FetchResourcePage
from ..usecases.fetch_statistics import FetchStatistics
from ..usecases.profile import LoadProfile, UpdateProfile
from ..usecases.review_tasks import ApproveTask, BulkApproveTasks, BulkDeleteTasks, RejectTask
from ..usecases.save_resource import CreateResource, UpdateResource
from ..usecases.session import LoadCurrentUser, Login, Logout
from ..usecases.worker_spreadsheets import BulkImportWorkers, DownloadWorkerTemplate
from ..utils.debounce import DebounceScheduler
from ..viewmodels.amcs_vm import AmcListVM
from ..viewmodels.dashboard_vm import DashboardVM
from ..viewmodels.list_vm import AlertFn, ResourceListVM
from ..viewmodels.profile_vm import ProfileVM
from ..viewmodels.session_vm import SessionVM
from ..viewmodels.settings_vm import SettingsVM
from ..viewmodels.tasks_vm import TaskListVM
from ..viewmodels.workers_vm import ContractWorkerListVM

LOGGER = logging.getLogger(__name__)

# Use cases whose AUTH_FAILED means bad credentials, not a lost session.
_SESSION_USE_CASES = frozenset({"login", "current_user", "logout"})


class AppController:
    """Create and cache runtime adapters/use-cases from settings state.

    Call chain:
        ``opsdesk.web_ui.runtime.WebRuntime`` creates one instance per browser
        client so every client keeps its own cookie session. Viewmodels built
        through ``make_*`` call back into ``ensure_ready`` lazily.
    """

    def __init__(self, settings_vm: SettingsVM, *, backend: Any = None) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings state holding the API URL, prefix and
                timeout used to build adapters.
            backend: Optional object implementing the resource, auth and
                profile ports at once (the offline mock). When given, no
                REST adapters are built.
        """
        self.settings_vm = settings_vm
        self.backend = backend
        self.on_auth_lost: Optional[Callable[[], None]] = None
        self._resource_port: Optional[ResourcePort] = None
        self._auth_port: Optional[AuthPort] = None
        self._profile_port: Optional[ProfilePort] = None
        self.uc_fetch_page: Optional[FetchResourcePage] = None
        self.uc_fetch_detail: Optional[FetchResourceDetail] = None
        self.uc_create: Optional[CreateResource] = None
        self.uc_update: Optional[UpdateResource] = None
        self.uc_delete: Optional[DeleteResource] = None
        self.uc_statistics: Optional[FetchStatistics] = None
        self.uc_bulk_import: Optional[BulkImportWorkers] = None
        self.uc_download_template: Optional[DownloadWorkerTemplate] = None
        self.uc_approve_task: Optional[ApproveTask] = None
        self.uc_reject_task: Optional[RejectTask] = None
        self.uc_bulk_approve_tasks: Optional[BulkApproveTasks] = None
        self.uc_bulk_delete_tasks: Optional[BulkDeleteTasks] = None
        self.uc_set_billing_paid: Optional[SetBillingPaid] = None
        self.uc_fetch_dashboard: Optional[FetchDashboard] = None
        self.uc_login: Optional[Login] = None
        self.uc_current_user: Optional[LoadCurrentUser] = None
        self.uc_logout: Optional[Logout] = None
        self.uc_load_profile: Optional[LoadProfile] = None
        self.uc_update_profile: Optional[UpdateProfile] = None

    @property
    def resource_port(self) -> Optional[ResourcePort]:
        return self._resource_port

    def reset(self) -> None:
        """Drop all cached adapters and use-cases.

        The next ``ensure_ready`` call rebuilds everything from the current
        settings, which also starts a fresh cookie session.
        """
        self._resource_port = None
        self._auth_port = None
        self._profile_port = None
        for name in list(vars(self)):
            if name.startswith("uc_"):
                setattr(self, name, None)

    def close(self) -> None:
        """Release the HTTP session (if any) and drop cached use cases."""
        close = getattr(self._resource_port, "close", None)
        if self.backend is None and callable(close):
            close()
        self.reset()

    def ensure_ready(self) -> bool:
        """Ensure adapters/use-cases are available for network operations.

        Returns:
            ``True`` when dependencies are available, ``False`` when the API
            base URL in settings is not a usable http(s) URL.
        """
        if self._resource_port and self._auth_port and self._profile_port:
            return True

        if self.backend is not None:
            self._resource_port = self.backend
            self._auth_port = self.backend
            self._profile_port = self.backend
        else:
            if not self.settings_vm.is_valid():
                return False
            resource_adapter = ResourceRestAdapter(
                self.settings_vm.api_base_url,
                api_prefix=self.settings_vm.api_prefix,
                request_timeout_s=self.settings_vm.request_timeout_s,
            )
            # One session for every adapter: login cookie and CSRF token are shared.
            shared = resource_adapter.session
            self._resource_port = resource_adapter
            self._auth_port = AuthRestAdapter(
                self.settings_vm.api_base_url,
                api_prefix=self.settings_vm.api_prefix,
                request_timeout_s=self.settings_vm.request_timeout_s,
                session=shared,
            )
            self._profile_port = ProfileRestAdapter(
                self.settings_vm.api_base_url,
                api_prefix=self.settings_vm.api_prefix,
                request_timeout_s=self.settings_vm.request_timeout_s,
                session=shared,
            )
            LOGGER.debug(
                "Built REST adapters for %s%s",
                self.settings_vm.api_base_url,
                self.settings_vm.api_prefix,
            )

        resources = self._resource_port
        self.uc_fetch_page = FetchResourcePage(resources)
        self.uc_fetch_detail = FetchResourceDetail(resources)
        self.uc_create = CreateResource(resources)
        self.uc_update = UpdateResource(resources)
        self.uc_delete = DeleteResource(resources)
        self.uc_statistics = FetchStatistics(resources)
        self.uc_bulk_import = BulkImportWorkers(resources)
        self.uc_download_template = DownloadWorkerTemplate(resources)
        self.uc_approve_task = ApproveTask(resources)
        self.uc_reject_task = RejectTask(resources)
        self.uc_bulk_approve_tasks = BulkApproveTasks(resources)
        self.uc_bulk_delete_tasks = BulkDeleteTasks(resources)
        self.uc_set_billing_paid = SetBillingPaid(resources)
        self.uc_fetch_dashboard = FetchDashboard(resources)
        self.uc_login = Login(self._auth_port)
        self.uc_current_user = LoadCurrentUser(self._auth_port)
        self.uc_logout = Logout(self._auth_port)
        self.uc_load_profile = LoadProfile(self._profile_port)
        self.uc_update_profile = UpdateProfile(self._profile_port)
        return True

    def use_case(self, name: str) -> Callable[..., Any]:
        """Return the current ``uc_<name>`` object, building adapters on demand.

        Raises:
            UseCaseError: ``CONFIG_INVALID`` when settings cannot produce an
                adapter.
        """
        if not self.ensure_ready():
            raise UseCaseError(
                "CONFIG_INVALID",
                "Configure a valid API base URL in Settings first.",
            )
        uc = getattr(self, f"uc_{name}")
        if uc is None:
            raise RuntimeError(f"use case {name!r} is not available")
        return uc

    def _bound(self, name: str) -> Callable[..., Any]:
        def call(*args: Any) -> Any:
            try:
                return self.use_case(name)(*args)
            except UseCaseError as err:
                if err.code == "AUTH_FAILED" and name not in _SESSION_USE_CASES and self.on_auth_lost:
                    LOGGER.info("Backend session lost during %s", name)
                    self.on_auth_lost()
                raise

        return call

    # ------------------------------------------------------------------
    # Viewmodel factories
    # ------------------------------------------------------------------
    def make_list_vm(
        self,
        resource_key: str,
        *,
        debouncer: Optional[DebounceScheduler] = None,
        on_changed: Optional[Callable[[ResourceListVM], None]] = None,
        on_alert: Optional[AlertFn] = None,
    ) -> ResourceListVM:
        """Build the list controller for ``resource_key``.

        Raises:
            ValueError: ``resource_key`` is not a known resource.
        """
        spec = get_resource(resource_key)
        common = dict(
            fetch_page=self._bound("fetch_page"),
            fetch_detail=self._bound("fetch_detail"),
            create=self._bound("create"),
            update=self._bound("update"),
            delete=self._bound("delete"),
            fetch_statistics=self._bound("statistics") if spec.has_statistics else None,
            debouncer=debouncer,
            search_debounce_ms=self.settings_vm.search_debounce_ms,
            on_changed=on_changed,
            on_alert=on_alert,
        )
        if spec is CONTRACT_WORKERS:
            return ContractWorkerListVM(
                bulk_import=self._bound("bulk_import"),
                download_template=self._bound("download_template"),
                **common,
            )
        if spec is AMCS:
            return AmcListVM(set_billing_paid=self._bound("set_billing_paid"), **common)
        if spec is TASKS:
            return TaskListVM(
                approve=self._bound("approve_task"),
                reject=self._bound("reject_task"),
                bulk_approve=self._bound("bulk_approve_tasks"),
                bulk_delete=self._bound("bulk_delete_tasks"),
                **common,
            )
        return ResourceListVM(spec, **common)

    def make_dashboard_vm(self, *, on_changed: Optional[Callable[[DashboardVM], None]] = None) -> DashboardVM:
        return DashboardVM(load=self._bound("fetch_dashboard"), on_changed=on_changed)

    def make_session_vm(self) -> SessionVM:
        return SessionVM(
            load_user=self._bound("current_user"),
            login=self._bound("login"),
            logout=self._bound("logout"),
        )

    def make_profile_vm(
        self,
        *,
        on_changed: Optional[Callable[[ProfileVM], None]] = None,
        on_alert: Optional[AlertFn] = None,
    ) -> ProfileVM:
        return ProfileVM(
            load=self._bound("load_profile"),
            update=self._bound("update_profile"),
            on_changed=on_changed,
            on_alert=on_alert,
        )


__all__ = ["AppController"]

"""NiceGUI entrypoint for the opsdesk web console."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Callable, Dict, Optional

from nicegui import app, ui

from opsdesk.domain.query import ALL
from opsdesk.domain.resources import RESOURCES, ResourceSpec
from opsdesk.utils.debounce import DebounceScheduler
from opsdesk.viewmodels.amcs_vm import AmcListVM, billing_totals
from opsdesk.viewmodels.list_vm import ResourceListVM
from opsdesk.viewmodels.profile_vm import PASSWORD_FIELDS
from opsdesk.viewmodels.session_vm import HOME_PATH, LOGIN_PATH
from opsdesk.viewmodels.tasks_vm import TaskListVM
from opsdesk.viewmodels.workers_vm import ContractWorkerListVM
from opsdesk.web_ui.runtime import ClientSession, WebRuntime
from opsdesk.web_ui.viewmodels import (
    BILLING_COLUMNS,
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

LOGGER = logging.getLogger(__name__)

SETTINGS_PATH = "/settings"
PROFILE_PATH = "/profile"

_NOTIFY_TYPES = {
    "success": "positive",
    "error": "negative",
    "warning": "warning",
    "info": "info",
}

_ROW_ACTIONS_SLOT = r"""
<q-td :props="props">
  <q-btn flat dense icon="visibility" @click="() => $parent.$emit('view', props.row)" />
  <q-btn flat dense icon="edit" @click="() => $parent.$emit('edit', props.row)" />
  <q-btn flat dense icon="delete" color="negative" @click="() => $parent.$emit('remove', props.row)" />
</q-td>
"""

_TASK_ACTIONS_SLOT = r"""
<q-td :props="props">
  <q-btn flat dense icon="check" color="positive" @click="() => $parent.$emit('approve', props.row)" />
  <q-btn flat dense icon="block" color="warning" @click="() => $parent.$emit('reject', props.row)" />
  <q-btn flat dense icon="edit" @click="() => $parent.$emit('edit', props.row)" />
  <q-btn flat dense icon="delete" color="negative" @click="() => $parent.$emit('remove', props.row)" />
</q-td>
"""


def _install_theme() -> None:
    """Install global CSS/theme tokens for the web runtime."""
    ui.add_head_html(
        """
<style>
:root {
  --ops-bg: #f4f6fb;
  --ops-card: #ffffff;
  --ops-border: #d5dbe7;
  --ops-accent: #1f4e8c;
  --ops-muted: #5b677a;
}
body { background: var(--ops-bg); }
.ops-page { max-width: 1400px; margin: 0 auto; padding: 16px; }
.ops-card { background: var(--ops-card); border: 1px solid var(--ops-border); border-radius: 12px; }
.ops-muted { color: var(--ops-muted); }
.ops-tile { min-width: 150px; }
</style>
        """
    )


def _notify_error(exc: Exception) -> None:
    """Render exceptions as concise NiceGUI toasts."""
    message = getattr(exc, "message", None) or str(exc)
    ui.notify(message, type="negative", close_button="OK", multi_line=True)


def _notify_alert(title: str, message: str, level: str) -> None:
    ui.notify(
        f"{title}: {message}",
        type=_NOTIFY_TYPES.get(level, "info"),
        multi_line=True,
        close_button="OK" if level in {"error", "warning"} else False,
    )


def _ui_debouncer(client: Any) -> DebounceScheduler:
    """Debounce timers backed by one-shot NiceGUI timers of ``client``.

    Pending timers are cancelled once, when NiceGUI deletes the client.
    """
    scheduler = DebounceScheduler(
        lambda delay_ms, callback: ui.timer(delay_ms / 1000.0, callback, once=True),
        lambda timer: timer.cancel(),
    )
    client.on_delete(scheduler.cancel_all)
    return scheduler


async def _confirm(message: str, *, action_label: str = "Delete", color: str = "negative") -> bool:
    with ui.dialog() as dialog, ui.card():
        ui.label(message)
        with ui.row().classes("w-full justify-end q-gutter-sm"):
            ui.button("Cancel", on_click=lambda: dialog.submit(False)).props("flat")
            ui.button(action_label, color=color, on_click=lambda: dialog.submit(True))
    result = await dialog
    dialog.delete()
    return bool(result)


async def _prompt(title: str, label: str) -> Optional[str]:
    state = {"value": ""}
    with ui.dialog() as dialog, ui.card().classes("w-96"):
        ui.label(title).classes("text-subtitle1")
        ui.textarea(label, on_change=lambda e: state.__setitem__("value", str(e.value or ""))).classes("w-full")
        with ui.row().classes("w-full justify-end q-gutter-sm"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button("Submit", color="primary", on_click=lambda: dialog.submit(state["value"]))
    result = await dialog
    dialog.delete()
    return result


def _build_ui(runtime: WebRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    def current_client() -> ClientSession:
        return runtime.client(app.storage.browser["id"])

    def gate(path: str) -> Optional[ClientSession]:
        """Resolve the auth gate for ``path``; None means the page must not render."""
        client = current_client()
        session_vm = client.session_vm
        if session_vm.is_loading:
            session_vm.check()
        target = session_vm.redirect_for(path)
        if target is not None:
            ui.navigate.to(target)
            return None
        session_vm.on_expired = _expiry_redirect(ui.context.client)
        return client

    def _expiry_redirect(page_client: Any) -> Callable[[], None]:
        def redirect() -> None:
            with page_client:
                ui.navigate.to(LOGIN_PATH)

        return redirect

    def header(client: ClientSession) -> None:
        session_vm = client.session_vm

        def do_logout() -> None:
            session_vm.logout()
            ui.navigate.to(LOGIN_PATH)

        with ui.header().classes("items-center justify-between"):
            with ui.row().classes("items-center q-gutter-md"):
                ui.link("opsdesk", HOME_PATH).classes("text-h6 text-white no-underline")
                for spec in RESOURCES.values():
                    ui.link(spec.label, f"/{spec.key}").classes("text-white")
            with ui.row().classes("items-center q-gutter-sm"):
                if runtime.is_mock:
                    ui.badge("mock", color="warning")
                user = session_vm.user
                ui.label(user.display_name if user else "").classes("text-white")
                ui.button(icon="person", on_click=lambda: ui.navigate.to(PROFILE_PATH)).props("flat color=white dense")
                ui.button(icon="settings", on_click=lambda: ui.navigate.to(SETTINGS_PATH)).props("flat color=white dense")
                ui.button("Sign out", on_click=do_logout).props("flat color=white dense")

    def _invoke(action: Callable[[], Any], *refreshers: Callable[[], None]) -> None:
        try:
            action()
        except Exception as exc:
            LOGGER.exception("UI action failed")
            _notify_error(exc)
            return
        for refresh in refreshers:
            refresh()

    # ------------------------------------------------------------------
    # Sign-in and landing
    # ------------------------------------------------------------------
    @ui.page("/")
    def index() -> None:
        ui.navigate.to(HOME_PATH)

    @ui.page(LOGIN_PATH)
    def login_page() -> None:
        client = gate(LOGIN_PATH)
        if client is None:
            return
        _install_theme()
        form = LoginFormVM()
        session_vm = client.session_vm

        def submit() -> None:
            if session_vm.login(form.login_identifier, form.password, form.remember_me):
                ui.navigate.to(HOME_PATH)
                return
            form.clear_password()
            password_input.value = ""
            ui.notify(session_vm.error or "Login failed.", type="negative")

        with ui.column().classes("absolute-center items-stretch ops-card q-pa-lg w-96"):
            ui.label("Sign in").classes("text-h5")
            if session_vm.error:
                ui.label(session_vm.error).classes("text-negative text-caption")
            if runtime.is_mock:
                ui.label("Mock backend: owner / owner123").classes("ops-muted text-caption")
            ui.input("Username or email", on_change=lambda e: setattr(form, "login_identifier", str(e.value or ""))).props("outlined")
            password_input = ui.input(
                "Password",
                password=True,
                password_toggle_button=True,
                on_change=lambda e: setattr(form, "password", str(e.value or "")),
            ).props("outlined").on("keydown.enter", submit)
            ui.checkbox("Remember me", on_change=lambda e: setattr(form, "remember_me", bool(e.value)))
            ui.button("Sign in", color="primary", on_click=submit)
            ui.link("Connection settings", SETTINGS_PATH).classes("text-caption")

    @ui.page(HOME_PATH)
    def dashboard_page() -> None:
        client = gate(HOME_PATH)
        if client is None:
            return
        _install_theme()
        header(client)
        dashboard = client.controller.make_dashboard_vm()

        @ui.refreshable
        def render_dashboard() -> None:
            if dashboard.is_loading and dashboard.stats is None:
                ui.spinner(size="lg")
                return
            if dashboard.error:
                with ui.row().classes("items-center q-gutter-sm"):
                    ui.icon("error", color="negative")
                    ui.label(dashboard.error).classes("text-negative")
                    ui.button("Retry", on_click=dashboard.load).props("flat dense")
                return
            with ui.row().classes("q-gutter-sm"):
                for label, value in dashboard.tiles():
                    with ui.card().classes("ops-card ops-tile q-pa-sm"):
                        ui.label(label).classes("ops-muted text-caption")
                        ui.label(value).classes("text-h5")
            stats = dashboard.stats
            with ui.row().classes("w-full q-gutter-md items-start"):
                with ui.card().classes("ops-card col"):
                    ui.label("AMCs expiring soon").classes("text-subtitle1")
                    if not stats.expiring_amcs:
                        ui.label("No AMCs expiring soon").classes("ops-muted")
                    for amc in stats.expiring_amcs:
                        with ui.row().classes("w-full justify-between"):
                            ui.label(f"{amc.client_name} ({amc.amc_number})")
                            ui.label(f"{amc.expiry_date}, {amc.days_left} day(s) left").classes("ops-muted")
                with ui.card().classes("ops-card col"):
                    ui.label("Recent activity").classes("text-subtitle1")
                    if not stats.recent_activities:
                        ui.label("No recent activity").classes("ops-muted")
                    for activity in stats.recent_activities:
                        with ui.column().classes("q-gutter-none"):
                            ui.label(activity.description or activity.action)
                            ui.label(f"{activity.created_by} · {activity.created_at}").classes("ops-muted text-caption")

        dashboard.on_changed = lambda _: render_dashboard.refresh()
        with ui.column().classes("ops-page w-full"):
            ui.label(f"Welcome, {client.session_vm.user.display_name}").classes("text-h5")
            render_dashboard()
            with ui.row().classes("q-gutter-md"):
                for spec in RESOURCES.values():
                    with ui.card().classes("ops-card ops-tile cursor-pointer").on(
                        "click", lambda _, path=f"/{spec.key}": ui.navigate.to(path)
                    ):
                        ui.label(spec.label).classes("text-subtitle1")
                        ui.label(f"Manage {spec.label.lower()}").classes("ops-muted text-caption")
        dashboard.load()

    # ------------------------------------------------------------------
    # Resource pages
    # ------------------------------------------------------------------
    def resource_page(spec: ResourceSpec) -> None:
        path = f"/{spec.key}"
        client = gate(path)
        if client is None:
            return
        _install_theme()
        header(client)
        debouncer = _ui_debouncer(ui.context.client)
        vm = client.controller.make_list_vm(spec.key, debouncer=debouncer, on_alert=_notify_alert)
        is_tasks = isinstance(vm, TaskListVM)
        is_workers = isinstance(vm, ContractWorkerListVM)
        form: Dict[str, Any] = {}

        with ui.dialog() as editor_dialog, ui.card().classes("w-[640px] max-w-full"):
            render_editor_slot = ui.column().classes("w-full")

        with ui.dialog() as detail_dialog, ui.card().classes("w-[720px] max-w-full"):
            render_detail_slot = ui.column().classes("w-full")

        @ui.refreshable
        def render_statistics() -> None:
            tiles = statistics_tiles(vm.statistics)
            if not tiles:
                return
            with ui.row().classes("q-gutter-sm"):
                for label, value in tiles:
                    with ui.card().classes("ops-card ops-tile q-pa-sm"):
                        ui.label(label).classes("ops-muted text-caption")
                        ui.label(value).classes("text-h6")

        @ui.refreshable
        def render_list() -> None:
            if vm.phase == "loading" and not vm.has_loaded:
                ui.spinner(size="lg")
                return
            if vm.error:
                with ui.row().classes("items-center q-gutter-sm"):
                    ui.icon("error", color="negative")
                    ui.label(vm.error).classes("text-negative")
                    ui.button("Retry", on_click=vm.fetch_list).props("flat dense")
            columns = table_columns(spec.key) + [{"name": "actions", "label": "", "field": "id"}]
            table = ui.table(
                columns=columns,
                rows=vm.rows(),
                row_key="id",
                selection="multiple" if is_tasks else None,
                pagination=0,
                on_select=sync_selection if is_tasks else None,
            ).classes("w-full")
            if vm.is_loading:
                table.props("loading")
            table.add_slot("body-cell-actions", _TASK_ACTIONS_SLOT if is_tasks else _ROW_ACTIONS_SLOT)
            table.on("view", lambda e: vm.open_detail(e.args["id"]))
            table.on("edit", lambda e: open_edit(e.args["id"]))
            table.on("remove", lambda e: remove(e.args["id"]))
            if is_tasks:
                table.selected = [row for row in vm.rows() if row["id"] in vm.selected]
                table.on("approve", lambda e: _invoke(lambda: vm.approve(e.args["id"])))
                table.on("reject", lambda e: reject(e.args["id"]))
            if not vm.items and vm.has_loaded and not vm.error:
                ui.label(f"No {spec.label.lower()} found.").classes("ops-muted")
            with ui.row().classes("items-center q-gutter-sm"):
                ui.button(icon="chevron_left", on_click=vm.previous_page).props("flat dense").set_enabled(vm.page > 1)
                ui.label(f"Page {vm.page} of {vm.total_pages} ({vm.count} total)")
                ui.button(icon="chevron_right", on_click=vm.next_page).props("flat dense").set_enabled(
                    vm.page < vm.total_pages
                )

        def render_editor() -> None:
            render_editor_slot.clear()
            form.clear()
            form.update(form_from_record(spec.key, vm.editing))
            title = f"Edit {spec.singular}" if vm.editing is not None else f"New {spec.singular}"
            with render_editor_slot:
                ui.label(title).classes("text-h6")
                with ui.grid(columns=2).classes("w-full"):
                    for field in editor_fields(spec.key):
                        label = f"{field.label} *" if field.required else field.label
                        on_change = lambda e, name=field.name: form.__setitem__(name, e.value)
                        if field.kind == "select":
                            current = form[field.name] if form[field.name] in field.options else None
                            ui.select(list(field.options), value=current, label=label, on_change=on_change).props("dense outlined")
                        elif field.kind == "number":
                            ui.number(label, value=form[field.name] if form[field.name] != "" else None, on_change=on_change).props("dense outlined")
                        elif field.kind == "textarea":
                            ui.textarea(label, value=str(form[field.name]), on_change=on_change).props("dense outlined").classes("col-span-2")
                        elif field.kind == "date":
                            ui.input(label, value=str(form[field.name]), on_change=on_change).props("dense outlined type=date")
                        else:
                            ui.input(label, value=str(form[field.name]), on_change=on_change).props("dense outlined")
                with ui.row().classes("w-full justify-end q-gutter-sm"):
                    ui.button("Cancel", on_click=vm.close_editor).props("flat")
                    ui.button("Save", color="primary", on_click=save)

        def render_detail() -> None:
            render_detail_slot.clear()
            record = vm.detail
            if record is None:
                return
            with render_detail_slot:
                ui.label(f"{spec.singular.capitalize()} details").classes("text-h6")
                with ui.grid(columns=2).classes("w-full"):
                    for label, value in detail_rows(spec.key, record):
                        ui.label(label).classes("ops-muted")
                        ui.label(value)
                financials = financial_rows(getattr(record, "financials", None))
                if financials:
                    ui.label("Financials").classes("text-subtitle1")
                    with ui.grid(columns=2).classes("w-full"):
                        for label, value in financials:
                            ui.label(label).classes("ops-muted")
                            ui.label(value)
                if isinstance(vm, AmcListVM):
                    render_billings()
                with ui.row().classes("w-full justify-end"):
                    ui.button("Close", on_click=vm.close_detail).props("flat")

        def render_billings() -> None:
            total, paid, outstanding = billing_totals(vm.billings)
            ui.label("Billing schedule").classes("text-subtitle1")
            with ui.row().classes("q-gutter-md"):
                ui.label(f"Total: {total:.2f}")
                ui.label(f"Paid: {paid:.2f}").classes("text-positive")
                ui.label(f"Outstanding: {outstanding:.2f}").classes("text-negative")
            if not vm.billings:
                ui.label("No billing periods.").classes("ops-muted")
                return
            columns = [
                {"name": name, "label": label, "field": name, "align": "left"} for name, label in BILLING_COLUMNS
            ] + [{"name": "toggle", "label": "", "field": "id"}]
            billing_table = ui.table(columns=columns, rows=billing_table_rows(vm.billings), row_key="id").classes("w-full")
            billing_table.add_slot(
                "body-cell-toggle",
                r"""
<q-td :props="props">
  <q-btn flat dense size="sm" :label="props.row.paid ? 'Mark unpaid' : 'Mark paid'"
         :color="props.row.paid ? 'warning' : 'positive'" @click="() => $parent.$emit('toggle', props.row)" />
</q-td>
""",
            )
            billing_table.on("toggle", lambda e: vm.toggle_billing_paid(e.args["id"]))

        def on_changed(_: ResourceListVM) -> None:
            render_list.refresh()
            render_statistics.refresh()
            if vm.editor_open and not editor_dialog.value:
                render_editor()
                editor_dialog.open()
            elif not vm.editor_open and editor_dialog.value:
                editor_dialog.close()
            if vm.detail_open:
                render_detail()
                if not detail_dialog.value:
                    detail_dialog.open()
            elif detail_dialog.value:
                detail_dialog.close()

        def open_edit(record_id: int) -> None:
            vm.open_edit(record_id)

        def save() -> None:
            missing = missing_required(spec.key, form)
            if missing:
                ui.notify(f"{missing} is required.", type="warning")
                return
            vm.save(dict(form))

        async def remove(record_id: int) -> None:
            confirmed = await _confirm(f"Are you sure you want to delete this {spec.singular}?")
            vm.delete(record_id, lambda _: confirmed)

        async def reject(record_id: int) -> None:
            reason = await _prompt("Reject task", "Reason for rejection")
            if reason is None:
                return
            vm.reject(record_id, reason)

        def sync_selection(e: Any) -> None:
            vm.selected = {int(row["id"]) for row in e.selection}

        async def bulk_approve() -> None:
            count = len(vm.selected)
            confirmed = count > 0 and await _confirm(
                f"Are you sure you want to approve {count} task(s)?", action_label="Approve", color="positive"
            )
            vm.bulk_approve(None, lambda _: confirmed)

        async def bulk_delete() -> None:
            count = len(vm.selected)
            confirmed = count > 0 and await _confirm(f"Are you sure you want to delete {count} task(s)?")
            vm.bulk_delete(None, lambda _: confirmed)

        async def on_bulk_upload(e: Any) -> None:
            try:
                target = runtime.persist_upload(e.file.name, await e.file.read())
            except OSError as exc:
                _notify_error(exc)
                return
            vm.bulk_import(target)
            uploader.reset()

        def download_template() -> None:
            path = vm.download_template(runtime.download_dir())
            if path is not None:
                ui.download(path.read_bytes(), filename=path.name)

        def on_search(value: Any) -> None:
            vm.search(str(value or ""))

        def on_filter(name: str, value: Any) -> None:
            _invoke(lambda: vm.set_filter(name, str(value or ALL)))

        with ui.column().classes("ops-page w-full q-gutter-md"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(spec.label).classes("text-h5")
                with ui.row().classes("q-gutter-sm"):
                    if is_workers:
                        ui.button("Template", icon="download", on_click=download_template).props("outline")
                    if is_tasks:
                        ui.button("Approve selected", icon="done_all", on_click=bulk_approve).props("outline")
                        ui.button("Delete selected", icon="delete_sweep", color="negative", on_click=bulk_delete).props("outline")
                    ui.button(f"Add {spec.singular}", icon="add", color="primary", on_click=vm.open_create)
            if is_workers:
                uploader = ui.upload(
                    label="Bulk upload (.xlsx/.xls)",
                    auto_upload=True,
                    on_upload=on_bulk_upload,
                ).props("accept=.xlsx,.xls flat bordered").classes("w-96")
            render_statistics()
            with ui.row().classes("w-full items-center q-gutter-sm"):
                ui.input(
                    f"Search {spec.label.lower()}",
                    on_change=lambda e: on_search(e.value),
                ).props("dense outlined clearable").classes("w-72")
                for dimension in spec.filters:
                    if dimension.free_form:
                        ui.input(
                            dimension.label or dimension.name,
                            on_change=lambda e, name=dimension.name: on_filter(name, str(e.value or "").strip() or ALL),
                        ).props("dense outlined").classes("w-40")
                        continue
                    ui.select(
                        filter_options(dimension.values),
                        value=vm.filter_value(dimension.name),
                        label=dimension.label or dimension.name,
                        on_change=lambda e, name=dimension.name: on_filter(name, e.value),
                    ).props("dense outlined").classes("w-48")
            render_list()

        editor_dialog.on("hide", lambda _: vm.close_editor() if vm.editor_open else None)
        detail_dialog.on("hide", lambda _: vm.close_detail() if vm.detail_open else None)
        vm.on_changed = on_changed
        vm.load()

    def register_resource_page(spec: ResourceSpec) -> None:
        @ui.page(f"/{spec.key}")
        def page() -> None:
            resource_page(spec)

    for resource in RESOURCES.values():
        register_resource_page(resource)

    # ------------------------------------------------------------------
    # Profile and settings
    # ------------------------------------------------------------------
    @ui.page(PROFILE_PATH)
    def profile_page() -> None:
        client = gate(PROFILE_PATH)
        if client is None:
            return
        _install_theme()
        header(client)
        profile_vm = client.controller.make_profile_vm(on_alert=_notify_alert)
        profile_vm.load()

        @ui.refreshable
        def render_profile() -> None:
            if profile_vm.error:
                ui.label(profile_vm.error).classes("text-negative")
                return
            fields = (
                ("username", "Username"),
                ("email", "Email"),
                ("first_name", "First name"),
                ("last_name", "Last name"),
                ("phone_number", "Phone"),
                ("date_of_birth", "Date of birth"),
                ("gender", "Gender"),
                ("address", "Address"),
                ("city", "City"),
                ("state", "State"),
                ("pin_code", "PIN code"),
                ("country", "Country"),
                ("aadhar_number", "Aadhar number"),
                ("pan_number", "PAN number"),
            )
            with ui.grid(columns=2).classes("w-full"):
                for name, label in fields:
                    ui.input(
                        label,
                        value=str(profile_vm.form.get(name) or ""),
                        on_change=lambda e, n=name: profile_vm.set_field(n, str(e.value or "")),
                    ).props("dense outlined")
            ui.label("Change password").classes("text-subtitle1 q-mt-md")
            with ui.row().classes("q-gutter-sm"):
                for name in PASSWORD_FIELDS:
                    ui.input(
                        name.replace("_", " ").capitalize(),
                        password=True,
                        value="",
                        on_change=lambda e, n=name: profile_vm.set_field(n, str(e.value or "")),
                    ).props("dense outlined")
            ui.button("Save profile", color="primary", on_click=lambda: profile_vm.save() and render_profile.refresh())

        with ui.column().classes("ops-page w-full"):
            ui.label("Profile").classes("text-h5")
            with ui.card().classes("ops-card q-pa-md w-full"):
                render_profile()

    @ui.page(SETTINGS_PATH)
    def settings_page() -> None:
        _install_theme()
        client = current_client()
        if client.session_vm.is_authorized:
            header(client)
        settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)

        def save_settings() -> None:
            def action() -> None:
                runtime.apply_settings_payload(settings_vm.to_payload())
                ui.notify("Settings saved.", type="positive")
            _invoke(action)

        def export_settings() -> None:
            ui.download(runtime.export_settings_json(), filename="opsdesk_settings.json")

        async def import_settings(e: Any) -> None:
            nonlocal settings_vm
            try:
                payload = parse_settings_json((await e.file.read()).decode("utf-8-sig"))
                runtime.apply_settings_payload(payload)
            except (UnicodeDecodeError, ValueError) as exc:
                _notify_error(exc)
                return
            settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)
            ui.notify("Imported settings JSON.", type="positive")
            ui.navigate.reload()

        with ui.column().classes("ops-page w-full"):
            ui.label("Settings").classes("text-h5")
            with ui.card().classes("ops-card q-pa-md w-full"):
                ui.label("Backend API").classes("text-subtitle1")
                if runtime.is_mock:
                    ui.label("Running against the in-memory mock backend.").classes("ops-muted")
                ui.input("API base URL", value=settings_vm.api_base_url, on_change=lambda e: setattr(settings_vm, "api_base_url", str(e.value or ""))).props("dense outlined").classes("w-96")
                ui.input("API prefix", value=settings_vm.api_prefix, on_change=lambda e: setattr(settings_vm, "api_prefix", str(e.value or ""))).props("dense outlined").classes("w-48")
                with ui.row().classes("q-gutter-sm"):
                    ui.number("Request timeout (s)", value=settings_vm.request_timeout_s, min=1, on_change=lambda e: setattr(settings_vm, "request_timeout_s", int(e.value or 10))).props("dense outlined")
                    ui.number("Search debounce (ms)", value=settings_vm.search_debounce_ms, min=0, on_change=lambda e: setattr(settings_vm, "search_debounce_ms", int(e.value or 0))).props("dense outlined")
                ui.checkbox("Enable debug logging", value=settings_vm.debug_logging, on_change=lambda e: setattr(settings_vm, "debug_logging", bool(e.value)))
                with ui.row().classes("q-gutter-sm"):
                    ui.button("Save", color="primary", on_click=save_settings)
                    ui.button("Export JSON", on_click=export_settings)
                    ui.upload(on_upload=import_settings, auto_upload=True, label="Import JSON").props("accept=.json")
            if not client.session_vm.is_authorized:
                ui.link("Back to sign in", LOGIN_PATH)


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the opsdesk NiceGUI web console.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    parser.add_argument("--mock", action="store_true", help="Serve in-memory demo data instead of the REST API.")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    runtime = WebRuntime(mock=args.mock)
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", payload.get("api_base_url"), sorted(RESOURCES))
        return
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="opsdesk",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("OPSDESK_WEB_STORAGE_SECRET", "opsdesk-web-ui-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()

"""Resource list controller shared by every admin page.

``ResourceListVM`` keeps one on-screen collection in step with a paginated,
filterable, searchable endpoint and owns the create/edit/delete flow around
it. It performs no I/O itself: use cases are injected as callables and UI
reactions go through the ``on_changed`` and ``on_alert`` hooks.

Fetch ordering: every fetch takes a sequence token from :meth:`begin_fetch`
and only the response carrying the latest token is applied, so a slow reply
to an old query can never overwrite a newer one.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..domain.entities import ResourcePage
from ..domain.ports import RecordId, UseCaseError
from ..domain.query import ListQuery, initial_query
from ..domain.resources import ResourceSpec
from ..utils.debounce import DebounceScheduler

LOGGER = logging.getLogger(__name__)

DEFAULT_SEARCH_DEBOUNCE_MS = 500
SEARCH_DEBOUNCE_KEY = "search"

AlertFn = Callable[[str, str, str], None]
ConfirmFn = Callable[[str], bool]
FetchPageFn = Callable[[ResourceSpec, ListQuery], ResourcePage]
FetchDetailFn = Callable[[ResourceSpec, RecordId], Any]
CreateFn = Callable[[ResourceSpec, Mapping[str, Any]], Any]
UpdateFn = Callable[[ResourceSpec, RecordId, Mapping[str, Any]], Any]
DeleteFn = Callable[[ResourceSpec, RecordId], None]
StatisticsFn = Callable[[ResourceSpec, ListQuery], Dict[str, Any]]


class ResourceListVM:
    """Owns list, query, loading and editor state for one resource page."""

    def __init__(
        self,
        spec: ResourceSpec,
        *,
        fetch_page: FetchPageFn,
        fetch_detail: Optional[FetchDetailFn] = None,
        create: Optional[CreateFn] = None,
        update: Optional[UpdateFn] = None,
        delete: Optional[DeleteFn] = None,
        fetch_statistics: Optional[StatisticsFn] = None,
        debouncer: Optional[DebounceScheduler] = None,
        search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS,
        on_changed: Optional[Callable[["ResourceListVM"], None]] = None,
        on_alert: Optional[AlertFn] = None,
    ) -> None:
        self.spec = spec
        self._fetch_page = fetch_page
        self._fetch_detail = fetch_detail
        self._create = create
        self._update = update
        self._delete = delete
        self._fetch_statistics = fetch_statistics
        self.debouncer = debouncer
        self.search_debounce_ms = max(0, int(search_debounce_ms))
        self.on_changed = on_changed
        self.on_alert = on_alert

        self.items: Tuple[Any, ...] = ()
        self.query: ListQuery = initial_query(spec.filters)
        self.search_text: str = ""
        self.count: int = 0
        self.total_pages: int = 1
        self.is_loading: bool = False
        self.error: Optional[str] = None
        self.has_loaded: bool = False
        self.statistics: Dict[str, Any] = {}

        self.editor_open: bool = False
        self.editing: Any = None
        self.is_saving: bool = False

        self.detail_open: bool = False
        self.detail: Any = None

        self._fetch_seq = 0

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def page(self) -> int:
        return self.query.page

    @property
    def phase(self) -> str:
        """``idle`` / ``loading`` / ``populated`` / ``errored``."""
        if self.is_loading:
            return "loading"
        if self.error is not None:
            return "errored"
        if self.has_loaded:
            return "populated"
        return "idle"

    def filter_value(self, name: str) -> str:
        return self.query.filter_value(name)

    def rows(self) -> List[Dict[str, Any]]:
        """Return items as plain dicts for table widgets."""
        return [asdict(item) if is_dataclass(item) else dict(item) for item in self.items]

    # ------------------------------------------------------------------
    # Query commands
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Initial page load: list first, then statistics tiles."""
        self.fetch_list()
        self.refresh_statistics()

    def search(self, text: str) -> None:
        """Record search input and apply it once typing has paused."""
        self.search_text = text or ""
        if self.debouncer is None or self.search_debounce_ms <= 0:
            self.apply_search(self.search_text)
            return
        pending = self.search_text
        self.debouncer.schedule(
            SEARCH_DEBOUNCE_KEY,
            self.search_debounce_ms,
            lambda: self.apply_search(pending),
        )

    def apply_search(self, text: str) -> None:
        """Apply debounced search text; an unchanged value does not refetch."""
        if (text or "") == self.query.search:
            return
        self.query = self.query.with_search(text)
        self.fetch_list()

    def set_filter(self, name: str, value: str) -> None:
        """Switch one filter dimension and refetch from page 1 immediately.

        Raises:
            ValueError: ``name`` is not a filter of this resource or ``value``
                is not one of its values (nor ``"all"``).
        """
        validated = self.spec.dimension(name).validate(value)
        stats_before = self.spec.stats_params(self.query)
        self.query = self.query.with_filter(name, validated)
        self.fetch_list()
        # Statistics scoped by a filter (task period) follow it.
        if self.spec.stats_params(self.query) != stats_before:
            self.refresh_statistics()

    def set_page(self, page: int) -> None:
        self.query = self.query.with_page(page)
        self.fetch_list()

    def next_page(self) -> None:
        if self.page < self.total_pages:
            self.set_page(self.page + 1)

    def previous_page(self) -> None:
        if self.page > 1:
            self.set_page(self.page - 1)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    def begin_fetch(self) -> int:
        """Start a fetch and return its sequence token."""
        self._fetch_seq += 1
        self.is_loading = True
        self.error = None
        self._notify()
        return self._fetch_seq

    def is_current(self, token: int) -> bool:
        return token == self._fetch_seq

    def apply_page(self, token: int, page: ResourcePage) -> bool:
        """Apply a fetched page unless a newer fetch has been issued."""
        if not self.is_current(token):
            LOGGER.debug("%s: dropping stale page (token %s < %s)", self.spec.key, token, self._fetch_seq)
            return False
        self.items = tuple(page.items)
        self.count = page.count
        self.total_pages = page.total_pages
        self.is_loading = False
        self.has_loaded = True
        self._notify()
        return True

    def apply_failure(self, token: int, err: Exception) -> bool:
        if not self.is_current(token):
            LOGGER.debug("%s: dropping stale failure (token %s)", self.spec.key, token)
            return False
        message = getattr(err, "message", None) or str(err) or f"Failed to load {self.spec.label.lower()}."
        LOGGER.error("%s: list fetch failed: %s", self.spec.key, message)
        self.items = ()
        self.count = 0
        self.total_pages = 1
        self.error = message
        self.is_loading = False
        self._notify()
        return True

    def fetch_list(self) -> bool:
        """Fetch the current query; returns True when the page was applied."""
        token = self.begin_fetch()
        try:
            page = self._fetch_page(self.spec, self.query)
        except UseCaseError as err:
            self.apply_failure(token, err)
            return False
        return self.apply_page(token, page)

    def refresh_statistics(self) -> None:
        """Reload statistics tiles; failures are logged and otherwise ignored."""
        if not self.spec.has_statistics or self._fetch_statistics is None:
            return
        try:
            self.statistics = dict(self._fetch_statistics(self.spec, self.query) or {})
        except UseCaseError as err:
            LOGGER.warning("%s: statistics unavailable: %s", self.spec.key, err.message)
            return
        self._notify()

    # ------------------------------------------------------------------
    # Editor
    # ------------------------------------------------------------------
    def open_create(self) -> None:
        self.editing = None
        self.editor_open = True
        self._notify()

    def open_edit(self, record_id: RecordId) -> bool:
        """Load the detail projection for ``record_id`` and open the editor."""
        detail = self._load_detail(record_id)
        if detail is None:
            return False
        self.editing = detail
        self.editor_open = True
        self._notify()
        return True

    def close_editor(self) -> None:
        self.editor_open = False
        self.editing = None
        self._notify()

    # ------------------------------------------------------------------
    # Read-only detail view
    # ------------------------------------------------------------------
    def open_detail(self, record_id: RecordId) -> bool:
        detail = self._load_detail(record_id)
        if detail is None:
            return False
        self.detail = detail
        self.detail_open = True
        self._notify()
        return True

    def close_detail(self) -> None:
        self.detail_open = False
        self.detail = None
        self._notify()

    def _load_detail(self, record_id: RecordId) -> Any:
        """Fetch the detail projection; failures alert and yield None."""
        if self._fetch_detail is None:
            raise RuntimeError(f"{self.spec.key}: no detail loader configured")
        try:
            return self._fetch_detail(self.spec, record_id)
        except UseCaseError as err:
            LOGGER.error("%s: failed to load %s: %s", self.spec.key, record_id, err.message)
            self._alert("Error", err.message, "error")
            return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def save(self, form: Mapping[str, Any]) -> bool:
        """Create or update depending on whether a record is being edited."""
        if self.editing is not None:
            return self.update(self.editing.id, form)
        return self.create(form)

    def create(self, form: Mapping[str, Any]) -> bool:
        if self._create is None:
            raise RuntimeError(f"{self.spec.key}: create is not supported")
        return self._mutate(
            lambda: self._create(self.spec, form),
            f"{self._singular_title()} created successfully.",
            "create",
        )

    def update(self, record_id: RecordId, form: Mapping[str, Any]) -> bool:
        if self._update is None:
            raise RuntimeError(f"{self.spec.key}: update is not supported")
        return self._mutate(
            lambda: self._update(self.spec, record_id, form),
            f"{self._singular_title()} updated successfully.",
            "update",
        )

    def delete(self, record_id: RecordId, confirm: ConfirmFn) -> bool:
        """Delete after a positive confirmation; a negative answer sends nothing."""
        if self._delete is None:
            raise RuntimeError(f"{self.spec.key}: delete is not supported")
        if not confirm(f"this {self.spec.singular}"):
            LOGGER.debug("%s: delete of %s cancelled", self.spec.key, record_id)
            return False
        return self._mutate(
            lambda: self._delete(self.spec, record_id),
            f"{self._singular_title()} deleted successfully.",
            "delete",
        )

    def _mutate(self, call: Callable[[], Any], success_message: str, verb: str) -> bool:
        self.is_saving = True
        self._notify()
        try:
            call()
        except UseCaseError as err:
            LOGGER.error("%s: %s failed: %s", self.spec.key, verb, err.message)
            self.is_saving = False
            self._alert("Error", err.message, "error")
            self._notify()
            return False
        self.is_saving = False
        self._after_mutation()
        self._alert("Success", success_message, "success")
        return True

    def _after_mutation(self) -> None:
        self.fetch_list()
        self.refresh_statistics()
        self.close_editor()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _singular_title(self) -> str:
        singular = self.spec.singular
        return singular[:1].upper() + singular[1:]

    def _alert(self, title: str, message: str, level: str) -> None:
        if self.on_alert:
            self.on_alert(title, message, level)

    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed(self)


__all__ = ["DEFAULT_SEARCH_DEBOUNCE_MS", "ResourceListVM", "SEARCH_DEBOUNCE_KEY"]

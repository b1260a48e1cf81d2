"""List query state, filter dimensions and pagination arithmetic."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .entities import PAGE_SIZE

ALL = "all"


@dataclass(frozen=True)
class FilterDimension:
    """A closed set of values a list can be filtered by.

    Attributes:
        name: Dimension key used by the list controller (``"worker_type"``).
        values: Allowed console values, ``"all"`` excluded.
        param: Query parameter sent to the backend; defaults to ``name``.
        encode: Optional console-value to wire-value translation
            (``{"yes": "true"}``).
        free_form: Accept any positive integer instead of ``values``.
        label: Human label for the filter control.
    """

    name: str
    values: Tuple[str, ...] = ()
    param: Optional[str] = None
    encode: Mapping[str, str] = field(default_factory=dict)
    free_form: bool = False
    label: str = ""

    def validate(self, value: str) -> str:
        if value == ALL:
            return value
        if self.free_form:
            text = str(value).strip()
            if text.isdigit() and int(text) > 0:
                return text
            raise ValueError(f"Filter '{self.name}' expects a positive integer, got {value!r}.")
        if value not in self.values:
            raise ValueError(
                f"Unknown value {value!r} for filter '{self.name}'; "
                f"expected one of {', '.join((ALL,) + self.values)}."
            )
        return value

    def wire_param(self) -> str:
        return self.param or self.name

    def wire_value(self, value: str) -> str:
        return self.encode.get(value, value)


@dataclass(frozen=True)
class ListQuery:
    """Search text, active filters and the 1-based page of a list view."""

    search: str = ""
    filters: Mapping[str, str] = field(default_factory=dict)
    page: int = 1

    def with_search(self, text: str) -> "ListQuery":
        return replace(self, search=text or "", page=1)

    def with_filter(self, name: str, value: str) -> "ListQuery":
        filters = dict(self.filters)
        filters[name] = value
        return replace(self, filters=filters, page=1)

    def with_page(self, page: int) -> "ListQuery":
        return replace(self, page=max(1, int(page)))

    def filter_value(self, name: str) -> str:
        return self.filters.get(name, ALL)


def initial_query(dimensions: Sequence[FilterDimension]) -> ListQuery:
    return ListQuery(filters={dim.name: ALL for dim in dimensions})


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """Return the page count for ``count`` rows; an empty list has one page."""
    if count <= 0:
        return 1
    return max(1, math.ceil(count / page_size))


def to_params(query: ListQuery, dimensions: Sequence[FilterDimension]) -> Dict[str, Any]:
    """Serialize a query into backend request parameters.

    An empty search and filters at ``"all"`` are omitted; ``page`` is always
    sent.
    """
    params: Dict[str, Any] = {}
    if query.search:
        params["search"] = query.search
    for dim in dimensions:
        value = query.filter_value(dim.name)
        if value == ALL:
            continue
        params[dim.wire_param()] = dim.wire_value(value)
    params["page"] = max(1, int(query.page))
    return params


__all__ = ["ALL", "FilterDimension", "ListQuery", "initial_query", "to_params", "total_pages"]

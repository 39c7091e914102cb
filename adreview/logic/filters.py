"""List filter state and its query-string encoding."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"

STATUSES = ("pending", "approved", "rejected", "draft")
SORT_FIELDS = ("createdAt", "price", "priority")
SORT_ORDERS = ("asc", "desc")

# query key -> attribute, in serialization order
QUERY_FIELDS = {
    "status": "status",
    "categoryId": "category_id",
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "search": "search",
    "sortBy": "sort_by",
    "sortOrder": "sort_order",
}
_DEFAULTS = {"sort_by": DEFAULT_SORT_BY, "sort_order": DEFAULT_SORT_ORDER}


@dataclass(frozen=True, slots=True)
class FilterState:
    status: tuple[str, ...] = ()
    category_id: str = ""
    min_price: str = ""
    max_price: str = ""
    search: str = ""
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER

    @property
    def sort_key(self) -> str:
        """Combined ``field-order`` value used by the sort dropdown."""
        return f"{self.sort_by}-{self.sort_order}"

    @property
    def is_default(self) -> bool:
        return self == FilterState()


def _attribute(key: str) -> str:
    if key in QUERY_FIELDS:
        return QUERY_FIELDS[key]
    if key in QUERY_FIELDS.values():
        return key
    raise KeyError(f"Unknown filter field: {key}")


def _normalise(attr: str, value: Any) -> Any:
    if attr == "status":
        if value is None or isinstance(value, str):
            values: Iterable[Any] = [value] if value else []
        else:
            values = value
        return tuple(dict.fromkeys(str(v) for v in values if v))
    text = "" if value is None else str(value)
    if not text and attr in _DEFAULTS:
        return _DEFAULTS[attr]
    return text


def update_filter(state: FilterState, key: str, value: Any) -> FilterState:
    """Return a copy of ``state`` with one field replaced.

    ``key`` may be given either as the query-string name (``categoryId``) or
    as the attribute name (``category_id``). Callers are expected to move the
    list back to page 1 after any update.
    """
    attr = _attribute(key)
    return dataclasses.replace(state, **{attr: _normalise(attr, value)})


def update_sort(state: FilterState, sort_by: str, sort_order: str) -> FilterState:
    return dataclasses.replace(
        state,
        sort_by=_normalise("sort_by", sort_by),
        sort_order=_normalise("sort_order", sort_order),
    )


def parse_sort_key(value: str) -> tuple[str, str]:
    """Split a ``price-asc`` style dropdown value."""
    sort_by, _, sort_order = (value or "").partition("-")
    return sort_by or DEFAULT_SORT_BY, sort_order or DEFAULT_SORT_ORDER


def reset_filters() -> FilterState:
    return FilterState()


def _query_items(state: FilterState) -> list[tuple[str, str]]:
    items: list[tuple[str, str]] = []
    for key, attr in QUERY_FIELDS.items():
        value = getattr(state, attr)
        if attr == "status":
            items.extend((key, item) for item in value)
        elif value and value != _DEFAULTS.get(attr):
            items.append((key, value))
    return items


def to_query_params(state: FilterState) -> httpx.QueryParams:
    """Encode filters for the page URL.

    Status values repeat the ``status`` key; empty fields and the default
    sort are left out.
    """
    return httpx.QueryParams(_query_items(state))


def api_params(state: FilterState, page: int, limit: int) -> httpx.QueryParams:
    """Query parameters for ``GET /ads``: page and limit, then the filters."""
    return httpx.QueryParams([("page", str(page)), ("limit", str(limit))] + _query_items(state))


def from_query_params(params: Any) -> FilterState:
    """Rebuild filters from a query string.

    Accepts anything exposing ``multi_items()`` (httpx and Starlette query
    params both do) or a plain query string. Unrelated keys such as ``page``
    are ignored.
    """
    if isinstance(params, str):
        params = httpx.QueryParams(params)
    values: dict[str, Any] = {}
    statuses: list[str] = []
    for key, value in params.multi_items():
        if key == "status":
            statuses.append(value)
        elif key in QUERY_FIELDS:
            values[QUERY_FIELDS[key]] = value
    state = FilterState()
    for attr, value in values.items():
        state = update_filter(state, attr, value)
    return update_filter(state, "status", statuses)

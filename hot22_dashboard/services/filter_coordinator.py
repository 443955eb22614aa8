"""
Filter coordinator.
Pure query transformations: filters, search, sorting and paging rules.
"""
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional

from hot22_dashboard.models.query import Query, SEARCH_KEY, SortDirection, is_empty_value

DEFAULT_SORT_DIRECTION = SortDirection.ASC

PAGE_KEYS = {"page"}
PAGE_SIZE_KEYS = {"limit", "page_size", "pageSize"}
SORT_KEY_KEYS = {"sortBy", "sort_by", "sort_key"}
SORT_DIRECTION_KEYS = {"sortOrder", "sort_order", "sort_direction"}


def _reset_page(query: Query) -> Query:
    return replace(query, page=1)


def _with_field(query: Query, key: str, value: Any) -> Query:
    if key in PAGE_KEYS:
        return replace(query, page=max(1, int(value)))
    if key in PAGE_SIZE_KEYS:
        return replace(query, page_size=max(1, int(value)))
    if key in SORT_KEY_KEYS:
        return replace(query, sort_key=str(value or ""))
    if key in SORT_DIRECTION_KEYS:
        return replace(query, sort_direction=SortDirection(str(value).lower()))

    filters = query.filter_map
    if is_empty_value(value):
        filters.pop(key, None)
    else:
        filters[key] = value.strip() if isinstance(value, str) else value
    return replace(query, filters=tuple(filters.items()))


def apply_filter(query: Query, key: str, value: Any) -> Query:
    """
    Set a single filter (or structural field) on the query.

    Setting ``page`` keeps every other field; any other change resets the
    page to 1 so a narrowed result set never lands on an empty page.
    An empty value removes the filter.
    """
    updated = _with_field(query, key, value)
    if key in PAGE_KEYS:
        return updated
    return _reset_page(updated)


def apply_filters(query: Query, partial: Mapping[str, Any]) -> Query:
    """Merge several fields at once; the page resets unless only ``page`` is given."""
    if set(partial) <= PAGE_KEYS:
        return set_page(query, partial["page"]) if partial else query

    updated = query
    for key, value in partial.items():
        if key not in PAGE_KEYS:
            updated = _with_field(updated, key, value)
    return _reset_page(updated)


def clear(query: Query) -> Query:
    """Drop filters, search and sort; only the page size survives."""
    return Query(page_size=query.page_size)


def set_page(query: Query, page: int) -> Query:
    return replace(query, page=max(1, int(page)))


def set_page_size(query: Query, page_size: int) -> Query:
    return apply_filter(query, "limit", page_size)


def set_search(query: Query, text: Optional[str]) -> Query:
    return apply_filter(query, SEARCH_KEY, text)


def set_sort(query: Query, sort_key: str, direction: SortDirection = DEFAULT_SORT_DIRECTION) -> Query:
    return _reset_page(replace(query, sort_key=sort_key, sort_direction=SortDirection(direction)))


def toggle_sort(query: Query, sort_key: str) -> Query:
    """Flip direction on the active column; a new column starts ascending."""
    if query.sort_key == sort_key:
        return set_sort(query, sort_key, query.sort_direction.flipped())
    return set_sort(query, sort_key, DEFAULT_SORT_DIRECTION)


def active_filter_count(query: Query) -> int:
    """Number of non-empty filter entries, shown as the UI filter badge."""
    return sum(1 for _, value in query.filters if not is_empty_value(value))


def active_filters(query: Query) -> Dict[str, Any]:
    return {key: value for key, value in query.filters if not is_empty_value(value)}

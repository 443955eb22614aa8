"""
Record browser.
Wires query changes to the request cache and applies the latest response to the store.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import RecordTypeNotFoundException
from hot22_dashboard.core.logging_setup import get_logger
from hot22_dashboard.models.dto.hot22_dto import RecordListResponse
from hot22_dashboard.models.page_window import PageWindow
from hot22_dashboard.models.query import Query
from hot22_dashboard.models.record_type import DEFAULT_RECORD_TYPE, is_known_record_type
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository
from hot22_dashboard.services import filter_coordinator, pagination_engine
from hot22_dashboard.services.request_cache import RequestCache
from hot22_dashboard.services.store import (
    Action,
    FETCH_FAILED,
    FETCH_STARTED,
    FETCH_SUCCEEDED,
    QUERY_CHANGED,
    RECORDS_CLEARED,
    RecordsState,
    Store,
    records_reducer,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class RecordRequest:
    """Cache key: record type plus the full query."""
    record_type: str
    query: Query


def build_records_cache(api_repository: Hot22ApiRepository) -> RequestCache:
    """Request cache whose network call is ``list_records``."""

    async def load(request: RecordRequest) -> RecordListResponse:
        return await api_repository.list_records(request.record_type, request.query)

    return RequestCache(
        load,
        max_entries=config.settings.request_cache_max_entries,
        ttl_seconds=config.settings.request_cache_ttl_seconds
    )


class RecordBrowser:
    """Paginated, filtered browsing of one record type at a time."""

    def __init__(
        self,
        api_repository: Hot22ApiRepository,
        cache: Optional[RequestCache] = None,
        record_type: str = DEFAULT_RECORD_TYPE,
        page_size: int = None,
        max_page_numbers: int = None
    ):
        self.cache = cache if cache is not None else build_records_cache(api_repository)
        self.max_page_numbers = max_page_numbers or config.settings.max_page_numbers
        self.store: Store[RecordsState] = Store(
            records_reducer,
            RecordsState(
                record_type=record_type,
                query=Query(page_size=page_size or config.settings.default_page_size)
            )
        )
        self.cache.subscribe(self._on_result, self._on_error)
        self._subscriber: Callable[[RecordRequest], Awaitable[Any]] = self.cache.fetch

    @property
    def state(self) -> RecordsState:
        return self.store.state

    @property
    def query(self) -> Query:
        return self.store.state.query

    def window(self) -> PageWindow:
        """Page window built from the latest server pagination."""
        pagination = self.state.pagination
        total_items = pagination.total_records if pagination else 0
        return pagination_engine.compute_window(
            total_items, self.query.page_size, self.query.page, self.max_page_numbers
        )

    def active_filter_count(self) -> int:
        return filter_coordinator.active_filter_count(self.query)

    async def refresh(self) -> RecordsState:
        return await self._emit(self.query)

    async def set_filter(self, key: str, value: Any) -> RecordsState:
        return await self._emit(filter_coordinator.apply_filter(self.query, key, value))

    async def set_filters(self, partial: Mapping[str, Any]) -> RecordsState:
        return await self._emit(filter_coordinator.apply_filters(self.query, partial))

    async def clear_filters(self) -> RecordsState:
        return await self._emit(filter_coordinator.clear(self.query))

    async def set_search(self, text: Optional[str]) -> RecordsState:
        return await self._emit(filter_coordinator.set_search(self.query, text))

    async def toggle_sort(self, sort_key: str) -> RecordsState:
        return await self._emit(filter_coordinator.toggle_sort(self.query, sort_key))

    async def set_page(self, page: int) -> RecordsState:
        """Move to ``page``; pages outside the known range are ignored."""
        target = pagination_engine.go_to_page(self.window(), page)
        if target is None:
            logger.debug("page_rejected", page=page, total_pages=self.window().total_pages)
            return self.state
        return await self._emit(filter_coordinator.set_page(self.query, target))

    async def next_page(self) -> RecordsState:
        target = pagination_engine.next_page(self.window())
        return self.state if target is None else await self.set_page(target)

    async def previous_page(self) -> RecordsState:
        target = pagination_engine.previous_page(self.window())
        return self.state if target is None else await self.set_page(target)

    async def change_page_size(self, page_size: int) -> RecordsState:
        """Change the page size while keeping the first visible record on screen."""
        new_page = pagination_engine.change_page_size(self.window(), page_size)
        query = filter_coordinator.set_page_size(self.query, page_size)
        return await self._emit(filter_coordinator.set_page(query, new_page))

    async def set_record_type(self, record_type: str) -> RecordsState:
        if not is_known_record_type(record_type):
            raise RecordTypeNotFoundException(f"Unknown record type '{record_type}'")
        # Rows of the previous type must not show under the new one
        self.store.dispatch(Action(RECORDS_CLEARED))
        return await self._emit(filter_coordinator.clear(self.query), record_type=record_type)

    async def _emit(self, query: Query, record_type: str = None) -> RecordsState:
        record_type = record_type or self.state.record_type
        self.store.dispatch(Action(QUERY_CHANGED, (record_type, query)))
        self.store.dispatch(Action(FETCH_STARTED))
        await self._subscriber(RecordRequest(record_type=record_type, query=query))
        return self.state

    def _on_result(self, request: RecordRequest, response: RecordListResponse) -> None:
        self.store.dispatch(Action(FETCH_SUCCEEDED, response))

    def _on_error(self, request: RecordRequest, error: Exception) -> None:
        self.store.dispatch(Action(FETCH_FAILED, getattr(error, "message", str(error))))

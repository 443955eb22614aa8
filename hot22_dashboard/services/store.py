"""
State container.
Pure reducers plus a small dispatcher with subscriptions.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from hot22_dashboard.models.dto.hot22_dto import PaginationInfo
from hot22_dashboard.models.query import Query

S = TypeVar("S")


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


QUERY_CHANGED = "records/query_changed"
FETCH_STARTED = "records/fetch_started"
FETCH_SUCCEEDED = "records/fetch_succeeded"
FETCH_FAILED = "records/fetch_failed"
RECORDS_CLEARED = "records/cleared"


@dataclass(frozen=True)
class RecordsState:
    record_type: str = "BKS24"
    query: Query = field(default_factory=Query)
    data: Tuple[dict, ...] = ()
    pagination: Optional[PaginationInfo] = None
    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[str] = None


def records_reducer(state: RecordsState, action: Action) -> RecordsState:
    """Return the next records state; never mutates ``state``."""
    if action.type == QUERY_CHANGED:
        record_type, query = action.payload
        return replace(state, record_type=record_type, query=query)

    if action.type == FETCH_STARTED:
        return replace(state, loading=True, error=None)

    if action.type == FETCH_SUCCEEDED:
        response = action.payload
        return replace(
            state,
            data=tuple(response.data),
            pagination=response.pagination,
            loading=False,
            error=None,
            last_updated=datetime.now(timezone.utc).isoformat()
        )

    if action.type == FETCH_FAILED:
        return replace(state, loading=False, error=str(action.payload))

    if action.type == RECORDS_CLEARED:
        return replace(state, data=(), pagination=None, error=None)

    return state


class Store(Generic[S]):
    """Single-writer container: state only changes through ``dispatch``."""

    def __init__(self, reducer: Callable[[S, Action], S], initial_state: S):
        self._reducer = reducer
        self._state = initial_state
        self._listeners: List[Callable[[S], None]] = []

    @property
    def state(self) -> S:
        return self._state

    def dispatch(self, action: Action) -> S:
        next_state = self._reducer(self._state, action)
        if next_state is not self._state:
            self._state = next_state
            for listener in list(self._listeners):
                listener(next_state)
        return self._state

    def subscribe(self, listener: Callable[[S], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

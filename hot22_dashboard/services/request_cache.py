"""
Request cache.
De-duplicates identical in-flight requests, keeps only the latest response,
and holds completed results in a bounded LRU with TTL expiry.
"""
import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, List, Optional, TypeVar

from hot22_dashboard.core.logging_setup import get_logger

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

ResultListener = Callable[[Any, Any], None]
ErrorListener = Callable[[Any, Exception], None]


@dataclass
class _CachedResult:
    value: Any
    stored_at: float


@dataclass
class _InFlight:
    task: asyncio.Future
    generation: int


class RequestCache(Generic[K, V]):
    """
    Last-request-wins fetch front for list queries.

    Every ``fetch`` call takes the next sequence token. When a response
    arrives it is returned to its own caller, but it is only published to
    subscribers if the call still holds the latest token, so a slow,
    superseded response never overwrites newer state.
    """

    def __init__(
        self,
        fetcher: Callable[[K], Awaitable[V]],
        max_entries: int = 50,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self._fetcher = fetcher
        self.max_entries = max(1, max_entries)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._completed: "OrderedDict[K, _CachedResult]" = OrderedDict()
        self._in_flight: Dict[K, _InFlight] = {}
        self._sequence = 0
        self._latest_token = 0
        self._generation = 0
        self._result_listeners: List[ResultListener] = []
        self._error_listeners: List[ErrorListener] = []
        self.network_calls = 0

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def subscribe(self, on_result: ResultListener, on_error: Optional[ErrorListener] = None) -> Callable[[], None]:
        self._result_listeners.append(on_result)
        if on_error is not None:
            self._error_listeners.append(on_error)

        def unsubscribe() -> None:
            if on_result in self._result_listeners:
                self._result_listeners.remove(on_result)
            if on_error in self._error_listeners:
                self._error_listeners.remove(on_error)

        return unsubscribe

    async def fetch(self, request: K) -> V:
        """
        Resolve a request, sharing any identical call already in flight.

        Raises:
            Whatever the fetcher raises; nothing is retried.
        """
        self._sequence += 1
        token = self._sequence
        self._latest_token = token

        cached = self._lookup(request)
        if cached is not None:
            logger.debug("request_cache_hit", token=token)
            self._publish_result(token, request, cached.value)
            return cached.value

        in_flight = self._in_flight.get(request)
        if in_flight is None:
            in_flight = self._start(request)
        else:
            logger.debug("request_deduplicated", token=token)

        try:
            value = await asyncio.shield(in_flight.task)
        except Exception as e:
            if token == self._latest_token:
                for listener in list(self._error_listeners):
                    listener(request, e)
            else:
                logger.debug("stale_error_discarded", token=token, latest=self._latest_token)
            raise

        self._publish_result(token, request, value)
        return value

    def invalidate(self) -> None:
        """Forget completed results; requests already in flight are not stored."""
        self._completed.clear()
        self._generation += 1
        logger.debug("request_cache_invalidated", generation=self._generation)

    def __len__(self) -> int:
        return len(self._completed)

    def _start(self, request: K) -> _InFlight:
        self.network_calls += 1
        task = asyncio.ensure_future(self._fetcher(request))
        in_flight = _InFlight(task=task, generation=self._generation)
        self._in_flight[request] = in_flight
        task.add_done_callback(lambda done: self._settle(request, in_flight))
        return in_flight

    def _settle(self, request: K, in_flight: _InFlight) -> None:
        if self._in_flight.get(request) is in_flight:
            del self._in_flight[request]

        task = in_flight.task
        if task.cancelled() or task.exception() is not None:
            return
        if in_flight.generation != self._generation:
            return

        self._completed[request] = _CachedResult(value=task.result(), stored_at=self._clock())
        self._completed.move_to_end(request)
        while len(self._completed) > self.max_entries:
            self._completed.popitem(last=False)

    def _lookup(self, request: K) -> Optional[_CachedResult]:
        cached = self._completed.get(request)
        if cached is None:
            return None
        if self._clock() - cached.stored_at > self.ttl_seconds:
            del self._completed[request]
            return None
        self._completed.move_to_end(request)
        return cached

    def _publish_result(self, token: int, request: K, value: V) -> None:
        if token != self._latest_token:
            logger.debug("stale_response_discarded", token=token, latest=self._latest_token)
            return
        for listener in list(self._result_listeners):
            listener(request, value)

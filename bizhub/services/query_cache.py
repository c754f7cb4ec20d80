"""
Query Cache

Keyed, coalescing cache around asynchronous loaders. Concurrent requests
for one key share a single in-flight load, successful results are reused
until the key is invalidated, and every outcome is reported as a
QueryResult (loading / success / error) rather than raised.

Ordering rules:
- each load gets a monotonically increasing request id; a result older than
  the one already stored is dropped
- a load that was in flight when its key was invalidated does not populate
  the cache (its own awaiting callers still receive it)
- when every caller awaiting a load is cancelled, the load is cancelled and
  the cache is left untouched
"""

import asyncio
import itertools
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

from bizhub.errors import QueryTimeout
from bizhub.models.query import QueryResult
from bizhub.utils.config import settings

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[List[Any]]]


class _Entry:
    """Cache slot for one key"""

    __slots__ = ("result", "fresh", "generation", "applied_request", "task")

    def __init__(self):
        self.result: Optional[QueryResult] = None
        self.fresh = False
        self.generation = 0
        self.applied_request = 0
        self.task: Optional[asyncio.Task] = None


class QueryCache:
    """In-memory query cache with at most one in-flight load per key"""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds a single load may take before it resolves to an
                Error("Timeout") result (defaults to settings.QUERY_TIMEOUT_SECONDS)
        """
        self.timeout = settings.QUERY_TIMEOUT_SECONDS if timeout is None else timeout
        self._entries: Dict[Hashable, _Entry] = {}
        self._waiters: Dict[asyncio.Task, int] = {}
        self._request_ids = itertools.count(1)

    def _entry(self, key: Hashable) -> _Entry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _Entry()
        return entry

    def keys(self) -> List[Hashable]:
        return list(self._entries)

    def state(self, key: Hashable) -> QueryResult:
        """Current result for a key without triggering a load"""
        entry = self._entries.get(key)
        if entry is None:
            return QueryResult.loading()
        if entry.fresh and entry.result is not None:
            return entry.result
        if entry.task is not None or entry.result is None:
            return QueryResult.loading()
        return entry.result

    def is_fetching(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.task is not None

    async def fetch(self, key: Hashable, loader: Loader) -> QueryResult:
        """
        Return the cached result for key, loading it if needed.

        A fresh successful result is returned without calling the loader.
        Otherwise the caller joins the in-flight load, or starts one.
        """
        entry = self._entry(key)
        if entry.fresh and entry.result is not None:
            logger.debug(f"Cache hit for {key!r}")
            return entry.result
        if entry.task is None:
            entry.task = self._start(key, entry, loader)
        return await self._wait(entry, entry.task)

    async def refetch(self, key: Hashable, loader: Loader) -> QueryResult:
        """
        Load key again regardless of cached state.

        If a load is already in flight it is allowed to finish first, so the
        backend never sees two concurrent reads for one key.
        """
        entry = self._entry(key)
        pending = entry.task
        if pending is not None:
            await self._wait(entry, pending)
            if entry.task is not None:
                # another refetch started the follow-up load already
                return await self._wait(entry, entry.task)
        entry.fresh = False
        entry.task = self._start(key, entry, loader)
        return await self._wait(entry, entry.task)

    def invalidate(self, key: Hashable) -> None:
        """Mark key stale; the next fetch loads again"""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.generation += 1
        entry.fresh = False
        logger.debug(f"Invalidated {key!r}")

    def invalidate_all(self) -> None:
        for key in list(self._entries):
            self.invalidate(key)

    def _start(self, key: Hashable, entry: _Entry, loader: Loader) -> asyncio.Task:
        request_id = next(self._request_ids)
        logger.debug(f"Loading {key!r} (request #{request_id})")
        return asyncio.get_running_loop().create_task(
            self._run(key, entry, loader, request_id, entry.generation)
        )

    async def _run(
        self,
        key: Hashable,
        entry: _Entry,
        loader: Loader,
        request_id: int,
        generation: int
    ) -> QueryResult:
        try:
            data = await asyncio.wait_for(loader(), timeout=self.timeout)
            result = QueryResult.success(list(data), request_id)
        except asyncio.TimeoutError:
            logger.warning(f"Query {key!r} timed out after {self.timeout}s")
            result = QueryResult.failure(QueryTimeout(), request_id)
        except asyncio.CancelledError:
            logger.debug(f"Load #{request_id} for {key!r} cancelled")
            self._release(entry)
            raise
        except Exception as e:
            logger.error(f"Query {key!r} failed: {e}")
            result = QueryResult.failure(e, request_id)

        self._store(key, entry, result, generation)
        self._release(entry)
        return result

    def _store(self, key: Hashable, entry: _Entry, result: QueryResult, generation: int) -> None:
        if generation != entry.generation:
            logger.debug(f"Discarding request #{result.request_id} for {key!r}: invalidated while in flight")
            return
        if result.request_id < entry.applied_request:
            logger.debug(f"Discarding request #{result.request_id} for {key!r}: newer result stored")
            return
        entry.applied_request = result.request_id
        entry.result = result
        entry.fresh = result.is_success

    def _release(self, entry: _Entry) -> None:
        if entry.task is asyncio.current_task():
            entry.task = None

    async def _wait(self, entry: _Entry, task: asyncio.Task) -> QueryResult:
        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._waiters[task] == 1 and not task.done():
                logger.debug("Last consumer left; cancelling in-flight load")
                if entry.task is task:
                    entry.task = None
                task.cancel()
            raise
        finally:
            self._waiters[task] -= 1
            if not self._waiters[task]:
                del self._waiters[task]

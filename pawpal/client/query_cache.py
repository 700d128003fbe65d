"""
Keyed query cache for the asyncio client.

Entries are refreshed only through explicit invalidation; there is no TTL.
Every invalidation gives the entry a new generation number, and a fetch
only stores its result if the entry still has the generation it started
under. Generation numbers come from one counter per cache, so a fetch
that outlives ``remove`` or ``clear`` can never write into a new entry
under the same key.
"""
import asyncio
import enum
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from pawpal.client.query_keys import INVALIDATION_PATHS, matches_path
from pawpal.schemas import EntityKind

logger = logging.getLogger(__name__)


class QueryStatus(enum.Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'


@dataclass
class CacheEntry:
    key: str
    generation: int
    data: Any = None
    error: Optional[BaseException] = None
    status: QueryStatus = QueryStatus.IDLE
    stale: bool = True
    updated_at: Optional[float] = None
    in_flight: Optional[asyncio.Future] = field(default=None, repr=False)
    in_flight_generation: Optional[int] = None

    @property
    def is_fetching(self):
        return self.in_flight is not None and not self.in_flight.done()


class QueryCache:
    def __init__(self):
        self._entries = {}
        self._generations = itertools.count(1)

    def __contains__(self, key):
        return key in self._entries

    def __len__(self):
        return len(self._entries)

    def keys(self):
        return list(self._entries)

    def get_entry(self, key):
        return self._entries.get(key)

    def get_data(self, key, default=None):
        """Last data written for ``key``, also while a refetch is running or after it failed."""
        entry = self._entries.get(key)
        if entry is None or entry.updated_at is None:
            return default
        return entry.data

    def _entry(self, key):
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key, generation=next(self._generations))
            self._entries[key] = entry
        return entry

    async def fetch(self, key, fetcher, force=False):
        """
        Cached data for ``key``, calling ``fetcher()`` when there is none.

        ``fetcher`` is a zero-argument callable returning an awaitable.
        Callers asking for the same key while a fetch for the current
        generation is running share that fetch and see the same result or
        exception. Cancelling one caller leaves the shared fetch running.
        """
        entry = self._entry(key)
        if not force and entry.status is QueryStatus.SUCCESS and not entry.stale:
            return entry.data

        if entry.is_fetching and entry.in_flight_generation == entry.generation:
            logger.debug(f"Joining in-flight fetch for {key}")
        else:
            self._start(entry, fetcher)
        return await asyncio.shield(entry.in_flight)

    def _start(self, entry, fetcher):
        generation = entry.generation
        task = asyncio.ensure_future(self._run(entry.key, generation, fetcher))
        task.add_done_callback(_consume_exception)
        entry.in_flight = task
        entry.in_flight_generation = generation
        entry.status = QueryStatus.LOADING
        logger.debug(f"Fetching {entry.key} (generation {generation})")

    async def _run(self, key, generation, fetcher):
        try:
            data = await fetcher()
        except asyncio.CancelledError:
            self._settle(key, generation, cancelled=True)
            raise
        except Exception as exc:
            self._settle(key, generation, error=exc)
            raise
        self._settle(key, generation, data=data)
        return data

    def _settle(self, key, generation, data=None, error=None, cancelled=False):
        entry = self._entries.get(key)
        if entry is None:
            return False
        if entry.in_flight_generation == generation:
            entry.in_flight = None
            entry.in_flight_generation = None
        if cancelled or entry.generation != generation:
            logger.debug(f"Discarding result for {key} (generation {generation})")
            if entry.status is QueryStatus.LOADING and not entry.is_fetching:
                entry.status = _resting_status(entry)
            return False
        if error is None:
            entry.data = data
            entry.error = None
            entry.status = QueryStatus.SUCCESS
            entry.stale = False
            entry.updated_at = time.monotonic()
        else:
            # previous data stays available next to the error
            entry.error = error
            entry.status = QueryStatus.ERROR
        return True

    def invalidate(self, path):
        """Mark every entry under ``path`` stale; returns the affected keys."""
        invalidated = []
        for key, entry in self._entries.items():
            if matches_path(key, path):
                entry.generation = next(self._generations)
                entry.stale = True
                invalidated.append(key)
        if invalidated:
            logger.debug(f"Invalidated {len(invalidated)} entries under {path}")
        return invalidated

    def invalidate_kind(self, kind):
        invalidated = []
        for path in INVALIDATION_PATHS[EntityKind(kind)]:
            invalidated.extend(self.invalidate(path))
        return invalidated

    def set_data(self, key, data):
        """Write data directly, superseding any fetch still in flight."""
        entry = self._entry(key)
        entry.generation = next(self._generations)
        entry.data = data
        entry.error = None
        entry.status = QueryStatus.SUCCESS
        entry.stale = False
        entry.updated_at = time.monotonic()
        return entry

    def remove(self, key):
        return self._entries.pop(key, None)

    def clear(self):
        self._entries.clear()


def _consume_exception(task):
    # callers may all have gone away; the error is already on the entry
    if not task.cancelled():
        task.exception()


def _resting_status(entry):
    if entry.error is not None:
        return QueryStatus.ERROR
    if entry.updated_at is not None:
        return QueryStatus.SUCCESS
    return QueryStatus.IDLE

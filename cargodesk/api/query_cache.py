"""
CargoDesk - Query Cache

Per-session cache of backend query results keyed by endpoint and arguments.
Each entry records the cache tags it provides; mutations invalidate tags and
every entry providing an invalidated tag is dropped, so the next read goes
back to the backend. Entries older than the max age count as misses and are
pruned, so changes made by other users show up without a local mutation.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, FrozenSet, Hashable, Iterable, Optional, Tuple

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheTag:
    """
    Label attached to cached data.

    A tag without an id stands for every record of the type; a tag with an
    id stands for one record.
    """
    type: str
    id: Optional[str] = None

    def matches(self, provided: "CacheTag") -> bool:
        """True if invalidating this tag drops an entry that provides `provided`."""
        if self.type != provided.type:
            return False
        return self.id is None or self.id == provided.id


@dataclass
class CacheEntry:
    """A cached query result"""
    data: Any
    tags: FrozenSet[CacheTag]
    fetched_at_utc: datetime = field(default_factory=_utcnow)


def _freeze(value: Any) -> Hashable:
    if isinstance(value, dict):
        return tuple(sorted((str(key), _freeze(item)) for key, item in value.items()))
    if isinstance(value, (list, tuple, set)):
        return tuple(_freeze(item) for item in value)
    return value


class QueryCache:
    """
    Tag-invalidated cache for backend queries.

    Responsibilities:
    - Return the cached result for an (endpoint, args) pair when present
    - Fetch and store the result otherwise; failed fetches are not stored
    - Drop every entry providing a tag when that tag is invalidated
    - Treat entries older than max_age_seconds as misses and prune them
    """

    def __init__(self, max_age_seconds: Optional[float] = DEFAULT_MAX_AGE_SECONDS):
        """
        Initialize an empty cache.

        Args:
            max_age_seconds: Age after which an entry is refetched; None keeps
                entries until they are invalidated
        """
        self.max_age = timedelta(seconds=max_age_seconds) if max_age_seconds is not None else None
        self._entries: Dict[Tuple[str, Hashable], CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, now: datetime) -> bool:
        return self.max_age is None or now - entry.fetched_at_utc < self.max_age

    def _prune(self, now: datetime) -> None:
        # Caller holds the lock
        stale = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"Pruned {len(stale)} expired cached queries")

    @staticmethod
    def make_key(endpoint: str, args: Any = None) -> Tuple[str, Hashable]:
        """
        Build the cache key for an endpoint call.

        Args:
            endpoint: Endpoint name (e.g., "carriers.search")
            args: Query arguments; dicts and lists are frozen recursively

        Returns:
            Hashable key
        """
        return (endpoint, _freeze(args))

    def query(
        self,
        endpoint: str,
        args: Any,
        fetch: Callable[[], Any],
        provides: Iterable[CacheTag]
    ) -> Any:
        """
        Return cached data or fetch and cache it.

        Args:
            endpoint: Endpoint name
            args: Query arguments
            fetch: Callable performing the backend request
            provides: Tags the result is filed under

        Returns:
            Query result

        Raises:
            Whatever fetch raises; nothing is cached in that case
        """
        key = self.make_key(endpoint, args)
        with self._lock:
            self._prune(_utcnow())
            entry = self._entries.get(key)
        if entry is not None:
            logger.debug(f"Cache hit for {endpoint}")
            return entry.data

        data = fetch()

        with self._lock:
            self._entries[key] = CacheEntry(data=data, tags=frozenset(provides), fetched_at_utc=_utcnow())
        return data

    def invalidate(self, tags: Iterable[CacheTag]) -> int:
        """
        Drop every entry providing one of the given tags.

        Args:
            tags: Tags to invalidate

        Returns:
            Number of entries dropped
        """
        tags = list(tags)
        with self._lock:
            stale = [
                key for key, entry in self._entries.items()
                if any(tag.matches(provided) for tag in tags for provided in entry.tags)
            ]
            for key in stale:
                del self._entries[key]

        if stale:
            logger.debug(f"Invalidated {len(stale)} cached queries for tags {tags}")
        return len(stale)

    def is_cached(self, endpoint: str, args: Any = None) -> bool:
        """Check whether a result is cached for an endpoint call."""
        with self._lock:
            entry = self._entries.get(self.make_key(endpoint, args))
            return entry is not None and self._is_fresh(entry, _utcnow())

    def clear(self):
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

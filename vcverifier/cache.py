"""Thread-safe in-memory caches with per-entry expiry."""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from vcverifier.common import RealClock

#: Use the cache's default expiry for an entry.
DEFAULT_EXPIRATION = 0
#: Keep an entry until it is deleted or replaced.
NO_EXPIRATION = -1
#: Default expiry, in seconds, of the global caches.
CACHE_EXPIRY = 60


class CacheKeyExistsError(Exception):
    """Raised by ExpiringCache.add when the key is already present."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Item {key} already exists")
        self.key = key


@dataclass
class _Entry:
    value: Any
    expires_at: datetime | None


class ExpiringCache:
    """A key-value store whose entries expire after a given time.

    Expiry values are seconds (or a timedelta). DEFAULT_EXPIRATION selects
    the cache's default, NO_EXPIRATION or any non-positive value keeps the
    entry forever.
    """

    def __init__(self, default_expiry=NO_EXPIRATION, clock=None) -> None:
        self._default_expiry = default_expiry
        self._clock = clock if clock is not None else RealClock()
        self._items: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _deadline(self, expiry) -> datetime | None:
        if isinstance(expiry, timedelta):
            expiry = expiry.total_seconds()
        if expiry == DEFAULT_EXPIRATION:
            expiry = self._default_expiry
            if isinstance(expiry, timedelta):
                expiry = expiry.total_seconds()
        if expiry is None or expiry <= 0:
            return None
        return self._clock.now() + timedelta(seconds=expiry)

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._items.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock.now() > entry.expires_at:
            del self._items[key]
            return None
        return entry

    def add(self, key: str, value: Any, expiry=DEFAULT_EXPIRATION) -> None:
        """Store a value only if the key is absent or expired."""
        with self._lock:
            if self._live_entry(key) is not None:
                raise CacheKeyExistsError(key)
            self._items[key] = _Entry(value, self._deadline(expiry))

    def get(self, key: str) -> Any:
        """Return the stored value; raise KeyError if missing or expired."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                raise KeyError(key)
            return entry.value

    def set(self, key: str, value: Any, expiry=DEFAULT_EXPIRATION) -> None:
        """Store a value, replacing any existing one."""
        with self._lock:
            self._items[key] = _Entry(value, self._deadline(expiry))

    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        with self._lock:
            self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return isinstance(key, str) and self._live_entry(key) is not None


def _default_cache() -> ExpiringCache:
    return ExpiringCache(CACHE_EXPIRY)


@dataclass
class AllCaches:
    """The caches shared across the verifier."""

    service_cache: ExpiringCache = field(default_factory=_default_cache)
    tir_endpoints: ExpiringCache = field(default_factory=_default_cache)
    issuers_cache: ExpiringCache = field(default_factory=_default_cache)
    issuer_cache: ExpiringCache = field(default_factory=_default_cache)


_caches = [AllCaches()]


def global_cache() -> AllCaches:
    """Return the process-wide caches."""
    return _caches[0]


def reset_global_cache() -> None:
    """Replace the process-wide caches with fresh, empty ones."""
    _caches[0] = AllCaches()
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from collections.abc import Callable


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class BaseWindowStore(ABC):
    """Contract for per-key request timestamp windows.

    ``check_and_record`` must be atomic per key: two concurrent calls may not
    both observe room for the last remaining slot.
    """

    @abstractmethod
    def check_and_record(self, key: str, max_requests: int, window_ms: int) -> bool:
        """Drop expired timestamps, then record now and return True if under max_requests."""

    @abstractmethod
    def oldest_timestamp(self, key: str) -> float | None:
        """Return the oldest timestamp still held for key."""

    @abstractmethod
    def now(self) -> float:
        """Return the store clock in milliseconds."""


class InMemoryWindowStore(BaseWindowStore):
    """Process-local window store guarded by a single lock.

    Keys whose newest timestamp has left their window are swept every
    ``sweep_interval`` calls. A swept key would admit on its next call
    anyway, so sweeping never changes an admission decision.

    The store never holds more than ``max_keys`` keys. Keys are kept in
    order of last activity; past the cap, keys are evicted from the least
    recently active end, together with any expired keys found there.
    Evicting a live key forgets its window, so its next call is admitted as
    if it were new. This only happens while more than ``max_keys`` distinct
    callers are active within their windows.
    """

    def __init__(
        self,
        *,
        max_keys: int = 10_000,
        sweep_interval: int = 1000,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._windows: OrderedDict[str, deque[float]] = OrderedDict()
        self._window_sizes: dict[str, int] = {}
        self._lock = threading.Lock()
        self._max_keys = max_keys
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._calls = 0

    def now(self) -> float:
        return self._clock()

    def check_and_record(self, key: str, max_requests: int, window_ms: int) -> bool:
        with self._lock:
            now = self._clock()
            window_start = now - window_ms
            timestamps = self._windows.setdefault(key, deque())
            self._windows.move_to_end(key)
            self._window_sizes[key] = window_ms
            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            admitted = len(timestamps) < max_requests
            if admitted:
                timestamps.append(now)

            self._calls += 1
            if self._calls % self._sweep_interval == 0:
                self._sweep(now)
            if len(self._windows) > self._max_keys:
                self._evict_over_cap(now)
            return admitted

    def oldest_timestamp(self, key: str) -> float | None:
        with self._lock:
            timestamps = self._windows.get(key)
            return timestamps[0] if timestamps else None

    def key_count(self) -> int:
        with self._lock:
            return len(self._windows)

    def _is_expired(self, key: str, timestamps: deque[float], now: float) -> bool:
        return not timestamps or timestamps[-1] <= now - self._window_sizes[key]

    def _drop(self, key: str) -> None:
        del self._windows[key]
        del self._window_sizes[key]

    def _sweep(self, now: float) -> None:
        stale = [
            key
            for key, timestamps in self._windows.items()
            if self._is_expired(key, timestamps, now)
        ]
        for key in stale:
            self._drop(key)

    def _evict_over_cap(self, now: float) -> None:
        # Front of the order is the least recently active key.
        while self._windows:
            key, timestamps = next(iter(self._windows.items()))
            over_cap = len(self._windows) > self._max_keys
            if not over_cap and not self._is_expired(key, timestamps, now):
                return
            self._drop(key)

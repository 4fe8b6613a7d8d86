import math
from dataclasses import dataclass

from app.config.settings import Settings
from app.logging.logger import Log
from app.ratelimit.exceptions import RateLimitExceededError
from app.ratelimit.window_store import BaseWindowStore, InMemoryWindowStore


class SlidingWindowRateLimiter:
    """Admits at most N requests per key in any trailing window."""

    def __init__(self, store: BaseWindowStore) -> None:
        self._store = store

    def is_allowed(self, key: str, max_requests: int, window_ms: int) -> bool:
        return self._store.check_and_record(key, max_requests, window_ms)

    def retry_after_seconds(self, key: str, window_ms: int) -> int:
        oldest = self._store.oldest_timestamp(key)
        if oldest is None:
            return 0
        remaining_ms = oldest + window_ms - self._store.now()
        return max(1, math.ceil(remaining_ms / 1000))


@dataclass(frozen=True)
class RateLimitPolicy:
    concern: str
    max_requests: int
    window_ms: int


class RateLimiters:
    """Per-concern limiters sharing one window store.

    Keys are namespaced as ``<concern>:<identity>`` so each concern keeps an
    independent window for the same caller.
    """

    UPLOAD = "upload"
    CHAT = "chat"
    AUTH = "auth"
    GLOBAL = "global"

    def __init__(self, limiter: SlidingWindowRateLimiter, policies: list[RateLimitPolicy]) -> None:
        self._limiter = limiter
        self._policies = {policy.concern: policy for policy in policies}

    def policy(self, concern: str) -> RateLimitPolicy:
        return self._policies[concern]

    def allow(self, concern: str, identity: str) -> bool:
        policy = self._policies[concern]
        return self._limiter.is_allowed(
            f"{concern}:{identity}", policy.max_requests, policy.window_ms
        )

    def check(self, concern: str, identity: str) -> None:
        """Record a request.

        Raises:
            RateLimitExceededError: if the caller is over the concern's budget.
        """
        if self.allow(concern, identity):
            return
        policy = self._policies[concern]
        retry_after = self._limiter.retry_after_seconds(f"{concern}:{identity}", policy.window_ms)
        Log.warning("Rate limit exceeded", concern=concern, identity=identity)
        raise RateLimitExceededError(concern, retry_after)


class RateLimitersFactory:
    """Creates the limiter set configured in settings."""

    @classmethod
    def create(cls, settings: Settings, store: BaseWindowStore | None = None) -> RateLimiters:
        store = store or InMemoryWindowStore(
            max_keys=settings.rate_limit_max_keys,
            sweep_interval=settings.rate_limit_sweep_interval,
        )
        return RateLimiters(
            SlidingWindowRateLimiter(store),
            policies=[
                RateLimitPolicy(
                    RateLimiters.UPLOAD,
                    settings.rate_limit_upload_max,
                    settings.rate_limit_upload_window_ms,
                ),
                RateLimitPolicy(
                    RateLimiters.CHAT,
                    settings.rate_limit_chat_max,
                    settings.rate_limit_chat_window_ms,
                ),
                RateLimitPolicy(
                    RateLimiters.AUTH,
                    settings.rate_limit_auth_max,
                    settings.rate_limit_auth_window_ms,
                ),
                RateLimitPolicy(
                    RateLimiters.GLOBAL,
                    settings.rate_limit_global_max,
                    settings.rate_limit_global_window_ms,
                ),
            ],
        )

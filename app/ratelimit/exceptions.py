class RateLimitExceededError(Exception):
    """Raised when a caller exceeds the request budget of a limiter."""

    def __init__(self, concern: str, retry_after_seconds: int) -> None:
        super().__init__(f"Rate limit exceeded for {concern}")
        self.concern = concern
        self.retry_after_seconds = retry_after_seconds

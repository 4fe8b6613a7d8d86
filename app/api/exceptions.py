class ValidationError(Exception):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []

from app.auth.base import BaseAuthProvider
from app.auth.http_adapter import HttpAuthProvider
from app.config.settings import Settings


class AuthProviderFactory:
    """Creates the configured bearer-token resolver."""

    @classmethod
    def create(cls, settings: Settings) -> BaseAuthProvider:
        if not settings.auth_base_url.strip():
            raise ValueError("auth_base_url is required")
        return HttpAuthProvider(
            base_url=settings.auth_base_url,
            api_key=settings.auth_api_key,
            timeout_seconds=settings.auth_timeout_seconds,
        )

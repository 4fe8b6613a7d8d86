import httpx

from app.auth.base import BaseAuthProvider
from app.auth.exceptions import AuthProviderError
from app.auth.models import UserIdentity

_REJECTED_STATUSES = frozenset({400, 401, 403, 404})


class HttpAuthProvider(BaseAuthProvider):
    """Resolves tokens against a hosted auth service's ``/auth/v1/user`` endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
        )
        self._api_key = api_key

    def resolve(self, token: str) -> UserIdentity | None:
        try:
            response = self._client.get(
                "/auth/v1/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self._api_key,
                },
            )
        except httpx.HTTPError as exc:
            raise AuthProviderError(f"Auth provider unreachable: {exc}") from exc

        if response.status_code in _REJECTED_STATUSES:
            return None
        if response.status_code != 200:
            raise AuthProviderError(
                f"Auth provider returned status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthProviderError("Auth provider returned invalid JSON") from exc

        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            return None
        return UserIdentity(id=str(user_id), email=payload.get("email"))

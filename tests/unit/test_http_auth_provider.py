import httpx
import pytest

from app.auth.exceptions import AuthProviderError
from app.auth.http_adapter import HttpAuthProvider


def _provider(handler) -> HttpAuthProvider:  # type: ignore[no-untyped-def]
    client = httpx.Client(base_url="http://auth.local", transport=httpx.MockTransport(handler))
    return HttpAuthProvider(base_url="http://auth.local", api_key="anon", timeout_seconds=5, client=client)


class TestHttpAuthProvider:
    def test_resolves_identity(self) -> None:
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["apikey"] = request.headers["apikey"]
            return httpx.Response(200, json={"id": "user-1", "email": "a@example.com"})

        identity = _provider(handler).resolve("tok")

        assert identity is not None
        assert identity.id == "user-1"
        assert identity.email == "a@example.com"
        assert seen == {"path": "/auth/v1/user", "auth": "Bearer tok", "apikey": "anon"}

    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    def test_rejected_token_returns_none(self, status: int) -> None:
        provider = _provider(lambda request: httpx.Response(status, json={"msg": "bad jwt"}))
        assert provider.resolve("tok") is None

    def test_payload_without_id_returns_none(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={}))
        assert provider.resolve("tok") is None

    def test_server_error_raises(self) -> None:
        provider = _provider(lambda request: httpx.Response(502))
        with pytest.raises(AuthProviderError, match="502"):
            provider.resolve("tok")

    def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(AuthProviderError, match="unreachable"):
            _provider(handler).resolve("tok")

    def test_invalid_json_raises(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(AuthProviderError, match="invalid JSON"):
            provider.resolve("tok")

from collections.abc import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.services import Services
from app.auth.exceptions import AuthenticationError
from app.auth.models import AuthenticatedUser, UserIdentity
from app.config.settings import Settings
from app.ratelimit.limiter import RateLimiters

bearer = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    services: Services = Depends(get_services),
) -> UserIdentity:
    """Resolve the bearer token; repeated failures from one address hit the auth limit."""
    token = credentials.credentials if credentials else None
    try:
        return services.auth.authenticate(token)
    except AuthenticationError:
        services.rate_limiters.check(RateLimiters.AUTH, client_ip(request))
        raise


def require_approved_user(
    identity: UserIdentity = Depends(get_identity),
    services: Services = Depends(get_services),
) -> AuthenticatedUser:
    return services.auth.require_approved(identity)


def rate_limited_user(concern: str) -> Callable[..., AuthenticatedUser]:
    """Authenticate, count the request against ``<concern>:<user id>``, then check approval."""

    def dependency(
        identity: UserIdentity = Depends(get_identity),
        services: Services = Depends(get_services),
    ) -> AuthenticatedUser:
        services.rate_limiters.check(concern, identity.id)
        return services.auth.require_approved(identity)

    return dependency

from app.auth.base import BaseAuthProvider
from app.auth.exceptions import AccountNotApprovedError, AuthenticationError
from app.auth.models import AuthenticatedUser, UserIdentity
from app.database.repositories.profiles_repository import ProfilesRepository
from app.logging.logger import Log


class AuthService:
    """Authenticates bearer tokens and checks account approval."""

    def __init__(self, provider: BaseAuthProvider, profiles_repository: ProfilesRepository) -> None:
        self._provider = provider
        self._profiles = profiles_repository

    def authenticate(self, token: str | None) -> UserIdentity:
        """Resolve a bearer token.

        Raises:
            AuthenticationError: if the token is absent or rejected.
            AuthProviderError: if the provider fails.
        """
        if not token:
            raise AuthenticationError("Unauthorized - No token provided")
        identity = self._provider.resolve(token)
        if identity is None:
            raise AuthenticationError("Unauthorized - Invalid token")
        return identity

    def require_approved(self, identity: UserIdentity) -> AuthenticatedUser:
        """Raises AccountNotApprovedError unless the user's profile is approved."""
        profile = self._profiles.find_by_user_id(identity.id)
        if profile is None or not profile.is_approved:
            Log.warning("User not approved", user_id=identity.id)
            raise AccountNotApprovedError("Account not approved")
        return AuthenticatedUser(identity=identity, profile=profile)

from abc import ABC, abstractmethod

from app.auth.models import UserIdentity


class BaseAuthProvider(ABC):
    """Contract for resolving a bearer token to a user identity."""

    @abstractmethod
    def resolve(self, token: str) -> UserIdentity | None:
        """Return the identity for token, or None if the token is invalid or expired.

        Raises:
            AuthProviderError: if the provider itself fails.
        """

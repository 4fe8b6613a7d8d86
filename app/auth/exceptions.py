class AuthenticationError(Exception):
    """Raised when a request carries no bearer token or an invalid one."""


class AuthorizationError(Exception):
    """Raised when an authenticated user may not perform the action."""


class AccountNotApprovedError(AuthorizationError):
    """Raised when the user's profile is missing or not approved."""


class AuthProviderError(Exception):
    """Raised when the identity provider cannot be reached or answers unexpectedly."""

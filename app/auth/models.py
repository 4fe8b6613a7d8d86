from dataclasses import dataclass

from app.database.models import ProfileRecord


@dataclass(frozen=True)
class UserIdentity:
    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """An identity whose profile has been checked for approval."""

    identity: UserIdentity
    profile: ProfileRecord

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def is_admin(self) -> bool:
        return self.profile.is_admin

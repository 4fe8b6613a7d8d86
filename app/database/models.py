from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    user_id: str
    title: str
    content: str
    file_path: str
    file_size: int
    file_type: str
    is_company_wide: bool = False
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "file_path": self.file_path,
            "file_size": self.file_size,
            "file_type": self.file_type,
            "is_company_wide": self.is_company_wide,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewDocument:
    """Values for a documents row that has not been inserted yet."""

    user_id: str
    title: str
    content: str
    file_path: str
    file_size: int
    file_type: str
    is_company_wide: bool = False


@dataclass(frozen=True)
class ProfileRecord:
    """Represents a row from the profiles table."""

    id: str
    status: str
    role: str
    email: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

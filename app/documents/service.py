from app.auth.exceptions import AuthorizationError
from app.auth.models import AuthenticatedUser
from app.database.models import DocumentRecord
from app.database.repositories.documents_repository import DocumentsRepository
from app.documents.exceptions import DocumentNotFoundError
from app.logging.logger import Log
from app.storage.lifecycle import StorageLifecycleManager


class DocumentService:
    """Listing, deletion and signed access for stored documents."""

    def __init__(
        self,
        documents_repository: DocumentsRepository,
        lifecycle: StorageLifecycleManager,
        signed_url_expiry_seconds: int = 3600,
    ) -> None:
        self._documents = documents_repository
        self._lifecycle = lifecycle
        self._signed_url_expiry_seconds = signed_url_expiry_seconds

    def list_documents(
        self,
        user: AuthenticatedUser,
        *,
        company_wide_only: bool = False,
        owner_id: str | None = None,
    ) -> list[DocumentRecord]:
        return self._documents.list_documents(
            viewer_id=user.id,
            is_admin=user.is_admin,
            company_wide_only=company_wide_only,
            owner_id=owner_id,
        )

    def delete_document(self, user: AuthenticatedUser, document_id: str) -> None:
        """Delete the stored object, then the record.

        A failed object deletion is logged and does not stop the record deletion.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            AuthorizationError: if the caller is neither the owner nor an admin.
        """
        document = self._documents.find_by_id(document_id)
        if document.user_id != user.id and not user.is_admin:
            raise AuthorizationError("Access denied")

        if not self._lifecycle.delete(document.file_path):
            Log.warning(
                "Storage deletion failed, deleting record anyway",
                document_id=document_id,
                key=document.file_path,
            )
        self._documents.delete(document_id)
        Log.info("Document deleted", document_id=document_id, user_id=user.id)

    def signed_url(self, user: AuthenticatedUser, file_path: str) -> str:
        """Return a time-bounded URL for a document the caller may read.

        Raises:
            DocumentNotFoundError: if no document references file_path.
            AuthorizationError: if the document is private to another user.
        """
        document = self._documents.find_by_file_path(file_path)
        if document is None:
            raise DocumentNotFoundError("Document not found")
        if not _can_read(user, document):
            raise AuthorizationError("Access denied")
        return self._lifecycle.signed_url(file_path, self._signed_url_expiry_seconds)


def _can_read(user: AuthenticatedUser, document: DocumentRecord) -> bool:
    return document.user_id == user.id or document.is_company_wide or user.is_admin

class DocumentServiceError(Exception):
    """Base exception for document and conversation lookups."""


class DocumentNotFoundError(DocumentServiceError):
    """Raised when a document cannot be found or is hidden from the caller."""


class ConversationNotFoundError(DocumentServiceError):
    """Raised when a conversation does not exist or belongs to someone else."""

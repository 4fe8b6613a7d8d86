class IngestionError(Exception):
    """Base exception for the ingestion pipeline."""


class MetadataPersistError(IngestionError):
    """Raised when the metadata index rejects a document record."""

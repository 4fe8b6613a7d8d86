class StorageError(Exception):
    """Raised when the object storage backend fails."""


class StorageWriteError(StorageError):
    """Raised when an object could not be written."""


class StorageReadError(StorageError):
    """Raised when an object could not be read."""


class ObjectNotFoundError(StorageReadError):
    """Raised when the requested object key does not exist."""


class StorageDeleteError(StorageError):
    """Raised when an object could not be removed."""

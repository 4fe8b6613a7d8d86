from abc import ABC, abstractmethod


class BaseObjectStorage(ABC):
    """Contract for durable object storage backends.

    Every write is a single put of the full payload, so a failed write
    never leaves a partial object behind.
    """

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        """Store data under key. Raises StorageWriteError."""

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """Return the object body. Raises ObjectNotFoundError or StorageReadError."""

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """Remove the object. Raises StorageDeleteError."""

    @abstractmethod
    def object_exists(self, bucket: str, key: str) -> bool:
        """Return True if the key is present in the bucket."""

    @abstractmethod
    def create_signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        """Return a time-bounded read URL for the object."""

    @abstractmethod
    def ensure_bucket(self, bucket: str) -> None:
        """Create the bucket if it does not exist yet."""

import secrets
import shutil
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from app.extraction.models import UploadedFile
from app.logging.logger import Log
from app.storage.base import BaseObjectStorage
from app.storage.exceptions import StorageError, StorageReadError, StorageWriteError
from app.storage.models import StoredObject


class StorageLifecycleManager:
    """Moves files between scratch space and durable object storage.

    Scratch files are request-scoped: callers acquire them through
    ``scratch_file`` or ``downloaded`` so they are removed on every exit path.
    ``delete`` is best-effort because it also serves as the compensating
    action when a later step fails.
    """

    def __init__(self, storage: BaseObjectStorage, bucket: str, scratch_dir: Path) -> None:
        self._storage = storage
        self._bucket = bucket
        self._scratch_dir = Path(scratch_dir)

    @property
    def bucket(self) -> str:
        return self._bucket

    def ensure_bucket(self) -> bool:
        """Create the bucket at startup. Failures are logged and reported as False."""
        try:
            self._storage.ensure_bucket(self._bucket)
        except StorageError as exc:
            Log.warning("Could not initialize storage bucket", bucket=self._bucket, error=str(exc))
            return False
        Log.info("Storage bucket ready", bucket=self._bucket)
        return True

    @staticmethod
    def generate_object_key(original_name: str, prefix: str | None = None) -> str:
        extension = Path(original_name).suffix.lower()
        name = f"{_now_ms()}-{secrets.randbelow(10**9)}{extension}"
        return f"{prefix}/{name}" if prefix else name

    def stage_upload(self, stream: BinaryIO, filename: str, content_type: str) -> UploadedFile:
        """Copy an inbound upload stream into a fresh scratch file."""
        self._scratch_dir.mkdir(parents=True, exist_ok=True)
        extension = Path(filename).suffix.lower()
        path = self._scratch_dir / f"file-{_now_ms()}-{secrets.randbelow(10**9)}{extension}"
        try:
            with path.open("wb") as target:
                shutil.copyfileobj(stream, target)
        except OSError:
            self.cleanup_scratch(path)
            raise
        return UploadedFile(
            scratch_path=path,
            content_type=content_type,
            size=path.stat().st_size,
            original_name=filename,
        )

    def upload(
        self,
        scratch_path: Path,
        original_name: str,
        content_type: str,
        prefix: str | None = None,
    ) -> StoredObject:
        """Write a scratch file to durable storage under a new key.

        Raises:
            StorageWriteError: if the file cannot be read or the put fails.
        """
        key = self.generate_object_key(original_name, prefix)
        try:
            data = Path(scratch_path).read_bytes()
        except OSError as exc:
            raise StorageWriteError(f"Failed to read scratch file {scratch_path}: {exc}") from exc

        self._storage.put_object(self._bucket, key, data, content_type)
        Log.info("File uploaded to storage", key=key, size=len(data))
        return StoredObject(
            bucket=self._bucket,
            key=key,
            content_type=content_type,
            size=len(data),
        )

    def download(self, key: str) -> Path:
        """Fetch an object into a freshly named scratch file.

        Raises:
            StorageReadError: if the object is missing or unreadable.
        """
        data = self._storage.get_object(self._bucket, key)
        self._scratch_dir.mkdir(parents=True, exist_ok=True)
        path = self._scratch_dir / f"temp-{_now_ms()}-{Path(key).name}"
        try:
            path.write_bytes(data)
        except OSError as exc:
            self.cleanup_scratch(path)
            raise StorageReadError(f"Failed to write scratch copy of {key}: {exc}") from exc
        Log.info("File downloaded to scratch", key=key, path=str(path))
        return path

    def delete(self, key: str) -> bool:
        try:
            self._storage.delete_object(self._bucket, key)
        except StorageError as exc:
            Log.error("Failed to delete object from storage", key=key, error=str(exc))
            return False
        Log.info("File deleted from storage", key=key)
        return True

    def object_exists(self, key: str) -> bool:
        return self._storage.object_exists(self._bucket, key)

    def signed_url(self, key: str, expires_in: int) -> str:
        return self._storage.create_signed_url(self._bucket, key, expires_in)

    def cleanup_scratch(self, path: Path | None) -> None:
        if path is None:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            Log.error("Failed to clean up scratch file", path=str(path), error=str(exc))
            return
        Log.debug("Cleaned up scratch file", path=str(path))

    @contextmanager
    def scratch_file(self, path: Path) -> Iterator[Path]:
        try:
            yield path
        finally:
            self.cleanup_scratch(path)

    @contextmanager
    def downloaded(self, key: str) -> Iterator[Path]:
        """Download an object for processing and remove the copy afterwards."""
        path = self.download(key)
        try:
            yield path
        finally:
            self.cleanup_scratch(path)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000

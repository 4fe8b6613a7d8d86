import os
import tempfile
from pathlib import Path

from app.logging.logger import Log
from app.storage.base import BaseObjectStorage
from app.storage.exceptions import (
    ObjectNotFoundError,
    StorageDeleteError,
    StorageReadError,
    StorageWriteError,
)


class LocalObjectStorage(BaseObjectStorage):
    """Object storage on the local filesystem, one directory per bucket.

    Objects are written to a temporary sibling and renamed into place so a
    failed write never leaves a partial object under the final key.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        target = self._path(bucket, key)
        tmp_name: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=target.parent, prefix=".upload-", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageWriteError(f"Failed to upload {key}: {exc}") from exc

    def get_object(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(f"Object {key} not found in {bucket}") from exc
        except OSError as exc:
            raise StorageReadError(f"Failed to download {key}: {exc}") from exc

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self._path(bucket, key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageDeleteError(f"Failed to delete {key}: {exc}") from exc

    def object_exists(self, bucket: str, key: str) -> bool:
        return self._path(bucket, key).is_file()

    def create_signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        """Return a ``file://`` URI for the object.

        Local files cannot carry an expiry, so ``expires_in`` is ignored and the
        URI stays valid for as long as the file exists.
        """
        path = self._path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object {key} not found in {bucket}")
        Log.warning(
            "Local storage URL does not expire",
            key=key,
            requested_expiry_seconds=expires_in,
        )
        return path.absolute().as_uri()

    def ensure_bucket(self, bucket: str) -> None:
        (self._root / bucket).mkdir(parents=True, exist_ok=True)

    def _path(self, bucket: str, key: str) -> Path:
        bucket_root = (self._root / bucket).resolve()
        path = (bucket_root / key).resolve()
        if not path.is_relative_to(bucket_root):
            raise StorageReadError(f"Object key escapes bucket: {key}")
        return path

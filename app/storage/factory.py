from pathlib import Path

from app.config.settings import Settings
from app.storage.base import BaseObjectStorage
from app.storage.local_adapter import LocalObjectStorage
from app.storage.s3_adapter import S3ObjectStorage


class ObjectStorageFactory:
    """Creates the configured object storage backend."""

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStorage:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalObjectStorage(Path(settings.storage_local_root))
        if backend == "s3":
            return S3ObjectStorage(
                access_key=settings.storage_s3_access_key,
                secret_key=settings.storage_s3_secret_key,
                region_name=settings.storage_s3_region,
                endpoint_url=settings.storage_s3_endpoint_url,
                timeout_seconds=settings.storage_timeout_seconds,
            )
        raise ValueError(f"Unknown storage backend '{settings.storage_backend}'. Choose from: ['local', 's3']")

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.storage.base import BaseObjectStorage
from app.storage.exceptions import (
    ObjectNotFoundError,
    StorageDeleteError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3ObjectStorage(BaseObjectStorage):
    """Object storage on S3 or any S3-compatible endpoint."""

    def __init__(
        self,
        *,
        access_key: str | None,
        secret_key: str | None,
        region_name: str,
        endpoint_url: str | None = None,
        timeout_seconds: int = 30,
        client=None,
    ) -> None:
        self._client = client or boto3.client(
            "s3",
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 2},
            ),
        )
        self._region_name = region_name

    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageWriteError(f"Failed to upload {key}: {exc}") from exc

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise ObjectNotFoundError(f"Object {key} not found in {bucket}") from exc
            raise StorageReadError(f"Failed to download {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageReadError(f"Failed to download {key}: {exc}") from exc

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageDeleteError(f"Failed to delete {key}: {exc}") from exc

    def object_exists(self, bucket: str, key: str) -> bool:
        try:
            self._client.head_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                return False
            raise StorageReadError(f"Failed to inspect {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageReadError(f"Failed to inspect {key}: {exc}") from exc
        return True

    def create_signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to sign URL for {key}: {exc}") from exc

    def ensure_bucket(self, bucket: str) -> None:
        try:
            self._client.head_bucket(Bucket=bucket)
            return
        except ClientError as exc:
            if _error_code(exc) not in _MISSING_CODES:
                raise StorageError(f"Failed to inspect bucket {bucket}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to inspect bucket {bucket}: {exc}") from exc

        params: dict[str, object] = {"Bucket": bucket}
        if self._region_name != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": self._region_name,
            }
        try:
            self._client.create_bucket(**params)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to create bucket {bucket}: {exc}") from exc


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))

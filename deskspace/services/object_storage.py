"""Object storage adapter over an S3-compatible store (MinIO client).

Exposes only what the rest of the application needs: ``upload`` returning a
``StoredObject(url, id)`` and ``delete(id)``.
"""

import io
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..exceptions import ExternalServiceError, ServiceFailure

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

PRESIGNED_URL_TTL = timedelta(days=7)


@dataclass(frozen=True)
class StoredObject:
    url: str
    id: str


def safe_object_name(filename: str) -> str:
    name = _UNSAFE_CHARS.sub("_", (filename or "").rsplit("/", 1)[-1]).strip("._")
    return name or "file"


class ObjectStorage:
    """Uploads and deletes blobs in a single bucket."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        bucket: str = "deskspace",
        secure: bool = True,
        public_url: str = "",
    ):
        self.endpoint = endpoint
        self.access_key = access_key
        self.secret_key = secret_key
        self.bucket = bucket
        self.secure = secure
        self.public_url = public_url.rstrip("/")
        self._client = None
        self._bucket_ready = False

    @classmethod
    def from_settings(cls, settings) -> "ObjectStorage":
        return cls(
            endpoint=settings.storage_endpoint,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            bucket=settings.storage_bucket,
            secure=settings.storage_secure,
            public_url=settings.storage_public_url,
        )

    def is_configured(self) -> bool:
        return bool(self.endpoint and self.access_key and self.secret_key)

    def _get_client(self):
        if not self.is_configured():
            raise ExternalServiceError(
                "storage",
                "Object storage is not configured. Set STORAGE_ENDPOINT, STORAGE_ACCESS_KEY and STORAGE_SECRET_KEY.",
                category=ServiceFailure.NOT_CONFIGURED,
            )
        if self._client is None:
            from minio import Minio

            self._client = Minio(
                self.endpoint,
                access_key=self.access_key,
                secret_key=self.secret_key,
                secure=self.secure,
            )
        return self._client

    def _ensure_bucket(self, client) -> None:
        if self._bucket_ready:
            return
        if not client.bucket_exists(self.bucket):
            client.make_bucket(self.bucket)
        self._bucket_ready = True

    def _url_for(self, client, object_name: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{self.bucket}/{object_name}"
        return client.presigned_get_object(self.bucket, object_name, expires=PRESIGNED_URL_TTL)

    def upload(
        self,
        data: bytes,
        filename: str,
        folder: str,
        content_type: Optional[str] = None,
    ) -> StoredObject:
        """Store *data* under ``<folder>/<uuid>-<filename>``.

        Raises:
            ExternalServiceError: storage not configured or the upload failed.
        """
        client = self._get_client()
        object_name = f"{folder.strip('/')}/{uuid.uuid4().hex}-{safe_object_name(filename)}"
        try:
            self._ensure_bucket(client)
            client.put_object(
                self.bucket,
                object_name,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type or "application/octet-stream",
            )
            url = self._url_for(client, object_name)
        except Exception as e:
            raise self._wrap(e, "upload") from e

        logger.info("Stored object", extra={"object_id": object_name, "size": len(data)})
        return StoredObject(url=url, id=object_name)

    def delete(self, object_id: str) -> None:
        client = self._get_client()
        try:
            client.remove_object(self.bucket, object_id)
        except Exception as e:
            raise self._wrap(e, "delete") from e

    @staticmethod
    def _wrap(exc: Exception, action: str) -> ExternalServiceError:
        from minio.error import S3Error

        if isinstance(exc, S3Error):
            category = ServiceFailure.OTHER
            message = f"Object storage rejected the {action}: {exc.code}"
        else:
            category = ServiceFailure.UNREACHABLE
            message = f"Could not reach object storage during {action}"
        logger.warning(message, extra={"error": str(exc)})
        return ExternalServiceError("storage", message, category=category)

"""
Google Cloud Storage adapter.

Grants are V4 signed URLs produced with the service-account key referenced
by GOOGLE_APPLICATION_CREDENTIALS.
"""
import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from google.api_core.exceptions import NotFound
from google.cloud import storage

from uploader.storage.base import (
    GRANT_TTL_SECONDS,
    ObjectDownload,
    ObjectSummary,
    Operation,
    ProviderConfig,
    ProviderId,
)

logger = logging.getLogger(__name__)

# Read size for streamed downloads
DOWNLOAD_CHUNK_SIZE = 1024 * 1024


def iter_blob_chunks(reader, chunk_size: int):
    """Yield a blob reader's content in chunks, closing it when exhausted."""
    with reader:
        while True:
            chunk = reader.read(chunk_size)
            if not chunk:
                break
            yield chunk


HTTP_METHODS = {
    Operation.UPLOAD: "PUT",
    Operation.DOWNLOAD: "GET",
    Operation.DELETE: "DELETE",
}


class GCSStorageAdapter:
    """
    GCS bucket adapter.

    Credentials used:
        - GOOGLE_CLOUD_PROJECT
        - GOOGLE_APPLICATION_CREDENTIALS (service-account JSON path)
        - GCP_STORAGE_BUCKET
    """

    provider_id = ProviderId.GCP

    def __init__(self, config: ProviderConfig, client=None):
        self.config = config
        if client is None:
            client = storage.Client.from_service_account_json(
                config.credentials["service_account_path"],
                project=config.endpoint_or_region,
            )
        self._client = client
        self._bucket = client.bucket(config.bucket)
        logger.info(f"GCS client initialized for bucket: {config.bucket}")

    def sign(
        self,
        operation: Operation,
        object_key: str,
        content_type: Optional[str] = None,
    ) -> Tuple[str, int]:
        ttl = GRANT_TTL_SECONDS[operation]
        kwargs = {
            "version": "v4",
            "expiration": timedelta(seconds=ttl),
            "method": HTTP_METHODS[operation],
        }
        if operation is Operation.UPLOAD and content_type:
            kwargs["content_type"] = content_type

        url = self._bucket.blob(object_key).generate_signed_url(**kwargs)
        return url, ttl

    def list_objects(self) -> List[ObjectSummary]:
        return [
            ObjectSummary.from_native(blob.name, blob.size, blob.updated)
            for blob in self._client.list_blobs(self.config.bucket)
        ]

    def exists(self, object_key: str) -> bool:
        return bool(self._bucket.blob(object_key).exists())

    def delete_object(self, object_key: str) -> None:
        try:
            self._bucket.blob(object_key).delete()
        except NotFound as e:
            raise FileNotFoundError(object_key) from e

    def get_object(self, object_key: str) -> ObjectDownload:
        blob = self._bucket.get_blob(object_key)
        if blob is None:
            raise FileNotFoundError(object_key)
        return ObjectDownload(
            key=object_key,
            content_type=blob.content_type or "application/octet-stream",
            chunks=iter_blob_chunks(blob.open("rb"), DOWNLOAD_CHUNK_SIZE),
        )

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None:
        self._bucket.blob(object_key).upload_from_string(
            data,
            content_type=content_type or "application/octet-stream",
        )

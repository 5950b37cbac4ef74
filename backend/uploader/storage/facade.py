"""
Direct (non-presigned) storage operations.

Backs the file-management view and the direct API surface: list, delete,
download-through-backend, and multipart upload. Each call is a pass-through
to the provider adapter with uniform error translation.
"""
import logging
from typing import List, Optional

from uploader.storage.base import ObjectDownload, ObjectSummary
from uploader.storage.errors import ClientInputError, ObjectNotFoundError, ProviderError
from uploader.storage.factory import ProviderClient
from uploader.utils.logging import log_provider_failure
from uploader.utils.metrics import provider_failures_total

logger = logging.getLogger(__name__)


class StorageFacade:
    """List/delete/get/put against one provider."""

    def __init__(self, client: ProviderClient):
        self.client = client

    @property
    def provider(self) -> str:
        return self.client.provider.value

    def list_files(self) -> List[ObjectSummary]:
        """
        List every object in the configured bucket/container.

        Order is whatever the provider returns. Only the first page the
        SDK yields is guaranteed; very large buckets may be truncated.
        """
        adapter = self.client.require()
        try:
            files = adapter.list_objects()
        except Exception as e:
            raise self._failure("list", "Failed to list files", e) from e

        logger.info(f"Listed {len(files)} files from {self.provider} storage")
        return files

    def delete_file(self, key: Optional[str]) -> None:
        adapter = self.client.require()
        key = self._require_key(key)
        self._ensure_exists(adapter, key, "delete")

        try:
            adapter.delete_object(key)
        except FileNotFoundError as e:
            raise self._not_found("delete") from e
        except Exception as e:
            raise self._failure("delete", "Failed to delete file", e, key) from e

        logger.info(f"Deleted {key} from {self.provider} storage")

    def get_file(self, key: Optional[str]) -> ObjectDownload:
        adapter = self.client.require()
        key = self._require_key(key)
        self._ensure_exists(adapter, key, "download")

        try:
            return adapter.get_object(key)
        except FileNotFoundError as e:
            raise self._not_found("download") from e
        except Exception as e:
            raise self._failure("download", "Failed to download file", e, key) from e

    def upload_file(self, file_name: Optional[str], data: bytes, content_type: Optional[str]) -> str:
        """Store ``data`` under the raw file name and return the key."""
        adapter = self.client.require()
        if not (file_name or "").strip():
            raise ClientInputError("No file uploaded", provider=self.provider, operation="upload")

        try:
            adapter.put_object(file_name, data, content_type or "application/octet-stream")
        except Exception as e:
            raise self._failure("upload", "Upload failed", e, file_name) from e

        logger.info(f"Uploaded {file_name} ({len(data)} bytes) to {self.provider} storage")
        return file_name

    def _require_key(self, key: Optional[str]) -> str:
        if not (key or "").strip():
            raise ClientInputError("No key provided", provider=self.provider)
        return key

    def _ensure_exists(self, adapter, key: str, operation: str) -> None:
        try:
            exists = adapter.exists(key)
        except Exception as e:
            raise self._failure(operation, f"Failed to {operation} file", e, key) from e
        if not exists:
            raise self._not_found(operation)

    def _not_found(self, operation: str) -> ObjectNotFoundError:
        return ObjectNotFoundError("File not found", provider=self.provider, operation=operation)

    def _failure(self, operation: str, message: str, exc: Exception, key: Optional[str] = None) -> ProviderError:
        provider_failures_total.labels(provider=self.provider, operation=operation).inc()
        log_provider_failure(
            logger,
            provider=self.provider,
            operation=operation,
            error=exc,
            object_key=key,
            include_traceback=True,
        )
        return ProviderError(message, details=str(exc), provider=self.provider, operation=operation)

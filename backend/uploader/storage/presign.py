"""
Presigned access URL issuance.

Handles the business logic for minting AccessGrants: short-lived URLs that
authorize exactly one operation on exactly one object key, so the browser
talks to the provider directly and the backend never touches file bytes.

Flow:
1. Client requests a grant with fileName (+ fileType/fileSize for uploads)
2. Backend checks the provider is usable, then validates the input
3. For uploads, the object key is ``<epoch-millis>-<fileName>``
4. For downloads/deletes, the object must exist
5. The provider adapter signs the URL; the grant is logged and returned

Grants are never stored. Issuing twice yields two independent grants; an
earlier grant is not invalidated.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from uploader.config import Settings
from uploader.storage.base import Operation, StorageAdapter
from uploader.storage.errors import ClientInputError, ObjectNotFoundError, ProviderError
from uploader.storage.factory import ProviderClient
from uploader.utils.logging import log_grant_issued, log_provider_failure
from uploader.utils.metrics import grants_issued_total, provider_failures_total

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def make_upload_key(file_name: str, timestamp_ms: int) -> str:
    """
    Derive the object key for an upload.

    Uniqueness is timestamp-based only: two uploads of the same file name
    in the same millisecond produce the same key.
    """
    return f"{timestamp_ms}-{file_name}"


@dataclass(frozen=True)
class AccessGrant:
    """A single issued presigned URL."""
    url: str
    operation: Operation
    object_key: str
    issued_at: datetime
    expires_in_seconds: int

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.expires_in_seconds)

    @property
    def message(self) -> str:
        return f"Presigned {self.operation.value} URL generated successfully"


class UrlIssuer:
    """
    Issues AccessGrants for one provider.

    Args:
        client: The provider's ProviderClient (usable or not)
        settings: Upload checks (allowed types, size ceiling)
        clock: Epoch-millis clock, injectable for tests
    """

    def __init__(self, client: ProviderClient, settings: Settings, clock: Clock = current_millis):
        self.client = client
        self.settings = settings
        self.clock = clock

    @property
    def provider(self) -> str:
        return self.client.provider.value

    def validate_upload(self, file_name: Optional[str], file_type: Optional[str], file_size: Optional[int]) -> None:
        """
        Pre-issuance checks for uploads.

        Raises:
            ClientInputError: missing name/type, disallowed type, or oversized
        """
        if not (file_name or "").strip() or not (file_type or "").strip():
            raise ClientInputError(
                "Missing required fields: fileName and fileType are required",
                provider=self.provider,
                operation=Operation.UPLOAD.value,
            )

        if self.settings.enforce_image_types and file_type not in self.settings.allowed_upload_types:
            raise ClientInputError(
                "Invalid file type. Only image files are allowed.",
                provider=self.provider,
                operation=Operation.UPLOAD.value,
            )

        max_size = self.settings.max_upload_size_bytes
        if file_size and file_size > max_size:
            raise ClientInputError(
                f"File size too large. Maximum size is {max_size // (1024 * 1024)}MB.",
                provider=self.provider,
                operation=Operation.UPLOAD.value,
            )

    def issue_upload(
        self,
        file_name: Optional[str],
        file_type: Optional[str],
        file_size: Optional[int] = None,
    ) -> AccessGrant:
        adapter = self.client.require()
        self.validate_upload(file_name, file_type, file_size)

        object_key = make_upload_key(file_name, self.clock())
        return self._sign(adapter, Operation.UPLOAD, object_key, content_type=file_type)

    def issue_download(self, file_name: Optional[str]) -> AccessGrant:
        return self._issue_existing(Operation.DOWNLOAD, file_name)

    def issue_delete(self, file_name: Optional[str]) -> AccessGrant:
        return self._issue_existing(Operation.DELETE, file_name)

    def issue(self, operation: Operation, file_name: Optional[str], **upload_fields) -> AccessGrant:
        """Dispatch to the per-operation issue method."""
        if operation is Operation.UPLOAD:
            return self.issue_upload(file_name, **upload_fields)
        if operation is Operation.DOWNLOAD:
            return self.issue_download(file_name)
        return self.issue_delete(file_name)

    def _issue_existing(self, operation: Operation, file_name: Optional[str]) -> AccessGrant:
        """Grant for an operation on an object that must already exist."""
        adapter = self.client.require()
        if not (file_name or "").strip():
            raise ClientInputError(
                "Missing required field: fileName is required",
                provider=self.provider,
                operation=operation.value,
            )

        try:
            exists = adapter.exists(file_name)
        except Exception as e:
            raise self._provider_failure(operation, file_name, e) from e

        if not exists:
            raise ObjectNotFoundError(
                "File not found",
                provider=self.provider,
                operation=operation.value,
            )

        return self._sign(adapter, operation, file_name)

    def _sign(
        self,
        adapter: StorageAdapter,
        operation: Operation,
        object_key: str,
        content_type: Optional[str] = None,
    ) -> AccessGrant:
        issued_at = datetime.now(timezone.utc)
        try:
            url, ttl = adapter.sign(operation, object_key, content_type=content_type)
        except Exception as e:
            raise self._provider_failure(operation, object_key, e) from e

        grants_issued_total.labels(provider=self.provider, operation=operation.value).inc()
        log_grant_issued(
            logger,
            provider=self.provider,
            operation=operation,
            object_key=object_key,
            expires_in=ttl,
        )
        return AccessGrant(
            url=url,
            operation=operation,
            object_key=object_key,
            issued_at=issued_at,
            expires_in_seconds=ttl,
        )

    def _provider_failure(self, operation: Operation, object_key: str, exc: Exception) -> ProviderError:
        provider_failures_total.labels(provider=self.provider, operation=operation.value).inc()
        log_provider_failure(
            logger,
            provider=self.provider,
            operation=operation,
            error=exc,
            object_key=object_key,
            include_traceback=True,
        )
        return ProviderError(
            f"Failed to generate presigned {operation.value} URL",
            details=str(exc),
            provider=self.provider,
            operation=operation.value,
        )

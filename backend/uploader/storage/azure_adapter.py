"""
Azure Blob Storage adapter.

Grants are blob-scoped SAS tokens signed with the storage account key and
appended to the blob URL.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContentSettings,
    generate_blob_sas,
)

from uploader.storage.base import (
    GRANT_TTL_SECONDS,
    ObjectDownload,
    ObjectSummary,
    Operation,
    ProviderConfig,
    ProviderId,
)

logger = logging.getLogger(__name__)

SAS_PERMISSIONS = {
    Operation.UPLOAD: BlobSasPermissions(write=True),
    Operation.DOWNLOAD: BlobSasPermissions(read=True),
    Operation.DELETE: BlobSasPermissions(delete=True),
}


def account_url(account_name: str) -> str:
    return f"https://{account_name}.blob.core.windows.net"


class AzureBlobStorageAdapter:
    """
    Azure container adapter.

    Credentials used:
        - AZURE_STORAGE_ACCOUNT_NAME
        - AZURE_STORAGE_ACCOUNT_KEY
        - AZURE_STORAGE_CONTAINER_NAME
    """

    provider_id = ProviderId.AZURE

    def __init__(self, config: ProviderConfig, service_client=None):
        self.config = config
        self.account_name = config.endpoint_or_region
        self._account_key = config.credentials["account_key"]
        if service_client is None:
            service_client = BlobServiceClient(
                account_url=account_url(self.account_name),
                credential={"account_name": self.account_name, "account_key": self._account_key},
            )
        self._service = service_client
        self._container = service_client.get_container_client(config.bucket)
        logger.info(f"Azure Blob client initialized for container: {config.bucket}")

    @property
    def container_name(self) -> str:
        return self.config.bucket

    def sign(
        self,
        operation: Operation,
        object_key: str,
        content_type: Optional[str] = None,
    ) -> Tuple[str, int]:
        # content_type is not part of a blob SAS; the browser sets it on PUT
        ttl = GRANT_TTL_SECONDS[operation]
        now = datetime.now(timezone.utc)
        sas_token = generate_blob_sas(
            account_name=self.account_name,
            container_name=self.container_name,
            blob_name=object_key,
            account_key=self._account_key,
            permission=SAS_PERMISSIONS[operation],
            start=now,
            expiry=now + timedelta(seconds=ttl),
        )
        blob_url = self._container.get_blob_client(object_key).url
        return f"{blob_url}?{sas_token}", ttl

    def list_objects(self) -> List[ObjectSummary]:
        return [
            ObjectSummary.from_native(blob.name, blob.size, blob.last_modified)
            for blob in self._container.list_blobs()
        ]

    def exists(self, object_key: str) -> bool:
        return bool(self._container.get_blob_client(object_key).exists())

    def delete_object(self, object_key: str) -> None:
        try:
            self._container.get_blob_client(object_key).delete_blob()
        except ResourceNotFoundError as e:
            raise FileNotFoundError(object_key) from e

    def get_object(self, object_key: str) -> ObjectDownload:
        try:
            downloader = self._container.get_blob_client(object_key).download_blob()
        except ResourceNotFoundError as e:
            raise FileNotFoundError(object_key) from e
        content_settings = downloader.properties.content_settings
        return ObjectDownload(
            key=object_key,
            content_type=(content_settings.content_type if content_settings else None)
            or "application/octet-stream",
            chunks=downloader.chunks(),
        )

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None:
        self._container.get_blob_client(object_key).upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type or "application/octet-stream"),
        )

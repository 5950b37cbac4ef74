"""
Amazon S3 storage adapter.

Uses boto3 with SigV4 signing. Presigned URLs are produced locally from the
configured key pair; no network round trip is needed to sign.
"""
import logging
from typing import List, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from uploader.storage.base import (
    GRANT_TTL_SECONDS,
    ObjectDownload,
    ObjectSummary,
    Operation,
    ProviderConfig,
    ProviderId,
)

logger = logging.getLogger(__name__)

# boto3 client method signed for each grant operation
CLIENT_METHODS = {
    Operation.UPLOAD: "put_object",
    Operation.DOWNLOAD: "get_object",
    Operation.DELETE: "delete_object",
}

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def is_missing_object_error(exc: ClientError) -> bool:
    code = str(exc.response.get("Error", {}).get("Code", ""))
    return code in _MISSING_CODES


class S3StorageAdapter:
    """
    S3 bucket adapter.

    Credentials used:
        - AWS_REGION
        - AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY
        - AWS_S3_BUCKET
    """

    provider_id = ProviderId.AWS

    def __init__(self, config: ProviderConfig, client=None):
        self.config = config
        if client is None:
            client = boto3.client(
                "s3",
                region_name=config.endpoint_or_region,
                aws_access_key_id=config.credentials["access_key_id"],
                aws_secret_access_key=config.credentials["secret_access_key"],
                config=Config(signature_version="s3v4"),
            )
        self._client = client
        logger.info(f"S3 client initialized for bucket: {config.bucket}")

    @property
    def bucket(self) -> str:
        return self.config.bucket

    def sign(
        self,
        operation: Operation,
        object_key: str,
        content_type: Optional[str] = None,
    ) -> Tuple[str, int]:
        """
        Generate a presigned URL for a single operation on ``object_key``.

        For uploads the content type is part of the signature, so the
        browser must send the same Content-Type header on PUT.
        """
        ttl = GRANT_TTL_SECONDS[operation]
        params = {"Bucket": self.bucket, "Key": object_key}
        if operation is Operation.UPLOAD and content_type:
            params["ContentType"] = content_type

        url = self._client.generate_presigned_url(
            ClientMethod=CLIENT_METHODS[operation],
            Params=params,
            ExpiresIn=ttl,
        )
        return url, ttl

    def list_objects(self) -> List[ObjectSummary]:
        # Single page only (max 1000 keys); larger buckets are truncated.
        response = self._client.list_objects_v2(Bucket=self.bucket)
        return [
            ObjectSummary.from_native(obj["Key"], obj.get("Size"), obj.get("LastModified"))
            for obj in response.get("Contents", [])
        ]

    def exists(self, object_key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=object_key)
            return True
        except ClientError as e:
            if is_missing_object_error(e):
                return False
            raise

    def delete_object(self, object_key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=object_key)

    def get_object(self, object_key: str) -> ObjectDownload:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=object_key)
        except ClientError as e:
            if is_missing_object_error(e):
                raise FileNotFoundError(object_key) from e
            raise
        return ObjectDownload(
            key=object_key,
            content_type=response.get("ContentType") or "application/octet-stream",
            chunks=response["Body"].iter_chunks(),
        )

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=object_key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )

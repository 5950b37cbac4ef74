"""
Storage module for multi-cloud object storage (S3, Azure Blob, GCS).

This module issues presigned URLs so browsers upload/download/delete
directly against the provider. The backend NEVER receives file bytes on the
presigned path; only the direct API surface (StorageFacade) proxies them.
"""
from uploader.storage.base import GRANT_TTL_SECONDS, ObjectSummary, Operation, ProviderId
from uploader.storage.facade import StorageFacade
from uploader.storage.factory import ProviderClient, build_provider_registry
from uploader.storage.presign import AccessGrant, UrlIssuer

__all__ = [
    "GRANT_TTL_SECONDS",
    "ObjectSummary",
    "Operation",
    "ProviderId",
    "StorageFacade",
    "ProviderClient",
    "build_provider_registry",
    "AccessGrant",
    "UrlIssuer",
]

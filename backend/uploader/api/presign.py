"""
Presigned URL endpoints.

Implements the direct-to-storage flow for each provider:
1. POST /{p}/{p}-post     - Get presigned URL for upload
2. POST /{p}/{p}-get      - Get presigned URL for download
3. POST /{p}/{p}-delete   - Get presigned URL for delete
4. POST /{p}/{p}-response - Browser notice that an upload finished

The backend never handles file bytes on this path. Errors are raised as
storage error kinds and rendered by the application's exception handler.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from uploader.api.deps import url_issuer
from uploader.schemas.files import UploadCompletionRequest, UploadCompletionResponse
from uploader.schemas.presign import (
    ErrorResponse,
    PresignObjectRequest,
    PresignResponse,
    PresignUploadRequest,
)
from uploader.storage.base import ProviderId
from uploader.storage.errors import ClientInputError
from uploader.storage.presign import AccessGrant, UrlIssuer
from uploader.utils.logging import log_upload_completed

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _to_response(grant: AccessGrant) -> PresignResponse:
    return PresignResponse(
        presigned_url=grant.url,
        file_name=grant.object_key,
        expires_in=grant.expires_in_seconds,
        message=grant.message,
    )


def build_presign_router(provider: ProviderId) -> APIRouter:
    """Create the presigned URL routes for one provider."""
    router = APIRouter()
    p = provider.value
    get_issuer = url_issuer(provider)

    @router.post(f"/{p}-post", response_model=PresignResponse, responses=ERROR_RESPONSES)
    def presign_upload(request: PresignUploadRequest, issuer: UrlIssuer = Depends(get_issuer)):
        """
        Generate a presigned URL for direct file upload.

        The returned fileName is the object key (``<epoch-millis>-<name>``);
        the client must PUT to presignedUrl with the same Content-Type.
        """
        grant = issuer.issue_upload(request.file_name, request.file_type, request.file_size)
        return _to_response(grant)

    @router.post(f"/{p}-get", response_model=PresignResponse, responses=ERROR_RESPONSES)
    def presign_download(request: PresignObjectRequest, issuer: UrlIssuer = Depends(get_issuer)):
        """Generate a presigned URL for downloading an existing object."""
        return _to_response(issuer.issue_download(request.file_name))

    @router.post(f"/{p}-delete", response_model=PresignResponse, responses=ERROR_RESPONSES)
    def presign_delete(request: PresignObjectRequest, issuer: UrlIssuer = Depends(get_issuer)):
        """Generate a presigned URL for deleting an existing object."""
        return _to_response(issuer.issue_delete(request.file_name))

    @router.post(f"/{p}-response", response_model=UploadCompletionResponse, responses=ERROR_RESPONSES)
    def record_upload_completion(request: UploadCompletionRequest):
        """
        Record that the browser finished a presigned upload.

        Advisory only: the log line is the whole record, and the provider
        does not need to be configured.
        """
        if not (request.file_name or "").strip():
            raise ClientInputError(
                "Missing required field: fileName is required",
                provider=p,
                operation="upload",
            )

        recorded_at = datetime.now(timezone.utc)
        log_upload_completed(
            logger,
            provider=p,
            file_name=request.file_name,
            file_size=request.file_size,
            upload_time=request.upload_time or recorded_at.isoformat(),
        )
        return UploadCompletionResponse(
            message="Upload completion recorded successfully",
            file_name=request.file_name,
            recorded_at=recorded_at,
        )

    return router

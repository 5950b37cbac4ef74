"""
Pydantic schemas for API request/response validation.
"""
from uploader.schemas.presign import (
    PresignUploadRequest,
    PresignObjectRequest,
    PresignResponse,
    ErrorResponse,
)
from uploader.schemas.files import (
    FileInfo,
    FileListResponse,
    MessageResponse,
    UploadCompletionRequest,
    UploadCompletionResponse,
)

__all__ = [
    "PresignUploadRequest",
    "PresignObjectRequest",
    "PresignResponse",
    "ErrorResponse",
    "FileInfo",
    "FileListResponse",
    "MessageResponse",
    "UploadCompletionRequest",
    "UploadCompletionResponse",
]

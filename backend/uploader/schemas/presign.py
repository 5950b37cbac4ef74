"""
Pydantic schemas for presigned URL endpoints.

Field names are camelCase on the wire to match the browser client. Required
fields are declared Optional here on purpose: a missing fileName must come
back as a 400 ``{error}`` body from the issuer, not as a 422.
"""
from pydantic import BaseModel, Field
from typing import Optional


class PresignUploadRequest(BaseModel):
    """Request schema for an upload grant."""
    file_name: Optional[str] = Field(None, alias="fileName", description="Original file name")
    file_type: Optional[str] = Field(None, alias="fileType", description="MIME type (e.g. 'image/jpeg')")
    file_size: Optional[int] = Field(None, alias="fileSize", description="File size in bytes (optional)")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "fileName": "cat.jpg",
                "fileType": "image/jpeg",
                "fileSize": 1048576
            }
        }


class PresignObjectRequest(BaseModel):
    """Request schema for a download or delete grant."""
    file_name: Optional[str] = Field(None, alias="fileName", description="Object key in the bucket")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "fileName": "1700000000000-cat.jpg"
            }
        }


class PresignResponse(BaseModel):
    """Response schema for any issued grant."""
    presigned_url: str = Field(..., alias="presignedUrl", description="URL authorizing one operation")
    file_name: str = Field(..., alias="fileName", description="Object key the URL is scoped to")
    expires_in: int = Field(..., alias="expiresIn", description="URL validity in seconds")
    message: str

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "presignedUrl": "https://bucket.s3.us-east-1.amazonaws.com/...",
                "fileName": "1700000000000-cat.jpg",
                "expiresIn": 3600,
                "message": "Presigned upload URL generated successfully"
            }
        }


class ErrorResponse(BaseModel):
    """Error body returned by every storage route."""
    error: str
    details: Optional[str] = None

"""
Pydantic schemas for file management and upload-completion endpoints.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class FileInfo(BaseModel):
    """Uniform object summary, identical across providers."""
    name: str
    size: int
    last_modified: Optional[str] = Field(None, alias="lastModified")

    class Config:
        populate_by_name = True


class FileListResponse(BaseModel):
    """Schema for list responses."""
    files: List[FileInfo]


class MessageResponse(BaseModel):
    message: str


class UploadCompletionRequest(BaseModel):
    """Browser notice that a presigned upload finished."""
    file_name: Optional[str] = Field(None, alias="fileName")
    file_size: Optional[int] = Field(None, alias="fileSize")
    upload_time: Optional[str] = Field(None, alias="uploadTime", description="ISO-8601, client clock")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "fileName": "1700000000000-cat.jpg",
                "fileSize": 1048576,
                "uploadTime": "2024-01-01T12:00:00.000Z"
            }
        }


class UploadCompletionResponse(BaseModel):
    """Acknowledgement; nothing is persisted."""
    message: str
    file_name: str = Field(..., alias="fileName")
    recorded_at: datetime = Field(..., alias="recordedAt")

    class Config:
        populate_by_name = True

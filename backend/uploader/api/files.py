"""
Direct (non-presigned) file endpoints used by the file-management view.

These routes proxy provider calls through the backend:
- GET    /{p}/{p}-list  - list objects
- POST   /{p}           - multipart upload (form field ``file``)
- GET    /{p}?key=...   - download object as attachment; no key lists
- DELETE /{p}?key=...   - delete object
"""
import re
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import StreamingResponse

from uploader.api.deps import storage_facade
from uploader.api.presign import ERROR_RESPONSES
from uploader.schemas.files import FileInfo, FileListResponse, MessageResponse
from uploader.storage.base import ProviderId
from uploader.storage.facade import StorageFacade

_NON_ASCII_OR_QUOTE = re.compile(r'[^\x20-\x7e]|["\\]')


def attachment_disposition(key: str) -> str:
    """
    Content-Disposition for a download of ``key``.

    Keys that are not plain ASCII get an RFC 5987 ``filename*`` next to an
    ASCII fallback, as Starlette's FileResponse does.
    """
    quoted = quote(key)
    if quoted == key:
        return f'attachment; filename="{key}"'
    fallback = _NON_ASCII_OR_QUOTE.sub("_", key)
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"


def _file_list(facade: StorageFacade) -> FileListResponse:
    return FileListResponse(
        files=[
            FileInfo(name=obj.name, size=obj.size, last_modified=obj.last_modified)
            for obj in facade.list_files()
        ]
    )


def build_files_router(provider: ProviderId) -> APIRouter:
    """Create the direct file routes for one provider."""
    router = APIRouter()
    p = provider.value
    get_facade = storage_facade(provider)

    @router.get(f"/{p}-list", response_model=FileListResponse, responses=ERROR_RESPONSES)
    def list_files(facade: StorageFacade = Depends(get_facade)):
        """List all files in the configured bucket/container."""
        return _file_list(facade)

    @router.post("", response_model=MessageResponse, responses=ERROR_RESPONSES)
    def upload_file(
        file: Optional[UploadFile] = File(None),
        facade: StorageFacade = Depends(get_facade),
    ):
        """Upload a file through the backend under its original name."""
        file_name = file.filename if file is not None else None
        data = file.file.read() if file is not None else b""
        facade.upload_file(file_name, data, file.content_type if file is not None else None)
        return MessageResponse(message="Upload successful")

    @router.get("", responses={**ERROR_RESPONSES, 200: {"content": {"application/octet-stream": {}}}})
    def get_file(
        key: Optional[str] = Query(None, description="Object key; omit to list"),
        facade: StorageFacade = Depends(get_facade),
    ):
        """Download one object as an attachment, or list when no key is given."""
        if not key:
            return _file_list(facade)

        download = facade.get_file(key)
        return StreamingResponse(
            download.chunks,
            media_type=download.content_type,
            headers={"Content-Disposition": attachment_disposition(download.key)},
        )

    @router.delete("", response_model=MessageResponse, responses=ERROR_RESPONSES)
    def delete_file(
        key: Optional[str] = Query(None, description="Object key to delete"),
        facade: StorageFacade = Depends(get_facade),
    ):
        """Delete one object immediately."""
        facade.delete_file(key)
        return MessageResponse(message="Delete successful")

    return router

"""
API router aggregator.
Mounts the presigned and direct file routes once per provider.
"""
from fastapi import APIRouter

from uploader.api import health
from uploader.api.files import build_files_router
from uploader.api.presign import build_presign_router
from uploader.storage.base import ProviderId

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

for _provider in ProviderId:
    api_router.include_router(
        build_presign_router(_provider), prefix=f"/{_provider.value}", tags=[_provider.value]
    )
    api_router.include_router(
        build_files_router(_provider), prefix=f"/{_provider.value}", tags=[_provider.value]
    )

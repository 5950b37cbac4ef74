"""
Test configuration and fixtures.
Providers are replaced by an in-memory FakeAdapter; no cloud access needed.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"

import secrets
from typing import AsyncGenerator, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient, ASGITransport

from uploader.config import Settings
from uploader.main import create_app
from uploader.storage.base import (
    GRANT_TTL_SECONDS,
    ObjectDownload,
    ObjectSummary,
    Operation,
    ProviderConfig,
    ProviderId,
)
from uploader.storage.factory import ProviderClient, ProviderRegistry


class FakeAdapter:
    """
    In-memory adapter satisfying the StorageAdapter protocol.

    Signed URLs carry a random signature, so two grants for the same key
    differ. ``redeem`` plays the provider side: it accepts a URL only if
    this adapter signed it and performs the authorized operation.
    """

    def __init__(self, provider: ProviderId = ProviderId.AWS, objects: Optional[Dict[str, bytes]] = None):
        self.provider_id = provider
        self.config = ProviderConfig(provider=provider, endpoint_or_region="test", bucket="test-bucket")
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.calls: List[Tuple[str, str]] = []
        self._issued: Dict[str, Tuple[Operation, str]] = {}
        self.fail_with: Optional[Exception] = None

    def _record(self, name: str, key: str = "") -> None:
        self.calls.append((name, key))
        if self.fail_with is not None:
            raise self.fail_with

    def sign(self, operation: Operation, object_key: str, content_type: Optional[str] = None):
        self._record("sign", object_key)
        signature = secrets.token_hex(16)
        url = (
            f"https://{self.provider_id.value}.example.test/{self.config.bucket}/{object_key}"
            f"?op={operation.value}&sig={signature}"
        )
        self._issued[signature] = (operation, object_key)
        return url, GRANT_TTL_SECONDS[operation]

    def list_objects(self):
        self._record("list")
        return [ObjectSummary(name=name, size=len(data), last_modified=None) for name, data in self.objects.items()]

    def exists(self, object_key: str) -> bool:
        self._record("exists", object_key)
        return object_key in self.objects

    def delete_object(self, object_key: str) -> None:
        self._record("delete", object_key)
        if object_key not in self.objects:
            raise FileNotFoundError(object_key)
        del self.objects[object_key]

    def get_object(self, object_key: str) -> ObjectDownload:
        self._record("get", object_key)
        if object_key not in self.objects:
            raise FileNotFoundError(object_key)
        return ObjectDownload(key=object_key, content_type="image/png", chunks=iter([self.objects[object_key]]))

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None:
        self._record("put", object_key)
        self.objects[object_key] = data

    def redeem(self, url: str, body: bytes = b"") -> Optional[bytes]:
        """Use a signed URL the way a browser would."""
        signature = parse_qs(urlparse(url).query)["sig"][0]
        if signature not in self._issued:
            raise PermissionError("signature not issued by this provider")
        operation, key = self._issued[signature]
        if operation is Operation.UPLOAD:
            self.objects[key] = body
            return None
        if operation is Operation.DOWNLOAD:
            return self.objects[key]
        del self.objects[key]
        return None


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment and any .env file."""
    values = {
        "environment": "test",
        "aws_region": None,
        "aws_access_key_id": None,
        "aws_secret_access_key": None,
        "aws_s3_bucket": None,
        "azure_storage_account_name": None,
        "azure_storage_account_key": None,
        "azure_storage_container_name": None,
        "google_cloud_project": None,
        "google_application_credentials": None,
        "gcp_storage_bucket": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def adapters() -> Dict[ProviderId, FakeAdapter]:
    """One fake adapter per provider."""
    return {provider: FakeAdapter(provider) for provider in ProviderId}


@pytest.fixture
def registry(adapters) -> ProviderRegistry:
    return {provider: ProviderClient.usable(provider, adapter) for provider, adapter in adapters.items()}


@pytest.fixture
def unusable_registry() -> ProviderRegistry:
    return {
        provider: ProviderClient.unusable(provider, f"Missing {provider.value} environment variables")
        for provider in ProviderId
    }


@pytest.fixture
async def client(settings, registry) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with fake providers."""
    app = create_app(settings=settings, providers=registry)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unconfigured_client(settings, unusable_registry) -> AsyncGenerator[AsyncClient, None]:
    """Create test client where no provider is usable."""
    app = create_app(settings=settings, providers=unusable_registry)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

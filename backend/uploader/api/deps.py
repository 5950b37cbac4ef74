"""
FastAPI dependencies for provider access.

Providers are built once in create_app and attached to app.state; handlers
reach them only through these dependencies, never through module globals.
"""
from typing import Callable

from fastapi import Request

from uploader.config import Settings
from uploader.storage.base import ProviderId
from uploader.storage.facade import StorageFacade
from uploader.storage.factory import ProviderClient, ProviderRegistry
from uploader.storage.presign import UrlIssuer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> ProviderRegistry:
    """Provider registry attached at startup."""
    try:
        return request.app.state.providers
    except AttributeError as exc:
        raise RuntimeError("Providers not initialized on app.state (create_app not used).") from exc


def provider_client(provider: ProviderId) -> Callable[[Request], ProviderClient]:
    """Dependency factory returning the ProviderClient for ``provider``."""

    def dependency(request: Request) -> ProviderClient:
        return get_registry(request)[provider]

    dependency.__name__ = f"get_{provider.value}_client"
    return dependency


def url_issuer(provider: ProviderId) -> Callable[[Request], UrlIssuer]:
    get_client = provider_client(provider)

    def dependency(request: Request) -> UrlIssuer:
        return UrlIssuer(get_client(request), get_settings(request))

    dependency.__name__ = f"get_{provider.value}_issuer"
    return dependency


def storage_facade(provider: ProviderId) -> Callable[[Request], StorageFacade]:
    get_client = provider_client(provider)

    def dependency(request: Request) -> StorageFacade:
        return StorageFacade(get_client(request))

    dependency.__name__ = f"get_{provider.value}_facade"
    return dependency

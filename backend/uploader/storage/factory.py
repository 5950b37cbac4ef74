"""
Storage provider factory.

Builds one ProviderClient per provider at application start. A client is
either USABLE (holds a constructed adapter) or UNUSABLE (holds the reason),
never half-initialized. The resulting registry is attached to app.state and
handed to request handlers through a dependency.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from uploader.config import Settings
from uploader.storage.azure_adapter import AzureBlobStorageAdapter
from uploader.storage.base import ProviderConfig, ProviderId, StorageAdapter
from uploader.storage.credentials import not_initialized_message, resolve_config
from uploader.storage.errors import ConfigurationError
from uploader.storage.gcs_adapter import GCSStorageAdapter
from uploader.storage.s3_adapter import S3StorageAdapter
from uploader.utils.logging import log_provider_unavailable

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[ProviderConfig], StorageAdapter]

ADAPTER_FACTORIES: Dict[ProviderId, AdapterFactory] = {
    ProviderId.AWS: S3StorageAdapter,
    ProviderId.AZURE: AzureBlobStorageAdapter,
    ProviderId.GCP: GCSStorageAdapter,
}


class ProviderState(str, enum.Enum):
    USABLE = "usable"
    UNUSABLE = "unusable"


@dataclass(frozen=True)
class ProviderClient:
    """Process-wide handle for one provider, immutable after startup."""
    provider: ProviderId
    state: ProviderState
    adapter: Optional[StorageAdapter] = None
    reason: Optional[str] = None

    @classmethod
    def usable(cls, provider: ProviderId, adapter: StorageAdapter) -> "ProviderClient":
        return cls(provider=provider, state=ProviderState.USABLE, adapter=adapter)

    @classmethod
    def unusable(cls, provider: ProviderId, reason: str) -> "ProviderClient":
        return cls(provider=provider, state=ProviderState.UNUSABLE, reason=reason)

    @property
    def is_usable(self) -> bool:
        return self.state is ProviderState.USABLE and self.adapter is not None

    def require(self) -> StorageAdapter:
        """
        Return the adapter or raise ConfigurationError.

        Every operation against a provider goes through here first, so an
        unconfigured provider never reaches an SDK call.
        """
        if not self.is_usable:
            raise ConfigurationError(
                not_initialized_message(self.provider),
                details=self.reason,
                provider=self.provider.value,
            )
        return self.adapter


ProviderRegistry = Dict[ProviderId, ProviderClient]


def build_provider_client(
    provider: ProviderId,
    settings: Settings,
    adapter_factory: Optional[AdapterFactory] = None,
) -> ProviderClient:
    """
    Resolve configuration and construct the adapter for one provider.

    Failures are logged once and turned into an UNUSABLE client; they never
    propagate out of startup.
    """
    factory = adapter_factory or ADAPTER_FACTORIES[provider]

    try:
        config = resolve_config(provider, settings)
    except ConfigurationError as e:
        log_provider_unavailable(logger, provider=provider, reason=e.details)
        return ProviderClient.unusable(provider, e.details)

    try:
        adapter = factory(config)
    except Exception as e:
        # e.g. unreadable service-account file, malformed account key
        reason = f"Failed to initialize {provider.value} client: {e}"
        log_provider_unavailable(logger, provider=provider, reason=reason)
        return ProviderClient.unusable(provider, reason)

    logger.info(f"Using {provider.value} storage provider (bucket: {config.bucket})")
    return ProviderClient.usable(provider, adapter)


def build_provider_registry(
    settings: Settings,
    factories: Optional[Mapping[ProviderId, AdapterFactory]] = None,
) -> ProviderRegistry:
    """Build clients for all three providers."""
    factories = factories or {}
    return {
        provider: build_provider_client(provider, settings, factories.get(provider))
        for provider in ProviderId
    }

"""
Credential resolution for the storage providers.

Reads the connection parameters of one provider from Settings and either
returns a complete ProviderConfig or raises ConfigurationError. There is no
partial config: one missing input makes the whole provider unusable.
"""
from typing import Dict

from uploader.config import Settings
from uploader.storage.base import ProviderConfig, ProviderId
from uploader.storage.errors import ConfigurationError

# Environment variable -> Settings attribute, per provider
REQUIRED_ENV: Dict[ProviderId, Dict[str, str]] = {
    ProviderId.AWS: {
        "AWS_REGION": "aws_region",
        "AWS_ACCESS_KEY_ID": "aws_access_key_id",
        "AWS_SECRET_ACCESS_KEY": "aws_secret_access_key",
        "AWS_S3_BUCKET": "aws_s3_bucket",
    },
    ProviderId.AZURE: {
        "AZURE_STORAGE_ACCOUNT_NAME": "azure_storage_account_name",
        "AZURE_STORAGE_ACCOUNT_KEY": "azure_storage_account_key",
        "AZURE_STORAGE_CONTAINER_NAME": "azure_storage_container_name",
    },
    ProviderId.GCP: {
        "GOOGLE_CLOUD_PROJECT": "google_cloud_project",
        "GOOGLE_APPLICATION_CREDENTIALS": "google_application_credentials",
        "GCP_STORAGE_BUCKET": "gcp_storage_bucket",
    },
}

DISPLAY_NAMES: Dict[ProviderId, str] = {
    ProviderId.AWS: "AWS",
    ProviderId.AZURE: "Azure Blob Service",
    ProviderId.GCP: "GCP Storage",
}


def not_initialized_message(provider: ProviderId) -> str:
    return f"{DISPLAY_NAMES[provider]} client not initialized. Please check environment variables."


def resolve_config(provider: ProviderId, settings: Settings) -> ProviderConfig:
    """
    Build the ProviderConfig for ``provider``.

    Raises:
        ConfigurationError: if any required input is missing or blank
    """
    values = {
        env: (getattr(settings, attr) or "").strip()
        for env, attr in REQUIRED_ENV[provider].items()
    }
    missing = [env for env, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            not_initialized_message(provider),
            details=f"Missing {DISPLAY_NAMES[provider]} environment variables: {', '.join(missing)}",
            provider=provider.value,
        )

    if provider is ProviderId.AWS:
        return ProviderConfig(
            provider=provider,
            endpoint_or_region=values["AWS_REGION"],
            bucket=values["AWS_S3_BUCKET"],
            credentials={
                "access_key_id": values["AWS_ACCESS_KEY_ID"],
                "secret_access_key": values["AWS_SECRET_ACCESS_KEY"],
            },
        )
    if provider is ProviderId.AZURE:
        return ProviderConfig(
            provider=provider,
            endpoint_or_region=values["AZURE_STORAGE_ACCOUNT_NAME"],
            bucket=values["AZURE_STORAGE_CONTAINER_NAME"],
            credentials={"account_key": values["AZURE_STORAGE_ACCOUNT_KEY"]},
        )
    return ProviderConfig(
        provider=provider,
        endpoint_or_region=values["GOOGLE_CLOUD_PROJECT"],
        bucket=values["GCP_STORAGE_BUCKET"],
        credentials={"service_account_path": values["GOOGLE_APPLICATION_CREDENTIALS"]},
    )

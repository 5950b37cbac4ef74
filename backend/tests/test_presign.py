"""
Tests for presigned URL issuance (UrlIssuer).
"""
import logging
import re

import pytest

from uploader.storage.base import GRANT_TTL_SECONDS, Operation, ProviderId
from uploader.storage.errors import (
    ClientInputError,
    ConfigurationError,
    ObjectNotFoundError,
    ProviderError,
)
from uploader.storage.factory import ProviderClient
from uploader.storage.presign import UrlIssuer, make_upload_key

from tests.conftest import FakeAdapter


def make_issuer(adapter, settings, clock=None) -> UrlIssuer:
    client = ProviderClient.usable(adapter.provider_id, adapter)
    if clock is None:
        return UrlIssuer(client, settings)
    return UrlIssuer(client, settings, clock=clock)


class TestGrantLifetimes:
    """Every provider and operation gets the fixed lifetime."""

    @pytest.mark.parametrize("provider", list(ProviderId))
    @pytest.mark.parametrize("operation", list(Operation))
    def test_expires_in_matches_operation(self, provider, operation, settings):
        adapter = FakeAdapter(provider, objects={"existing.png": b"data"})
        issuer = make_issuer(adapter, settings)

        if operation is Operation.UPLOAD:
            grant = issuer.issue(operation, "cat.jpg", file_type="image/jpeg", file_size=1024)
        else:
            grant = issuer.issue(operation, "existing.png")

        assert grant.url
        assert grant.operation is operation
        assert grant.expires_in_seconds == GRANT_TTL_SECONDS[operation]
        assert grant.message == f"Presigned {operation.value} URL generated successfully"

    def test_constants(self):
        assert GRANT_TTL_SECONDS[Operation.UPLOAD] == 3600
        assert GRANT_TTL_SECONDS[Operation.DOWNLOAD] == 900
        assert GRANT_TTL_SECONDS[Operation.DELETE] == 300

    def test_expires_at_offsets_issued_at(self, settings):
        grant = make_issuer(FakeAdapter(), settings).issue_upload("a.png", "image/png")
        assert (grant.expires_at - grant.issued_at).total_seconds() == 3600


class TestInputValidation:
    """Rejections happen before any provider call."""

    @pytest.mark.parametrize("provider", list(ProviderId))
    @pytest.mark.parametrize("operation", list(Operation))
    @pytest.mark.parametrize("file_name", [None, "", "   "])
    def test_missing_file_name(self, provider, operation, file_name, settings):
        adapter = FakeAdapter(provider)
        issuer = make_issuer(adapter, settings)
        upload_fields = {"file_type": "image/png"} if operation is Operation.UPLOAD else {}

        with pytest.raises(ClientInputError):
            issuer.issue(operation, file_name, **upload_fields)

        assert adapter.calls == []

    def test_missing_file_type(self, settings):
        adapter = FakeAdapter()
        with pytest.raises(ClientInputError) as exc_info:
            make_issuer(adapter, settings).issue_upload("cat.jpg", None)

        assert exc_info.value.message == "Missing required fields: fileName and fileType are required"
        assert adapter.calls == []

    @pytest.mark.parametrize("file_type", ["application/pdf", "text/html", "video/mp4"])
    def test_disallowed_type_rejected(self, file_type, settings):
        adapter = FakeAdapter()
        with pytest.raises(ClientInputError) as exc_info:
            make_issuer(adapter, settings).issue_upload("doc.pdf", file_type, 100)

        assert exc_info.value.message == "Invalid file type. Only image files are allowed."
        assert exc_info.value.status_code == 400
        assert adapter.calls == []

    def test_oversized_rejected(self, settings):
        adapter = FakeAdapter()
        with pytest.raises(ClientInputError) as exc_info:
            make_issuer(adapter, settings).issue_upload("big.png", "image/png", 10 * 1024 * 1024 + 1)

        assert exc_info.value.message == "File size too large. Maximum size is 10MB."
        assert adapter.calls == []

    def test_size_at_limit_allowed(self, settings):
        grant = make_issuer(FakeAdapter(), settings).issue_upload("big.png", "image/png", 10 * 1024 * 1024)
        assert grant.expires_in_seconds == 3600

    def test_type_check_can_be_disabled(self):
        from tests.conftest import make_settings

        issuer = make_issuer(FakeAdapter(), make_settings(enforce_image_types=False))
        grant = issuer.issue_upload("doc.pdf", "application/pdf")
        assert grant.object_key.endswith("-doc.pdf")


class TestUploadKeys:
    """Object keys are <epoch-millis>-<fileName>."""

    def test_key_format(self, settings):
        grant = make_issuer(FakeAdapter(), settings).issue_upload("cat.jpg", "image/jpeg", 1048576)
        assert re.fullmatch(r"\d{13}-cat\.jpg", grant.object_key)

    def test_different_timestamps_give_different_keys(self, settings):
        ticks = iter([1700000000000, 1700000000001])
        issuer = make_issuer(FakeAdapter(), settings, clock=lambda: next(ticks))

        first = issuer.issue_upload("photo.png", "image/png")
        second = issuer.issue_upload("photo.png", "image/png")

        assert first.object_key == "1700000000000-photo.png"
        assert second.object_key == "1700000000001-photo.png"

    def test_same_millisecond_collides(self, settings):
        """Known weakness: uniqueness is timestamp-only."""
        issuer = make_issuer(FakeAdapter(), settings, clock=lambda: 1700000000000)

        first = issuer.issue_upload("photo.png", "image/png")
        second = issuer.issue_upload("photo.png", "image/png")

        assert first.object_key == second.object_key
        assert first.url != second.url

    def test_make_upload_key(self):
        assert make_upload_key("a b.png", 42) == "42-a b.png"


class TestIdempotence:
    """Grants are independent; issuing again never invalidates."""

    def test_two_download_grants_redeem_independently(self, settings):
        adapter = FakeAdapter(objects={"photo.png": b"pixels"})
        issuer = make_issuer(adapter, settings)

        first = issuer.issue_download("photo.png")
        second = issuer.issue_download("photo.png")

        assert first.url != second.url
        assert adapter.redeem(second.url) == b"pixels"
        assert adapter.redeem(first.url) == b"pixels"

    def test_two_upload_grants_redeem_independently(self, settings):
        adapter = FakeAdapter()
        issuer = make_issuer(adapter, settings, clock=lambda: 1700000000000)

        first = issuer.issue_upload("photo.png", "image/png")
        second = issuer.issue_upload("photo.png", "image/png")

        adapter.redeem(first.url, b"one")
        adapter.redeem(second.url, b"two")
        assert adapter.objects["1700000000000-photo.png"] == b"two"

    def test_unissued_url_rejected(self):
        adapter = FakeAdapter()
        with pytest.raises(PermissionError):
            adapter.redeem("https://aws.example.test/test-bucket/x?op=upload&sig=forged")


class TestExistingObjectGrants:
    """Download/delete grants need the object to exist."""

    @pytest.mark.parametrize("provider", list(ProviderId))
    def test_delete_missing_object_is_not_found(self, provider, settings):
        adapter = FakeAdapter(provider)
        with pytest.raises(ObjectNotFoundError) as exc_info:
            make_issuer(adapter, settings).issue_delete("missing.png")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "File not found"
        assert ("sign", "missing.png") not in adapter.calls

    def test_download_missing_object_is_not_found(self, settings):
        with pytest.raises(ObjectNotFoundError):
            make_issuer(FakeAdapter(), settings).issue_download("missing.png")

    def test_delete_grant_uses_key_verbatim(self, settings):
        adapter = FakeAdapter(objects={"1700000000000-cat.jpg": b""})
        grant = make_issuer(adapter, settings).issue_delete("1700000000000-cat.jpg")

        assert grant.object_key == "1700000000000-cat.jpg"
        adapter.redeem(grant.url)
        assert adapter.objects == {}


class TestProviderFailures:
    """SDK failures surface as ProviderError with the original message."""

    def test_sign_failure(self, settings):
        adapter = FakeAdapter()
        adapter.fail_with = RuntimeError("AccessDenied")

        with pytest.raises(ProviderError) as exc_info:
            make_issuer(adapter, settings).issue_upload("cat.jpg", "image/jpeg")

        assert exc_info.value.message == "Failed to generate presigned upload URL"
        assert exc_info.value.details == "AccessDenied"
        assert exc_info.value.status_code == 500

    def test_existence_check_failure(self, settings):
        adapter = FakeAdapter()
        adapter.fail_with = RuntimeError("network down")

        with pytest.raises(ProviderError) as exc_info:
            make_issuer(adapter, settings).issue_download("photo.png")

        assert exc_info.value.message == "Failed to generate presigned download URL"

    def test_failure_logged_with_traceback(self, settings, caplog):
        adapter = FakeAdapter()
        adapter.fail_with = RuntimeError("AccessDenied")

        with caplog.at_level(logging.ERROR, logger="uploader.storage.presign"):
            with pytest.raises(ProviderError):
                make_issuer(adapter, settings).issue_upload("cat.jpg", "image/jpeg")

        record = caplog.records[-1]
        assert record.operation == "upload"
        assert record.exc_info is not None


class TestUnusableProvider:
    """An unusable client fails before validation."""

    def test_configuration_error_before_validation(self, settings):
        client = ProviderClient.unusable(ProviderId.AZURE, "Missing Azure Blob Service environment variables: X")
        issuer = UrlIssuer(client, settings)

        with pytest.raises(ConfigurationError) as exc_info:
            issuer.issue_upload(None, None)

        assert exc_info.value.message == (
            "Azure Blob Service client not initialized. Please check environment variables."
        )
        assert exc_info.value.status_code == 503

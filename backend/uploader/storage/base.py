"""
Storage adapter interface shared by every cloud provider.

Each provider (S3, Azure Blob, GCS) is a standalone class implementing the
same small capability set: sign a one-operation URL, list, check existence,
delete, and the direct get/put used by the non-presigned routes. Nothing
here is inherited; adapters only have to match the protocol.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable


class ProviderId(str, enum.Enum):
    """The three supported object-storage providers."""
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"


class Operation(str, enum.Enum):
    """Operation an access grant authorizes."""
    UPLOAD = "upload"
    DOWNLOAD = "download"
    DELETE = "delete"


# Grant validity per operation, in seconds. Fixed, not configurable per call.
GRANT_TTL_SECONDS: Dict[Operation, int] = {
    Operation.UPLOAD: 3600,
    Operation.DOWNLOAD: 900,
    Operation.DELETE: 300,
}


@dataclass(frozen=True)
class ProviderConfig:
    """
    Connection parameters for one provider, resolved once at startup.

    A ProviderConfig only exists when every required input was present;
    see uploader.storage.credentials.
    """
    provider: ProviderId
    endpoint_or_region: str
    bucket: str
    credentials: Dict[str, str] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class ObjectSummary:
    """Uniform projection of provider object metadata used for listing."""
    name: str
    size: int
    last_modified: Optional[str]

    @classmethod
    def from_native(cls, name: str, size: Optional[int], last_modified) -> "ObjectSummary":
        if isinstance(last_modified, datetime):
            last_modified = last_modified.isoformat()
        return cls(name=name, size=int(size or 0), last_modified=last_modified)


@dataclass
class ObjectDownload:
    """Object bytes streamed back through the direct download route."""
    key: str
    content_type: str
    chunks: Iterable[bytes]


@runtime_checkable
class StorageAdapter(Protocol):
    """
    Capability set every provider adapter implements.

    Adapters raise the provider SDK's own exceptions, except that a missing
    object on get/delete is normalized to FileNotFoundError. Translating
    errors into storage error kinds is the caller's job (issuer and facade).
    """

    provider_id: ProviderId
    config: ProviderConfig

    def sign(
        self,
        operation: Operation,
        object_key: str,
        content_type: Optional[str] = None,
    ) -> Tuple[str, int]:
        """Return ``(url, ttl_seconds)`` authorizing one operation on one key."""
        ...

    def list_objects(self) -> List[ObjectSummary]: ...

    def exists(self, object_key: str) -> bool: ...

    def delete_object(self, object_key: str) -> None: ...

    def get_object(self, object_key: str) -> ObjectDownload: ...

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None: ...

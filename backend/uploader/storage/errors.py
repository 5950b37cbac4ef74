"""
Error kinds raised by the storage layer.

Every failure the storage layer reports is one of four kinds. Each kind maps
to a fixed HTTP status and JSON body at the API boundary (see
uploader.main), so handlers never build error responses by hand.
"""
import enum
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    """Closed set of storage error kinds."""
    CONFIGURATION = "configuration"
    CLIENT_INPUT = "client_input"
    PROVIDER = "provider"
    NOT_FOUND = "not_found"


class StorageError(Exception):
    """
    Base class for storage errors.

    Attributes:
        message: Human-readable message, returned as ``error``
        details: Optional diagnostic detail (usually the SDK message)
        provider: Provider id the error relates to, if any
        operation: Operation being performed, if any
    """

    kind: ErrorKind = ErrorKind.PROVIDER
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        provider: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.provider = provider
        self.operation = operation

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(StorageError):
    """Provider configuration is missing or its client could not be built."""
    kind = ErrorKind.CONFIGURATION
    status_code = 503


class ClientInputError(StorageError):
    """Request rejected before any provider interaction."""
    kind = ErrorKind.CLIENT_INPUT
    status_code = 400


class ProviderError(StorageError):
    """The provider SDK call itself failed."""
    kind = ErrorKind.PROVIDER
    status_code = 500


class ObjectNotFoundError(StorageError):
    """Target object does not exist in the bucket/container."""
    kind = ErrorKind.NOT_FOUND
    status_code = 404

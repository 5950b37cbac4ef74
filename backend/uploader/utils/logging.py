"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- provider
- operation
- object_key
- duration_ms

Usage:
    from uploader.utils.logging import configure_logging, log_grant_issued

    configure_logging('cloud-upload-api', 'INFO')
    log_grant_issued(logger, provider='aws', operation='upload',
                     object_key='1700000000000-cat.jpg', expires_in=3600)
"""
import logging
import sys
from typing import Any, Dict, Optional, Union
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. cloud-upload-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            rename_fields={'levelname': 'level'},
            json_ensure_ascii=False
        )

        # Console handler (container logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    provider: Optional[str] = None,
    operation: Optional[str] = None,
    object_key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Enum values are flattened to their plain string value so the JSON
    output stays stable.
    """
    extra: Dict[str, Any] = {
        "event": event,
        **kwargs
    }

    if provider:
        extra["provider"] = getattr(provider, "value", provider)
    if operation:
        extra["operation"] = getattr(operation, "value", operation)
    if object_key:
        extra["object_key"] = object_key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Access grant events

def log_grant_issued(
    logger: logging.Logger,
    provider: str,
    operation: str,
    object_key: str,
    expires_in: int,
    **kwargs
):
    """
    Log an issued access grant (audit line).

    Args:
        logger: Logger instance
        provider: Provider id (aws, azure, gcp)
        operation: upload, download or delete
        object_key: Key the grant is scoped to
        expires_in: Grant validity in seconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="grant_issued",
        provider=provider,
        operation=operation,
        object_key=object_key,
        expires_in=expires_in,
        **kwargs
    )
    op = extra["operation"]
    logger.info(f"Presigned {op} URL generated for file: {object_key}", extra=extra)


# Provider events

def log_provider_unavailable(
    logger: logging.Logger,
    provider: str,
    reason: str,
    **kwargs
):
    """
    Log a provider disabled at startup because its configuration is absent.

    Args:
        logger: Logger instance
        provider: Provider id (required)
        reason: Why the provider is unusable (required)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="provider_unavailable",
        provider=provider,
        reason=reason,
        **kwargs
    )
    logger.warning(f"Provider disabled: {extra['provider']} - {reason}", extra=extra)


def log_provider_failure(
    logger: logging.Logger,
    provider: str,
    operation: str,
    error: Union[str, Exception],
    object_key: Optional[str] = None,
    include_traceback: bool = False,
    **kwargs
):
    """
    Log a failed provider SDK call.

    Args:
        logger: Logger instance
        provider: Provider id (required)
        operation: Operation name (sign, list, delete, ...) (required)
        error: Error message or exception (required)
        object_key: Optional object key
        include_traceback: Whether to include stack trace (default: False)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="provider_failure",
        provider=provider,
        operation=operation,
        object_key=object_key,
        error=str(error),
        **kwargs
    )

    message = f"Provider failure: {extra['provider']}.{extra['operation']} - {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
            return
    logger.error(message, extra=extra)


# Upload events

def log_upload_completed(
    logger: logging.Logger,
    provider: str,
    file_name: str,
    file_size: Optional[int] = None,
    upload_time: Optional[str] = None,
    **kwargs
):
    """
    Log a browser-reported upload completion.

    This is the only record of completion; nothing is persisted.
    """
    extra = _build_log_extra(
        event="upload_completed",
        provider=provider,
        object_key=file_name,
        file_size=file_size,
        upload_time=upload_time,
        **kwargs
    )
    logger.info(
        f"Upload completed for file: {file_name}, size: {file_size or 'unknown'}, "
        f"time: {upload_time}",
        extra=extra
    )


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)

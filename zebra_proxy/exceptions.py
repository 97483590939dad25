"""
Zebra Proxy Errors
==================

Every failure a backend or the label store can report. Each error carries the
HTTP status the service answers with.
"""

from typing import Optional


class PrintProxyError(Exception):
    """Base error for the print proxy."""

    http_status = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(PrintProxyError):
    """Printer configuration is invalid or incomplete."""


class UnsupportedKindError(ConfigurationError):
    """Raised when the printer type is not tcp, usb or virtual."""

    def __init__(self, kind: str):
        super().__init__(
            f"Unsupported printer type: {kind}. Supported types: tcp, usb, virtual"
        )
        self.kind = kind


class MissingFieldError(ConfigurationError):
    """Raised when a field required by the printer type is absent."""

    def __init__(self, kind: str, fields):
        names = ' and '.join(fields)
        super().__init__(f"{kind.upper()} printer requires {names} configuration")
        self.kind = kind
        self.fields = tuple(fields)


class BackendNotSupportedError(PrintProxyError):
    """Operation is only available for another printer type."""

    http_status = 400


# =============================================================================
# Transport
# =============================================================================

class TransportError(PrintProxyError):
    """Connection-level failure talking to a printer or the render service."""

    http_status = 502


class DeviceNotFoundError(PrintProxyError):
    """No attached USB device matches the configured identifiers."""

    http_status = 503


class NoOutputEndpointError(PrintProxyError):
    """The USB device exposes no OUT endpoint on its first interface."""

    http_status = 502


class TransferError(PrintProxyError):
    """The USB bulk transfer failed."""

    http_status = 502


class RenderServiceError(PrintProxyError):
    """The rendering service answered with a non-success status."""

    http_status = 502

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Labelary API error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class RenderTimeoutError(PrintProxyError, TimeoutError):
    """The rendering service did not answer in time."""

    http_status = 504


# =============================================================================
# Label storage
# =============================================================================

class NotFoundError(PrintProxyError):
    """Requested label file does not exist."""

    http_status = 404


class PathTraversalError(PrintProxyError):
    """Requested filename resolves outside the save directory."""

    http_status = 403


class StorageError(PrintProxyError):
    """Reading or writing the save directory failed."""

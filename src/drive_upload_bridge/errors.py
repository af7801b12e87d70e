"""Error taxonomy for the Drive upload bridge."""
from __future__ import annotations

from typing import Optional


class DriveBridgeError(RuntimeError):
    """Base class for failures surfaced to callers of the bridge.

    Attributes:
        category: Machine readable error category used in responses.
        status_code: HTTP-equivalent status for the calling layer.
        retryable: Whether re-running the whole upload is considered safe.
    """

    category = "internal_error"
    status_code = 500

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.retryable = retryable


class ConfigurationError(DriveBridgeError):
    """Raised when a required setting is missing or cannot be parsed."""

    category = "configuration_error"


class CredentialFormatError(DriveBridgeError):
    """Raised when the configured private key cannot be imported.

    Only structural diagnostics are kept; the key text never is.
    """

    category = "credential_format_error"

    def __init__(
        self,
        message: str,
        *,
        input_length: int,
        body_length: int,
        has_marker: bool,
        has_escaped_newline: bool,
    ) -> None:
        super().__init__(message)
        self.input_length = input_length
        self.body_length = body_length
        self.has_marker = has_marker
        self.has_escaped_newline = has_escaped_newline

    def __str__(self) -> str:
        return (
            f"{self.message} (input_length={self.input_length}, "
            f"body_length={self.body_length}, has_marker={self.has_marker}, "
            f"has_escaped_newline={self.has_escaped_newline})"
        )


class EmptyPayloadError(DriveBridgeError):
    """Raised when a zero-byte file is submitted for upload."""

    category = "empty_payload"
    status_code = 400


class InvalidMimeTypeError(DriveBridgeError):
    """Raised when the declared content type is not a plain media type."""

    category = "invalid_mime_type"
    status_code = 400


class UpstreamError(DriveBridgeError):
    """Base class for failures reported by Google's APIs."""

    category = "upstream_error"
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class AuthenticationError(UpstreamError):
    """Raised when the token endpoint rejects the signed assertion."""

    category = "authentication_failed"


class UploadError(UpstreamError):
    """Raised when the multipart upload does not produce a Drive file."""

    category = "upload_failed"


class FolderResolutionError(UploadError):
    """Raised when the destination folder cannot be found or created."""

    category = "folder_resolution_failed"


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "CredentialFormatError",
    "DriveBridgeError",
    "EmptyPayloadError",
    "FolderResolutionError",
    "InvalidMimeTypeError",
    "UploadError",
    "UpstreamError",
]

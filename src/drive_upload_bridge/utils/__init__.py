"""Utility exports for the Drive upload bridge."""

from .encoding import b64url_decode, b64url_encode, b64url_json
from .multipart import (
    DEFAULT_BOUNDARY,
    MultipartBody,
    build_related_body,
    is_valid_mime_type,
)

__all__ = [
    "DEFAULT_BOUNDARY",
    "MultipartBody",
    "b64url_decode",
    "b64url_encode",
    "b64url_json",
    "build_related_body",
    "is_valid_mime_type",
]

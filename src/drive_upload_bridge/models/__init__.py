"""Data models for the Drive upload bridge."""

from .credential import PemKey, ServiceAccountCredential
from .drive import (
    AccessToken,
    DriveFolder,
    FolderSearchResponse,
    PermissionWarning,
    TokenResponse,
    UploadRequest,
    UploadResponse,
    UploadResult,
    public_url_for,
)

__all__ = [
    "AccessToken",
    "DriveFolder",
    "FolderSearchResponse",
    "PemKey",
    "PermissionWarning",
    "ServiceAccountCredential",
    "TokenResponse",
    "UploadRequest",
    "UploadResponse",
    "UploadResult",
    "public_url_for",
]

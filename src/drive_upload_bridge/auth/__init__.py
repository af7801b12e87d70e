"""Service-account authentication helpers."""

from .pem import load_credential, normalize_key
from .token import DRIVE_FILE_SCOPE, TokenMinter, build_assertion

__all__ = [
    "DRIVE_FILE_SCOPE",
    "TokenMinter",
    "build_assertion",
    "load_credential",
    "normalize_key",
]

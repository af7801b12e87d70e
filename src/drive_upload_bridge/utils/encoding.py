"""Base64url helpers used for JWT segments."""
from __future__ import annotations

import base64
import json
from typing import Any, Mapping


def b64url_encode(data: bytes) -> str:
    """Encode ``data`` with the URL-safe alphabet and no ``=`` padding."""

    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Decode an unpadded base64url string.

    Args:
        value: Text produced by :func:`b64url_encode` or any JWT segment.

    Returns:
        The decoded bytes.
    """

    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def b64url_json(payload: Mapping[str, Any]) -> str:
    """Serialise ``payload`` compactly and base64url encode it."""

    return b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))

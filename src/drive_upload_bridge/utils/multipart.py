"""Assembly of ``multipart/related`` bodies for Drive uploads."""
from __future__ import annotations

import json
import re
import secrets
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_BOUNDARY = "-------314159265358979323846"

_TOKEN = r"[A-Za-z0-9!#$%&'*+.^_`|~-]+"
_MIME_TYPE_RE = re.compile(
    rf"{_TOKEN}/{_TOKEN}(?:[ \t]*;[ \t]*{_TOKEN}=(?:{_TOKEN}|\"[^\"\r\n]*\"))*"
)


@dataclass(frozen=True)
class MultipartBody:
    """A binary request body together with its ``Content-Type`` header."""

    body: bytes
    boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/related; boundary={self.boundary}"


def is_valid_mime_type(mime_type: str) -> bool:
    """Return whether ``mime_type`` is a ``type/subtype`` media type.

    Parameters such as ``; charset=utf-8`` are allowed. Control characters
    are not, so the value is safe to place in a part header.
    """

    return bool(mime_type) and _MIME_TYPE_RE.fullmatch(mime_type) is not None


def build_related_body(
    metadata: Mapping[str, Any],
    content: bytes,
    mime_type: str,
    *,
    boundary: str = DEFAULT_BOUNDARY,
) -> MultipartBody:
    """Build a two-part body: JSON metadata followed by the raw file bytes.

    Args:
        metadata: Drive file resource fields, e.g. ``name`` and ``parents``.
        content: File payload, copied into the body verbatim.
        mime_type: Content type declared for the file part.
        boundary: Boundary token. Replaced by a random one when ``content``
            contains the delimiter, including at its very start where it
            follows the part headers' line break.

    Returns:
        The assembled :class:`MultipartBody`.

    Raises:
        ValueError: If ``mime_type`` is not a valid media type.
    """

    if not is_valid_mime_type(mime_type):
        raise ValueError(f"Invalid MIME type: {mime_type!r}")

    content = bytes(content)
    # The file part is always preceded by a CRLF.
    while _delimiter(boundary) in b"\r\n" + content:
        boundary = f"{DEFAULT_BOUNDARY}{secrets.token_hex(16)}"

    delimiter = f"\r\n--{boundary}\r\n"
    close_delimiter = f"\r\n--{boundary}--"
    head = (
        delimiter
        + "Content-Type: application/json\r\n\r\n"
        + json.dumps(dict(metadata))
        + delimiter
        + f"Content-Type: {mime_type}\r\n\r\n"
    )
    body = head.encode("utf-8") + content + close_delimiter.encode("utf-8")
    return MultipartBody(body=body, boundary=boundary)


def _delimiter(boundary: str) -> bytes:
    return f"\r\n--{boundary}".encode("utf-8")

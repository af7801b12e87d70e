"""Typed views of Google OAuth and Drive API payloads."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import AuthenticationError, FolderResolutionError, UploadError

PUBLIC_URL_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view"
DEFAULT_FILE_NAME = "uploaded-file"
DEFAULT_MIME_TYPE = "application/octet-stream"


def public_url_for(file_id: str) -> str:
    """Return the shareable view URL for a Drive file identifier."""

    return PUBLIC_URL_TEMPLATE.format(file_id=file_id)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token returned by the OAuth token endpoint."""

    token: str = field(repr=False)
    expires_in: int = 3600
    token_type: str = "Bearer"

    @property
    def authorization_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class TokenResponse:
    """Body of a successful ``POST /token`` call."""

    access_token: str = field(repr=False)
    expires_in: int
    token_type: str

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenResponse":
        """Validate the token endpoint payload.

        Raises:
            AuthenticationError: If ``access_token`` is missing or not a string.
        """

        if not isinstance(payload, Mapping):
            raise AuthenticationError("Token endpoint returned a non-object payload.")
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise AuthenticationError("Token endpoint response is missing 'access_token'.")
        try:
            expires_in = int(payload.get("expires_in", 3600))
        except (TypeError, ValueError) as exc:
            raise AuthenticationError("Token endpoint returned a non-numeric 'expires_in'.") from exc
        return cls(
            access_token=access_token,
            expires_in=expires_in,
            token_type=str(payload.get("token_type", "Bearer")),
        )

    def to_access_token(self) -> AccessToken:
        return AccessToken(
            token=self.access_token,
            expires_in=self.expires_in,
            token_type=self.token_type,
        )


@dataclass(frozen=True)
class DriveFolder:
    """A Drive folder reference."""

    id: str
    name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "DriveFolder":
        if not isinstance(payload, Mapping) or not payload.get("id"):
            raise FolderResolutionError("Drive folder payload is missing 'id'.")
        name = payload.get("name")
        return cls(id=str(payload["id"]), name=str(name) if name is not None else None)


@dataclass(frozen=True)
class FolderSearchResponse:
    """Body of a ``GET /files`` folder search."""

    files: Tuple[DriveFolder, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "FolderSearchResponse":
        if not isinstance(payload, Mapping):
            raise FolderResolutionError("Folder search returned a non-object payload.")
        files = payload.get("files") or []
        if not isinstance(files, list):
            raise FolderResolutionError("Folder search payload 'files' is not a list.")
        return cls(files=tuple(DriveFolder.from_payload(item) for item in files))

    def first(self) -> Optional[DriveFolder]:
        return self.files[0] if self.files else None


@dataclass(frozen=True)
class UploadResponse:
    """Projection ``id,name,webViewLink`` of a created Drive file."""

    id: str
    name: str
    web_view_link: str

    @classmethod
    def from_payload(cls, payload: Any, *, fallback_name: str) -> "UploadResponse":
        """Validate an upload response.

        Args:
            payload: Decoded JSON body.
            fallback_name: Name to report when Drive omits ``name``.

        Raises:
            UploadError: If the created file id is missing.
        """

        if not isinstance(payload, Mapping) or not payload.get("id"):
            raise UploadError("Drive upload response is missing 'id'.")
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or fallback_name),
            web_view_link=str(payload.get("webViewLink") or ""),
        )


@dataclass(frozen=True)
class UploadRequest:
    """A single file handed over by the calling layer.

    Attributes:
        content: Raw file bytes.
        file_name: Name for the created Drive file.
        mime_type: Declared content type of ``content``.
        folder_id: Optional destination overriding the configured folder.
    """

    content: bytes = field(repr=False)
    file_name: str = DEFAULT_FILE_NAME
    mime_type: str = DEFAULT_MIME_TYPE
    folder_id: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PermissionWarning:
    """Non-fatal failure of the public-read permission grant."""

    file_id: str
    message: str
    status_code: Optional[int] = None

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "type": "permission_failed",
            "fileId": self.file_id,
            "message": self.message,
            "status": self.status_code,
        }


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload."""

    file_id: str
    file_name: str
    web_view_link: str
    public_url: str
    warnings: Tuple[PermissionWarning, ...] = ()

    @classmethod
    def from_upload_response(
        cls,
        response: UploadResponse,
        *,
        warnings: Tuple[PermissionWarning, ...] = (),
    ) -> "UploadResult":
        return cls(
            file_id=response.id,
            file_name=response.name,
            web_view_link=response.web_view_link,
            public_url=public_url_for(response.id),
            warnings=warnings,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        """Render the success half of the caller-facing response contract."""

        payload: Dict[str, Any] = {
            "success": True,
            "fileId": self.file_id,
            "fileName": self.file_name,
            "url": self.public_url,
            "webViewLink": self.web_view_link,
        }
        if self.warnings:
            payload["warnings"] = [warning.to_json_dict() for warning in self.warnings]
        return payload

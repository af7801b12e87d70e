"""Google Drive REST client for folder resolution and multipart uploads."""
from __future__ import annotations

import logging
from typing import Any, Optional, Type

import requests
from requests import Response, Session

from ..errors import (
    EmptyPayloadError,
    FolderResolutionError,
    InvalidMimeTypeError,
    UploadError,
)
from ..models import (
    AccessToken,
    DriveFolder,
    FolderSearchResponse,
    PermissionWarning,
    UploadRequest,
    UploadResponse,
    UploadResult,
)
from ..utils.multipart import build_related_body, is_valid_mime_type

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class GoogleDriveClient:
    """Thin wrapper around the Drive v3 endpoints used for uploads."""

    api_url = "https://www.googleapis.com/drive/v3"
    upload_url = "https://www.googleapis.com/upload/drive/v3/files"
    upload_fields = "id,name,webViewLink"

    def __init__(
        self,
        access_token: AccessToken,
        *,
        session: Optional[Session] = None,
        timeout: float = 30,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialise the Drive client.

        Args:
            access_token: Bearer token minted for the Drive scope.
            session: Optional :class:`requests.Session` for connection pooling.
            timeout: Request timeout in seconds, applied to every call.
            logger: Optional logger used for progress reporting.
        """

        self._token = access_token
        self._session = session or requests.Session()
        self._timeout = timeout
        self._log = logger or logging.getLogger(__name__)

    @property
    def _headers(self) -> dict[str, str]:
        return dict(self._token.authorization_header)

    def find_folder(self, folder_name: str) -> Optional[DriveFolder]:
        """Return the first non-trashed folder named exactly ``folder_name``."""

        query = (
            f"name = '{_escape_query_value(folder_name)}' "
            f"and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false"
        )
        payload = self._request(
            "get",
            f"{self.api_url}/files",
            error_cls=FolderResolutionError,
            action="Folder search",
            params={"q": query, "fields": "files(id,name)", "spaces": "drive"},
        )
        return FolderSearchResponse.from_payload(payload).first()

    def create_folder(self, folder_name: str) -> DriveFolder:
        """Create a folder named ``folder_name`` and return it."""

        payload = self._request(
            "post",
            f"{self.api_url}/files",
            error_cls=FolderResolutionError,
            action="Folder creation",
            params={"fields": "id,name"},
            json={"name": folder_name, "mimeType": FOLDER_MIME_TYPE},
        )
        folder = DriveFolder.from_payload(payload)
        self._log.info("Created Drive folder %s (%s)", folder_name, folder.id)
        return folder

    def resolve_folder(self, folder_name: str) -> str:
        """Return the id of ``folder_name``, creating the folder when absent.

        Two concurrent first-time callers may both create a folder; the
        lookup and the creation are separate requests.
        """

        existing = self.find_folder(folder_name)
        if existing is not None:
            return existing.id
        return self.create_folder(folder_name).id

    def upload_file(self, request: UploadRequest, folder_id: str) -> UploadResponse:
        """Send ``request`` as a ``multipart/related`` upload into ``folder_id``.

        Raises:
            EmptyPayloadError: If ``request.content`` is empty. No call is made.
            InvalidMimeTypeError: If ``request.mime_type`` is not a media type.
                No call is made.
            UploadError: If Drive rejects the upload or omits the file id.
        """

        if not request.content:
            raise EmptyPayloadError("Uploaded file is empty.")
        if not is_valid_mime_type(request.mime_type):
            raise InvalidMimeTypeError(f"Invalid MIME type: {request.mime_type!r}")

        multipart = build_related_body(
            {"name": request.file_name, "parents": [folder_id]},
            request.content,
            request.mime_type,
        )
        payload = self._request(
            "post",
            self.upload_url,
            error_cls=UploadError,
            action="File upload",
            params={"uploadType": "multipart", "fields": self.upload_fields},
            data=multipart.body,
            extra_headers={"Content-Type": multipart.content_type},
        )
        return UploadResponse.from_payload(payload, fallback_name=request.file_name)

    def grant_public_read(self, file_id: str) -> Optional[PermissionWarning]:
        """Give ``anyone`` reader access to ``file_id``.

        Returns:
            ``None`` on success, otherwise a :class:`PermissionWarning`. Any
            failure, including one raised by the session itself, is logged but
            never raised.
        """

        try:
            response = self._session.post(
                f"{self.api_url}/files/{file_id}/permissions",
                headers=self._headers,
                json={"role": "reader", "type": "anyone"},
                timeout=self._timeout,
            )
        except Exception as exc:
            warning = PermissionWarning(
                file_id=file_id,
                message=f"Permission request failed: {exc.__class__.__name__}",
            )
        else:
            if response.ok:
                return None
            warning = PermissionWarning(
                file_id=file_id,
                message=f"Permission grant failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        self._log.warning("Could not make %s public: %s", file_id, warning.message)
        return warning

    def upload(
        self,
        request: UploadRequest,
        folder_id: str,
        *,
        make_public: bool = True,
    ) -> UploadResult:
        """Upload ``request`` and optionally share it publicly.

        Returns:
            An :class:`UploadResult` with the deterministic public URL and any
            permission warning.
        """

        response = self.upload_file(request, folder_id)
        warnings = []
        if make_public:
            warning = self.grant_public_read(response.id)
            if warning is not None:
                warnings.append(warning)
        return UploadResult.from_upload_response(response, warnings=tuple(warnings))

    def _request(
        self,
        method: str,
        url: str,
        *,
        error_cls: Type[UploadError],
        action: str,
        extra_headers: Optional[dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        headers = self._headers
        if extra_headers:
            headers.update(extra_headers)
        try:
            response: Response = getattr(self._session, method)(
                url,
                headers=headers,
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise error_cls(
                f"{action} request failed: {exc.__class__.__name__}",
                retryable=True,
            ) from exc

        if not response.ok:
            raise error_cls(
                f"{action} failed: {response.status_code} {response.text}",
                upstream_status=response.status_code,
                upstream_body=response.text,
                retryable=response.status_code >= 500,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(
                f"{action} returned invalid JSON.",
                upstream_status=response.status_code,
                upstream_body=response.text,
            ) from exc


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")

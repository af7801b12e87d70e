"""Service orchestrating key loading, token minting and the Drive upload."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from requests import Session

from ..auth.pem import load_credential
from ..auth.token import TokenMinter
from ..clients.drive_client import GoogleDriveClient
from ..clients.session import ThreadLocalSessionProvider
from ..config import Settings
from ..errors import (
    ConfigurationError,
    DriveBridgeError,
    EmptyPayloadError,
    InvalidMimeTypeError,
    UpstreamError,
)
from ..models import UploadRequest, UploadResult
from ..utils.multipart import is_valid_mime_type


@dataclass(frozen=True)
class UploadOutcome:
    """Response handed back to the calling HTTP layer."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadOutcome":
        return cls(status_code=200, body=result.to_json_dict())

    @classmethod
    def from_error(cls, error: DriveBridgeError) -> "UploadOutcome":
        body: Dict[str, Any] = {
            "success": False,
            "error": error.category,
            "message": str(error),
            "retryable": error.retryable,
        }
        if isinstance(error, UpstreamError):
            if error.upstream_status is not None:
                body["upstreamStatus"] = error.upstream_status
            if error.upstream_body is not None:
                body["upstreamBody"] = error.upstream_body
        return cls(status_code=error.status_code, body=body)


class DriveUploadService:
    """Uploads single files to Google Drive with a service account."""

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[Session] = None,
        session_factory: Optional[Callable[[], Session]] = None,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialise the service.

        Args:
            settings: Configuration loaded by :func:`~drive_upload_bridge.config.load_settings`.
            session: Optional template :class:`requests.Session`, cloned per thread.
            session_factory: Optional callable returning a session; invoked
                once per thread and preferred over ``session``.
            clock: Optional wall-clock used for assertion timestamps.
            logger: Optional logger used for progress reporting.
        """

        self._settings = settings
        self._sessions = ThreadLocalSessionProvider(session=session, factory=session_factory)
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)

    def upload(self, request: UploadRequest) -> UploadResult:
        """Run the full upload for ``request``.

        Configuration, key format, MIME type and empty payload problems are
        raised before any network call. Failed permission grants are reported on
        :attr:`UploadResult.warnings` instead of raising.

        Raises:
            DriveBridgeError: Any error from :mod:`drive_upload_bridge.errors`.
        """

        if not request.content:
            raise EmptyPayloadError("Uploaded file is empty.")
        if not is_valid_mime_type(request.mime_type):
            raise InvalidMimeTypeError(f"Invalid MIME type: {request.mime_type!r}")

        settings = self._settings
        folder_id = request.folder_id or settings.folder_id
        if not folder_id and not settings.folder_name:
            raise ConfigurationError("No destination folder id or name is configured.")
        credential = load_credential(settings.client_email, settings.private_key)

        session = self._sessions.get()
        minter = TokenMinter(session=session, timeout=settings.timeout, clock=self._clock)
        access_token = minter.mint_access_token(credential, settings.scope)

        drive = GoogleDriveClient(
            access_token,
            session=session,
            timeout=settings.timeout,
            logger=self._log,
        )
        if not folder_id:
            folder_id = drive.resolve_folder(settings.folder_name)

        result = drive.upload(request, folder_id, make_public=settings.make_public)
        self._log.info(
            "Uploaded %s (%s bytes) to Drive as %s",
            result.file_name,
            request.size,
            result.file_id,
        )
        return result

    def handle(self, request: UploadRequest) -> UploadOutcome:
        """Run :meth:`upload` and translate the outcome into a response.

        Errors from the taxonomy are converted to a failure body; anything
        else propagates.
        """

        try:
            result = self.upload(request)
        except DriveBridgeError as exc:
            if exc.status_code >= 500:
                self._log.error("Upload of %s failed: %s", request.file_name, exc)
            else:
                self._log.info("Rejected upload of %s: %s", request.file_name, exc)
            return UploadOutcome.from_error(exc)
        return UploadOutcome.from_result(result)

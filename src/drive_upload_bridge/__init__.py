"""Upload form attachments to Google Drive with a service account."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import UploadRequest, UploadResult
from .services.upload import DriveUploadService, UploadOutcome

__all__ = [
    "DriveUploadService",
    "Settings",
    "UploadOutcome",
    "UploadRequest",
    "UploadResult",
    "__version__",
    "load_settings",
]

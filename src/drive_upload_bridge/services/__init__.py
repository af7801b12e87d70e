"""Service layer exports for the Drive upload bridge."""

from .upload import DriveUploadService, UploadOutcome

__all__ = ["DriveUploadService", "UploadOutcome"]

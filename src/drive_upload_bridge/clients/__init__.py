"""Client exports for the Drive upload bridge."""

from .drive_client import GoogleDriveClient
from .session import ThreadLocalSessionProvider

__all__ = [
    "GoogleDriveClient",
    "ThreadLocalSessionProvider",
]

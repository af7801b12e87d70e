"""Command line entry point for uploading a file to Google Drive."""
from __future__ import annotations

import argparse
import json
import logging
import mimetypes
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .errors import ConfigurationError
from .models import UploadRequest
from .models.drive import DEFAULT_MIME_TYPE
from .services.upload import DriveUploadService, UploadOutcome


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        description="Upload a file to Google Drive using a service account.",
    )
    parser.add_argument("path", type=Path, help="File to upload.")
    parser.add_argument(
        "--file-name",
        default=None,
        help="Name for the Drive file (default: the local file name).",
    )
    parser.add_argument(
        "--mime-type",
        default=None,
        help="Content type of the file (default: guessed from the file name).",
    )
    destination = parser.add_mutually_exclusive_group()
    destination.add_argument(
        "--folder-id",
        default=None,
        help="Destination folder id. Overrides GOOGLE_DRIVE_FOLDER_ID.",
    )
    destination.add_argument(
        "--folder-name",
        default=None,
        help="Destination folder name, created when missing. Overrides GOOGLE_DRIVE_FOLDER_NAME.",
    )
    parser.add_argument(
        "--private",
        action="store_true",
        help="Skip the public-read permission grant.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds. Overrides DRIVE_UPLOAD_TIMEOUT.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> int:
    """Upload the file named on the command line and print the JSON response.

    Returns:
        ``0`` when the upload succeeded, ``1`` otherwise.
    """

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.path.is_file():
        outcome = UploadOutcome(
            status_code=400,
            body={"success": False, "error": "missing_file", "message": f"No such file: {args.path}"},
        )
        return _emit(outcome)

    overrides = {
        "timeout": args.timeout,
        "folder_id": args.folder_id,
        "folder_name": args.folder_name,
    }
    if args.private:
        overrides["make_public"] = False

    try:
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        return _emit(UploadOutcome.from_error(exc))
    if args.folder_name:
        # a configured id would otherwise take precedence over the name
        settings = replace(settings, folder_id=None)

    try:
        content = args.path.read_bytes()
    except OSError as exc:
        outcome = UploadOutcome(
            status_code=400,
            body={
                "success": False,
                "error": "unreadable_file",
                "message": f"Cannot read {args.path}: {exc.strerror or exc.__class__.__name__}",
            },
        )
        return _emit(outcome)

    request = UploadRequest(
        content=content,
        file_name=args.file_name or args.path.name,
        mime_type=args.mime_type or _guess_mime_type(args.path),
    )
    service = DriveUploadService(settings)
    return _emit(service.handle(request))


def _guess_mime_type(path: Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or DEFAULT_MIME_TYPE


def _emit(outcome: UploadOutcome) -> int:
    print(json.dumps(outcome.body, indent=2))
    return 0 if outcome.success else 1


if __name__ == "__main__":
    raise SystemExit(run())

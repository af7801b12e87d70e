"""CLI integration tests."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from drive_upload_bridge import cli
from drive_upload_bridge.services.upload import UploadOutcome


class _StubService:
    """Captures the settings and request provided by the CLI."""

    def __init__(self, settings):
        self.settings = settings
        self.requests = []

    def handle(self, request):
        self.requests.append(request)
        return UploadOutcome(
            status_code=200,
            body={"success": True, "fileId": "abc123", "fileName": request.file_name},
        )


@pytest.fixture()
def drive_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "svc@example.iam.gserviceaccount.com")
    monkeypatch.setenv("GOOGLE_PRIVATE_KEY", "key-text")
    monkeypatch.setenv("GOOGLE_DRIVE_FOLDER_ID", "env-folder")
    monkeypatch.delenv("GOOGLE_DRIVE_FOLDER_NAME", raising=False)
    monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_JSON", raising=False)
    monkeypatch.delenv("DRIVE_UPLOAD_TIMEOUT", raising=False)
    monkeypatch.delenv("DRIVE_UPLOAD_PUBLIC", raising=False)


@pytest.fixture()
def captured(monkeypatch: pytest.MonkeyPatch) -> dict:
    captured: dict = {}

    def fake_service(settings):
        service = _StubService(settings)
        captured["service"] = service
        return service

    monkeypatch.setattr(cli, "DriveUploadService", fake_service)
    return captured


def test_upload_builds_request_from_file(
    drive_env, captured, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    image = tmp_path / "receipt.png"
    image.write_bytes(b"\x89PNG-bytes")

    exit_code = cli.run([str(image), "--private", "--timeout", "4"])

    assert exit_code == 0
    service = captured["service"]
    (request,) = service.requests
    assert request.content == b"\x89PNG-bytes"
    assert request.file_name == "receipt.png"
    assert request.mime_type == "image/png"
    assert service.settings.folder_id == "env-folder"
    assert service.settings.make_public is False
    assert service.settings.timeout == 4
    assert json.loads(capsys.readouterr().out)["fileId"] == "abc123"


def test_folder_name_flag_replaces_configured_id(drive_env, captured, tmp_path: Path) -> None:
    document = tmp_path / "notes.unknownext"
    document.write_bytes(b"data")

    cli.run([str(document), "--folder-name", "Uploads", "--file-name", "renamed.bin"])

    service = captured["service"]
    assert service.settings.folder_id is None
    assert service.settings.folder_name == "Uploads"
    assert service.requests[0].file_name == "renamed.bin"
    assert service.requests[0].mime_type == "application/octet-stream"


def test_missing_file_is_reported(drive_env, captured, tmp_path: Path, capsys) -> None:
    exit_code = cli.run([str(tmp_path / "absent.png")])

    assert exit_code == 1
    assert "service" not in captured
    assert json.loads(capsys.readouterr().out)["error"] == "missing_file"


def test_missing_configuration_is_reported(
    drive_env, captured, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys
) -> None:
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
    image = tmp_path / "a.png"
    image.write_bytes(b"x")

    exit_code = cli.run([str(image)])

    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"] == "configuration_error"
    assert "service" not in captured


def test_unreadable_file_is_reported(
    drive_env, captured, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys
) -> None:
    image = tmp_path / "locked.png"
    image.write_bytes(b"x")

    def deny(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", deny)

    exit_code = cli.run([str(image)])

    assert exit_code == 1
    assert "service" not in captured
    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is False
    assert payload["error"] == "unreadable_file"
    assert "Permission denied" in payload["message"]

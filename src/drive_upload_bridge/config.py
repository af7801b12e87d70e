"""Configuration helpers for the Drive upload bridge."""
from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional

from dotenv import load_dotenv

from .auth.token import DRIVE_FILE_SCOPE
from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Runtime configuration resolved once at process start."""

    client_email: str
    private_key: str = field(repr=False)
    folder_id: Optional[str] = None
    folder_name: Optional[str] = None
    scope: str = DRIVE_FILE_SCOPE
    timeout: float = 30.0
    make_public: bool = True


_DEFAULTS = Settings(client_email="", private_key="")


def load_settings(env: Optional[Mapping[str, str]] = None, **overrides: Any) -> Settings:
    """Load :class:`Settings` from the environment and optional overrides.

    Args:
        env: Mapping to read instead of :data:`os.environ`. When omitted, a
            ``.env`` file is loaded first.
        **overrides: Field values that win over the environment. ``None``
            values are ignored.

    Raises:
        ConfigurationError: If a required value is missing or malformed. The
            message names the variable, never its value.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    service_account = _parse_service_account_json(env.get("GOOGLE_SERVICE_ACCOUNT_JSON"))
    values: MutableMapping[str, Any] = {
        "client_email": env.get("GOOGLE_SERVICE_ACCOUNT_EMAIL")
        or service_account.get("client_email", ""),
        "private_key": env.get("GOOGLE_PRIVATE_KEY") or service_account.get("private_key", ""),
        "folder_id": env.get("GOOGLE_DRIVE_FOLDER_ID") or None,
        "folder_name": env.get("GOOGLE_DRIVE_FOLDER_NAME") or None,
        "scope": env.get("GOOGLE_DRIVE_SCOPE") or _DEFAULTS.scope,
        "timeout": _parse_float("DRIVE_UPLOAD_TIMEOUT", env.get("DRIVE_UPLOAD_TIMEOUT"), _DEFAULTS.timeout),
        "make_public": _parse_bool("DRIVE_UPLOAD_PUBLIC", env.get("DRIVE_UPLOAD_PUBLIC"), _DEFAULTS.make_public),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values["client_email"]:
        raise ConfigurationError(
            "Missing GOOGLE_SERVICE_ACCOUNT_EMAIL. Export it or provide GOOGLE_SERVICE_ACCOUNT_JSON.",
        )
    if not values["private_key"]:
        raise ConfigurationError(
            "Missing GOOGLE_PRIVATE_KEY. Export it or provide GOOGLE_SERVICE_ACCOUNT_JSON.",
        )
    if not values["folder_id"] and not values["folder_name"]:
        raise ConfigurationError(
            "Missing destination folder. Set GOOGLE_DRIVE_FOLDER_ID or GOOGLE_DRIVE_FOLDER_NAME.",
        )
    timeout = float(values["timeout"])
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError("DRIVE_UPLOAD_TIMEOUT must be a finite number greater than zero.")

    return Settings(
        client_email=str(values["client_email"]),
        private_key=str(values["private_key"]),
        folder_id=values["folder_id"],
        folder_name=values["folder_name"],
        scope=str(values["scope"]),
        timeout=timeout,
        make_public=bool(values["make_public"]),
    )


def _parse_service_account_json(raw_value: Optional[str]) -> Mapping[str, Any]:
    if not raw_value:
        return {}
    try:
        data = json.loads(raw_value)
    except ValueError as exc:
        raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_JSON must be a JSON object.")
    return data


def _parse_float(key: str, raw_value: Optional[str], default: float) -> float:
    if raw_value is None or raw_value == "":
        return default
    try:
        return float(raw_value)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got: {raw_value!r}") from exc


def _parse_bool(key: str, raw_value: Optional[str], default: bool) -> bool:
    if raw_value is None or raw_value == "":
        return default
    lowered = raw_value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{key} must be true or false, got: {raw_value!r}")

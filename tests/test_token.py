"""Tests for the JWT-bearer token exchange."""
from __future__ import annotations

import json

import pytest
import requests
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from drive_upload_bridge.auth.pem import load_credential
from drive_upload_bridge.auth.token import (
    DRIVE_FILE_SCOPE,
    JWT_BEARER_GRANT,
    TOKEN_URI,
    TokenMinter,
    build_assertion,
)
from drive_upload_bridge.errors import AuthenticationError
from drive_upload_bridge.utils.encoding import b64url_decode
from fakes import SERVICE_ACCOUNT_EMAIL, DummyResponse, RecordingSession, token_response

NOW = 1_700_000_000


@pytest.fixture()
def credential(private_key_pem: str):
    return load_credential(SERVICE_ACCOUNT_EMAIL, private_key_pem)


def test_assertion_has_three_segments_with_expected_claims(credential) -> None:
    assertion = build_assertion(credential, DRIVE_FILE_SCOPE, issued_at=NOW)

    segments = assertion.split(".")
    assert len(segments) == 3
    header = json.loads(b64url_decode(segments[0]))
    claims = json.loads(b64url_decode(segments[1]))
    assert header == {"alg": "RS256", "typ": "JWT"}
    assert claims == {
        "iss": SERVICE_ACCOUNT_EMAIL,
        "scope": DRIVE_FILE_SCOPE,
        "aud": TOKEN_URI,
        "iat": NOW,
        "exp": NOW + 3600,
    }
    assert claims["exp"] - claims["iat"] == 3600


def test_assertion_signature_verifies_with_public_key(credential, rsa_key) -> None:
    assertion = build_assertion(credential, DRIVE_FILE_SCOPE, issued_at=NOW)
    signing_input, _, signature = assertion.rpartition(".")

    rsa_key.public_key().verify(
        b64url_decode(signature),
        signing_input.encode("ascii"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )


def test_mint_posts_form_encoded_grant(credential) -> None:
    session = RecordingSession([token_response("ya29.fresh")])
    minter = TokenMinter(session=session, timeout=7, clock=lambda: NOW + 0.9)

    token = minter.mint_access_token(credential, DRIVE_FILE_SCOPE)

    assert token.token == "ya29.fresh"
    assert token.expires_in == 3599
    assert "ya29.fresh" not in repr(token)
    assert len(session.calls) == 1
    call = session.calls[0]
    assert (call.method, call.url) == ("POST", TOKEN_URI)
    assert call.kwargs["timeout"] == 7
    assert call.kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    form = call.kwargs["data"]
    assert form["grant_type"] == JWT_BEARER_GRANT
    claims = json.loads(b64url_decode(form["assertion"].split(".")[1]))
    assert claims["iat"] == NOW


def test_rejected_assertion_relays_upstream_body(credential) -> None:
    body = '{"error":"invalid_grant","error_description":"Invalid JWT Signature."}'
    session = RecordingSession([DummyResponse(status_code=400, text=body)])
    minter = TokenMinter(session=session, clock=lambda: NOW)

    with pytest.raises(AuthenticationError) as exc_info:
        minter.mint_access_token(credential)

    error = exc_info.value
    assert error.upstream_status == 400
    assert error.upstream_body == body
    assert error.retryable is False
    assertion = session.calls[0].kwargs["data"]["assertion"]
    assert assertion not in str(error)
    assert assertion.split(".")[2] not in str(error)


def test_network_failure_is_retryable(credential) -> None:
    session = RecordingSession([requests.Timeout("read timed out")])
    minter = TokenMinter(session=session, clock=lambda: NOW)

    with pytest.raises(AuthenticationError) as exc_info:
        minter.mint_access_token(credential)

    assert exc_info.value.retryable is True
    assert isinstance(exc_info.value.__cause__, requests.Timeout)


def test_missing_access_token_is_an_authentication_error(credential) -> None:
    session = RecordingSession([DummyResponse({"token_type": "Bearer"})])
    minter = TokenMinter(session=session, clock=lambda: NOW)

    with pytest.raises(AuthenticationError, match="access_token"):
        minter.mint_access_token(credential)


def test_invalid_json_is_an_authentication_error(credential) -> None:
    session = RecordingSession([DummyResponse(ValueError("no json"), text="<html>")])
    minter = TokenMinter(session=session, clock=lambda: NOW)

    with pytest.raises(AuthenticationError) as exc_info:
        minter.mint_access_token(credential)

    assert exc_info.value.upstream_body == "<html>"

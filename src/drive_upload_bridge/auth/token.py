"""OAuth2 JWT-bearer grant (RFC 7523) for Google service accounts."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests
from requests import Session

from ..errors import AuthenticationError
from ..models import AccessToken, ServiceAccountCredential, TokenResponse
from ..utils.encoding import b64url_encode, b64url_json

TOKEN_URI = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"
ASSERTION_LIFETIME = 3600

logger = logging.getLogger(__name__)


def build_assertion(
    credential: ServiceAccountCredential,
    scope: str,
    *,
    issued_at: int,
    audience: str = TOKEN_URI,
) -> str:
    """Return a signed ``header.claims.signature`` assertion.

    Args:
        credential: Service account issuing the assertion.
        scope: Space separated OAuth scopes requested.
        issued_at: ``iat`` claim in seconds since the epoch.
        audience: ``aud`` claim, the token endpoint.
    """

    header = {"alg": "RS256", "typ": "JWT"}
    claims = {
        "iss": credential.client_email,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME,
    }
    signing_input = f"{b64url_json(header)}.{b64url_json(claims)}"
    signature = credential.key.signer().sign(signing_input.encode("ascii"))
    return f"{signing_input}.{b64url_encode(signature)}"


class TokenMinter:
    """Exchanges signed assertions for short-lived bearer tokens."""

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        token_uri: str = TOKEN_URI,
        timeout: float = 30,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialise the minter.

        Args:
            session: Optional :class:`requests.Session` used for the exchange.
            token_uri: OAuth token endpoint, also used as the ``aud`` claim.
            timeout: Request timeout in seconds.
            clock: Returns wall-clock seconds; defaults to :func:`time.time`.
        """

        self._session = session or requests.Session()
        self._token_uri = token_uri
        self._timeout = timeout
        self._clock = clock or time.time

    def mint_access_token(
        self,
        credential: ServiceAccountCredential,
        scope: str = DRIVE_FILE_SCOPE,
    ) -> AccessToken:
        """Mint a fresh access token for ``credential``.

        Raises:
            AuthenticationError: If the exchange fails or the endpoint rejects
                the assertion. The upstream body is attached verbatim.
        """

        assertion = build_assertion(
            credential,
            scope,
            issued_at=int(self._clock()),
            audience=self._token_uri,
        )
        try:
            response = self._session.post(
                self._token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise AuthenticationError(
                f"Token request failed: {exc.__class__.__name__}",
                retryable=True,
            ) from exc

        if not response.ok:
            raise AuthenticationError(
                f"Token exchange failed: {response.status_code} {response.text}",
                upstream_status=response.status_code,
                upstream_body=response.text,
                retryable=response.status_code >= 500,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthenticationError(
                "Token endpoint returned invalid JSON.",
                upstream_status=response.status_code,
                upstream_body=response.text,
            ) from exc

        token = TokenResponse.from_payload(payload).to_access_token()
        logger.debug(
            "Minted access token for %s (expires_in=%s)",
            credential.client_email,
            token.expires_in,
        )
        return token

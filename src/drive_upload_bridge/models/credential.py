"""Service-account credential models."""
from __future__ import annotations

from dataclasses import dataclass, field

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from google.auth import crypt


@dataclass(frozen=True)
class PemKey:
    """A normalised PKCS#8 PEM private key.

    Attributes:
        pem: Full PEM text with header, 64-column body and footer.
        body: The bare base64 payload.
        private_key: The imported RSA key.
    """

    pem: str = field(repr=False)
    body: str = field(repr=False)
    private_key: RSAPrivateKey = field(repr=False, compare=False)

    def signer(self) -> crypt.Signer:
        """Return an RS256 (RSASSA-PKCS1-v1_5 / SHA-256) signer for this key."""

        return crypt.RSASigner(self.private_key)


@dataclass(frozen=True)
class ServiceAccountCredential:
    """Identity used to mint access tokens for the Drive API."""

    client_email: str
    key: PemKey = field(repr=False)

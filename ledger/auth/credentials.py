"""
Credential Verification

DESIGN DECISION: Account logic never compares passwords itself. It asks a
CredentialVerifier, so the storage scheme can change without touching
registration or login.

Two schemes are provided:
- plaintext: stores the password as given and checks exact equality.
  This is the default for compatibility with existing stores.
- pbkdf2: stores a salted PBKDF2-HMAC-SHA256 digest.
"""

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod


class CredentialVerifier(ABC):
    """Turns passwords into stored credentials and checks them."""

    scheme: str

    @abstractmethod
    def encode(self, password: str) -> str:
        """Produce the value stored for ``password``."""
        pass

    @abstractmethod
    def verify(self, stored: str, supplied: str) -> bool:
        """Check a supplied password against a stored credential."""
        pass


class PlaintextVerifier(CredentialVerifier):
    """Exact-match comparison of plaintext passwords."""

    scheme = "plaintext"

    def encode(self, password: str) -> str:
        return password

    def verify(self, stored: str, supplied: str) -> bool:
        if stored is None or supplied is None:
            return False
        return stored == supplied


class Pbkdf2Verifier(CredentialVerifier):
    """
    Salted PBKDF2-HMAC-SHA256.

    Stored form: ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``.
    The iteration count travels with each credential, so raising it only
    affects new accounts.
    """

    scheme = "pbkdf2"
    prefix = "pbkdf2_sha256"

    def __init__(self, iterations: int = 240_000):
        self._iterations = iterations

    def _digest(self, password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)

    def encode(self, password: str) -> str:
        salt = secrets.token_bytes(16)
        digest = self._digest(password, salt, self._iterations)
        return f"{self.prefix}${self._iterations}${salt.hex()}${digest.hex()}"

    def verify(self, stored: str, supplied: str) -> bool:
        if not stored or supplied is None:
            return False
        try:
            prefix, iterations, salt_hex, digest_hex = stored.split("$")
            if prefix != self.prefix:
                return False
            expected = bytes.fromhex(digest_hex)
            actual = self._digest(supplied, bytes.fromhex(salt_hex), int(iterations))
        except ValueError:
            # Not one of ours
            return False
        return hmac.compare_digest(expected, actual)


def get_verifier(scheme: str = "plaintext", iterations: int = 240_000) -> CredentialVerifier:
    """Build the verifier for a configured scheme name."""
    if scheme == PlaintextVerifier.scheme:
        return PlaintextVerifier()
    if scheme == Pbkdf2Verifier.scheme:
        return Pbkdf2Verifier(iterations=iterations)
    raise ValueError(f"Unknown credential scheme: {scheme}")

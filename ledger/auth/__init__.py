"""Accounts and credentials package."""

from ledger.auth.credentials import (
    CredentialVerifier,
    Pbkdf2Verifier,
    PlaintextVerifier,
    get_verifier,
)
from ledger.auth.service import AccountService

__all__ = [
    "AccountService",
    "CredentialVerifier",
    "Pbkdf2Verifier",
    "PlaintextVerifier",
    "get_verifier",
]

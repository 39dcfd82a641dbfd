"""Module: security."""

from __future__ import annotations

import hashlib
import hmac
import os
import threading
from dataclasses import dataclass
from secrets import token_urlsafe

# Shared password hashing format/version marker.
PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390000

ROLE_ADMIN = "admin"
ROLE_DOCTOR = "doctor"
ROLE_NURSE = "nurse"
ROLE_PATIENT = "patient"
VALID_ROLES = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE, ROLE_PATIENT}


@dataclass(frozen=True)
class Identity:
    """Already-authenticated caller handed to the prescription service."""

    user_id: int
    role: str

    @property
    def is_prescriber(self) -> bool:
        return self.role == ROLE_DOCTOR


def hash_password(password: str, iterations: int = PASSWORD_ITERATIONS) -> str:
    """
    Create a PBKDF2-SHA256 password hash string.

    Stored format:
      pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>
    """
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return f"{PASSWORD_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """Verify a password against a stored PBKDF2 hash in constant time."""
    if not stored or not stored.startswith(f"{PASSWORD_SCHEME}$"):
        return False

    try:
        _, iterations_raw, salt_hex, hash_hex = stored.split("$", 3)
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    computed = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(computed, expected)


class TokenRegistry:
    """In-process map of opaque bearer tokens to authenticated identities."""

    def __init__(self) -> None:
        self._tokens: dict[str, Identity] = {}
        self._lock = threading.Lock()

    def issue(self, identity: Identity) -> str:
        token = token_urlsafe(32)
        with self._lock:
            self._tokens[token] = identity
        return token

    def resolve(self, token: str) -> Identity | None:
        with self._lock:
            return self._tokens.get(token)

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

"""Credential hashing domain service."""

import asyncio
import hashlib
import hmac

from argon2 import Type
from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw

from warden.config import AuthSettings
from warden.domain.error import InternalError

from .base import Service


class PasswordHasher(Service):
    """One-way password hashing with argon2id.

    The salt is derived from ``AuthSettings.password_salt_secret`` and shared
    by every record, so a hash is deterministic for a given secret and cost.
    Only the raw derived key is stored (hex), not an encoded argon2 string.
    """

    KEY_LENGTH = 64

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize password hasher.

        Args:
            auth_settings: Authentication settings
        """
        self._salt = hashlib.sha256(auth_settings.password_salt_secret.encode("utf-8")).digest()
        self._time_cost = auth_settings.password_hash_time_cost
        self._memory_cost = auth_settings.password_hash_memory_cost
        self._parallelism = auth_settings.password_hash_parallelism

    def _derive(self, plaintext: str) -> bytes:
        try:
            return hash_secret_raw(
                plaintext.encode("utf-8"),
                salt=self._salt,
                time_cost=self._time_cost,
                memory_cost=self._memory_cost,
                parallelism=self._parallelism,
                hash_len=self.KEY_LENGTH,
                type=Type.ID,
            )
        except HashingError as e:
            raise InternalError("Password hashing failed") from e

    def hash(self, plaintext: str) -> str:
        """Derive the hex-encoded key for ``plaintext``.

        Raises:
            InternalError: If the key derivation primitive fails
        """
        return self._derive(plaintext).hex()

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check ``plaintext`` against a stored hash in constant time.

        Returns False for malformed or wrong-length hashes instead of raising.

        Raises:
            InternalError: If the key derivation primitive fails
        """
        try:
            expected = bytes.fromhex(hashed)
        except (TypeError, ValueError):
            return False

        if len(expected) != self.KEY_LENGTH:
            return False

        return hmac.compare_digest(self._derive(plaintext), expected)

    async def hash_async(self, plaintext: str) -> str:
        """``hash`` off the event loop."""
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, hashed: str) -> bool:
        """``verify`` off the event loop."""
        return await asyncio.to_thread(self.verify, plaintext, hashed)

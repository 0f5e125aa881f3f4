"""Revocation store domain service."""

import logfire

from warden.config import RedisSettings
from warden.domain.error import ValidationError
from warden.domain.repository.key_value import KeyValueStore

from .base import Service


class RevocationStore(Service):
    """TTL-indexed store of revoked token ids and short-lived secrets.

    Wraps a ``KeyValueStore`` and rejects keys the engine should never see:
    empty keys, keys over ``MAX_KEY_BYTES`` and keys containing control
    characters or spaces.
    """

    MAX_KEY_BYTES = 1024
    FORBIDDEN_CHARACTERS = ("\x00", "\n", "\r", "\x1a", " ")
    BLACKLIST_NAMESPACE = "blacklist"

    def __init__(self, store: KeyValueStore, redis_settings: RedisSettings) -> None:
        """Initialize revocation store.

        Args:
            store: Key/value engine
            redis_settings: Redis settings (key prefix)
        """
        self.store = store
        self.key_prefix = redis_settings.key_prefix

    def validate_key(self, key: str | bytes) -> str:
        """Return ``key`` as text if it is acceptable.

        Raises:
            ValidationError: If the key is malformed
        """
        if isinstance(key, bytes):
            try:
                key = key.decode("utf-8")
            except UnicodeDecodeError:
                raise ValidationError("Invalid key: not valid UTF-8")
        elif not isinstance(key, str):
            raise ValidationError("Invalid key type")

        if not key:
            raise ValidationError("Invalid key length")

        if len(key.encode("utf-8")) > self.MAX_KEY_BYTES:
            raise ValidationError(f"Invalid key byte length (>{self.MAX_KEY_BYTES} bytes)")

        if any(char in key for char in self.FORBIDDEN_CHARACTERS):
            raise ValidationError("Key contains invalid characters")

        return key

    def _key(self, key: str | bytes) -> str:
        return f"{self.key_prefix}:{self.validate_key(key)}"

    async def set(self, key: str | bytes, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``.

        A non-positive TTL means the entry would already be expired, so
        nothing is written.
        """
        full_key = self._key(key)
        if ttl_seconds <= 0:
            logfire.debug("Skipping store write with expired TTL", ttl_seconds=ttl_seconds)
            return
        await self.store.set_with_ttl(full_key, value, ttl_seconds)

    async def get(self, key: str | bytes) -> str | None:
        """Return the value under ``key`` or None."""
        return await self.store.get(self._key(key))

    async def exists(self, key: str | bytes) -> bool:
        """Check whether ``key`` is stored."""
        return await self.store.exists(self._key(key))

    async def delete(self, key: str | bytes) -> None:
        """Remove ``key``."""
        await self.store.delete(self._key(key))

    async def revoke(self, token_id: str, ttl_seconds: int) -> None:
        """Blacklist a token id for ``ttl_seconds``."""
        await self.set(f"{self.BLACKLIST_NAMESPACE}:{token_id}", "1", ttl_seconds)

    async def is_revoked(self, token_id: str) -> bool:
        """Check whether a token id is blacklisted."""
        return await self.exists(f"{self.BLACKLIST_NAMESPACE}:{token_id}")

"""Port for retrieving the current data-encryption key."""

from __future__ import annotations

from typing import Protocol

DATA_ENCRYPTION_KEY_LENGTH = 32


class KeyUnavailableError(RuntimeError):
    """Raised when the data-encryption key cannot be obtained."""


class DataEncryptionKeyProviderPort(Protocol):
    """Data-encryption key retrieval contract."""

    async def get_key(self) -> bytes:
        """Return the current 256-bit data-encryption key."""

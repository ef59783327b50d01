"""Data-encryption key provider adapters and master-key wrapping helpers."""

from __future__ import annotations

from dataclasses import dataclass

from credential_protection.application.ports.data_encryption_key_provider_port import (
    DATA_ENCRYPTION_KEY_LENGTH,
    DataEncryptionKeyProviderPort,
    KeyUnavailableError,
)
from credential_protection.infrastructure.security.envelope import (
    ArtifactAuthenticationError,
    MalformedArtifactError,
    open_sealed,
    seal,
)

MASTER_KEY_LENGTH = 32
_NO_ASSOCIATED_DATA = b""


class KeyProviderConfigError(ValueError):
    """Raised when key provider configuration is missing or ambiguous."""


def wrap_data_encryption_key(*, master_key: bytes, data_key: bytes) -> bytes:
    """Encrypt a data-encryption key under the master key."""

    _require_length(master_key, MASTER_KEY_LENGTH, "master key")
    _require_length(data_key, DATA_ENCRYPTION_KEY_LENGTH, "data encryption key")
    return seal(plaintext=data_key, key=master_key, associated_data=_NO_ASSOCIATED_DATA)


def unwrap_data_encryption_key(*, master_key: bytes, wrapped_key: bytes) -> bytes:
    """Decrypt a wrapped data-encryption key or raise KeyUnavailableError."""

    try:
        return open_sealed(
            envelope=wrapped_key,
            key=master_key,
            associated_data=_NO_ASSOCIATED_DATA,
            plaintext_length=DATA_ENCRYPTION_KEY_LENGTH,
        )
    except (MalformedArtifactError, ArtifactAuthenticationError) as error:
        raise KeyUnavailableError("failed to unwrap data encryption key") from error


class StaticDataEncryptionKeyProvider(DataEncryptionKeyProviderPort):
    """Provider returning one fixed, already-unwrapped data-encryption key."""

    def __init__(self, key: bytes) -> None:
        _require_length(key, DATA_ENCRYPTION_KEY_LENGTH, "data encryption key")
        self._key = bytes(key)

    async def get_key(self) -> bytes:
        return self._key


class WrappedDataEncryptionKeyProvider(DataEncryptionKeyProviderPort):
    """Provider unwrapping the data-encryption key with the master key on every call."""

    def __init__(self, *, master_key: bytes, wrapped_key: bytes) -> None:
        _require_length(master_key, MASTER_KEY_LENGTH, "master key")
        self._master_key = bytes(master_key)
        self._wrapped_key = bytes(wrapped_key)

    async def get_key(self) -> bytes:
        return unwrap_data_encryption_key(
            master_key=self._master_key,
            wrapped_key=self._wrapped_key,
        )


@dataclass(frozen=True)
class KeyProviderConfig:
    """Decoded key material for building one provider."""

    data_key: bytes | None = None
    master_key: bytes | None = None
    wrapped_data_key: bytes | None = None


def resolve_key_provider_config(
    *,
    data_key_hex: str | None,
    master_key_hex: str | None,
    wrapped_data_key_hex: str | None,
) -> KeyProviderConfig:
    """Decode hex key settings, requiring exactly one provider mode."""

    if data_key_hex is not None:
        if master_key_hex is not None or wrapped_data_key_hex is not None:
            raise KeyProviderConfigError(
                "set either DATA_ENCRYPTION_KEY or "
                "MASTER_ENCRYPTION_KEY with WRAPPED_DATA_ENCRYPTION_KEY, not both"
            )
        return KeyProviderConfig(data_key=_decode_hex(data_key_hex, "DATA_ENCRYPTION_KEY"))

    if master_key_hex is None or wrapped_data_key_hex is None:
        raise KeyProviderConfigError(
            "set DATA_ENCRYPTION_KEY, or both MASTER_ENCRYPTION_KEY and "
            "WRAPPED_DATA_ENCRYPTION_KEY"
        )

    return KeyProviderConfig(
        master_key=_decode_hex(master_key_hex, "MASTER_ENCRYPTION_KEY"),
        wrapped_data_key=_decode_hex(wrapped_data_key_hex, "WRAPPED_DATA_ENCRYPTION_KEY"),
    )


def build_data_encryption_key_provider(
    config: KeyProviderConfig,
) -> DataEncryptionKeyProviderPort:
    """Build the provider matching resolved key configuration."""

    try:
        if config.data_key is not None:
            return StaticDataEncryptionKeyProvider(config.data_key)
        if config.master_key is None or config.wrapped_data_key is None:
            raise KeyProviderConfigError("no data encryption key configured")
        return WrappedDataEncryptionKeyProvider(
            master_key=config.master_key,
            wrapped_key=config.wrapped_data_key,
        )
    except ValueError as exc:
        raise KeyProviderConfigError(str(exc)) from exc


def _decode_hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except ValueError as exc:
        raise KeyProviderConfigError(f"{name} must be hex encoded") from exc


def _require_length(value: bytes, expected: int, label: str) -> None:
    if len(value) != expected:
        raise ValueError(f"{label} must be {expected} bytes, got {len(value)}")

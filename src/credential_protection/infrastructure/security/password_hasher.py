"""scrypt + AES-256-GCM password hasher adapter."""

from __future__ import annotations

import asyncio
import hmac
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from credential_protection.application.ports.data_encryption_key_provider_port import (
    DATA_ENCRYPTION_KEY_LENGTH,
    DataEncryptionKeyProviderPort,
    KeyUnavailableError,
)
from credential_protection.application.ports.password_hasher_port import PasswordHasherPort
from credential_protection.domain.auth.password import HashedPassword, Password
from credential_protection.infrastructure.security.envelope import (
    ENVELOPE_OVERHEAD,
    ArtifactAuthenticationError,
    MalformedArtifactError,
    open_sealed,
    seal,
)
from credential_protection.infrastructure.security.key_derivation import (
    FINGERPRINT_LENGTH,
    SALT_LENGTH,
    ScryptParameters,
    derive_fingerprint,
    new_salt,
)

CURRENT_VERSION = 1
SALTED_HASH_LENGTH = FINGERPRINT_LENGTH + SALT_LENGTH
ARTIFACT_LENGTH = ENVELOPE_OVERHEAD + SALTED_HASH_LENGTH
DEFAULT_MAX_CONCURRENT_DERIVATIONS = 4

# Bump CURRENT_VERSION whenever these change.
_SCRYPT_PARAMETERS = ScryptParameters(n=2**13, r=8, p=10, length=FINGERPRINT_LENGTH)

logger = logging.getLogger(__name__)


class UnsupportedVersionError(ValueError):
    """Raised internally when an artifact version is unknown to this hasher."""


class CredentialHasher(PasswordHasherPort):
    """Password hashing adapter using scrypt fingerprints sealed with AES-256-GCM.

    Every call fetches the data-encryption key from the provider. Verification
    failures of any integrity nature are reported as ``False``; only key
    retrieval failures raise (`KeyUnavailableError`).
    """

    def __init__(
        self,
        *,
        key_provider: DataEncryptionKeyProviderPort,
        max_concurrent_derivations: int = DEFAULT_MAX_CONCURRENT_DERIVATIONS,
    ) -> None:
        if max_concurrent_derivations < 1:
            raise ValueError("max_concurrent_derivations must be positive")
        self._key_provider = key_provider
        self._version = CURRENT_VERSION
        self._scrypt_parameters = _SCRYPT_PARAMETERS
        # Bounded KDF pool, usable from any event loop or thread.
        self._derivation_pool = ThreadPoolExecutor(
            max_workers=max_concurrent_derivations,
            thread_name_prefix="password-kdf",
        )

    @property
    def version(self) -> int:
        """Return the artifact format version produced and accepted by this hasher."""

        return self._version

    async def hash(self, password: Password) -> HashedPassword:
        """Derive a salted fingerprint and seal it under the current data-encryption key."""

        salt = new_salt()
        fingerprint = await self._derive(secret=password.normalized, salt=salt)

        key = await self._fetch_key()
        artifact = seal(
            plaintext=fingerprint + salt,
            key=key,
            associated_data=self._associated_data(),
        )
        if len(artifact) != ARTIFACT_LENGTH:
            raise MalformedArtifactError(
                f"produced artifact is {len(artifact)} bytes, expected {ARTIFACT_LENGTH}"
            )

        return HashedPassword(artifact=artifact, version=self._version)

    async def verify(self, password: Password, hashed_password: HashedPassword) -> bool:
        """Verify password against a stored artifact in constant time."""

        try:
            return await self._verify(password, hashed_password)
        except UnsupportedVersionError:
            logger.info(
                "password_artifact_version_unsupported version=%s supported_version=%s",
                hashed_password.version,
                self._version,
            )
            return False
        except MalformedArtifactError:
            logger.warning(
                "password_artifact_malformed version=%s length=%s",
                hashed_password.version,
                len(hashed_password.artifact),
            )
            return False
        except ArtifactAuthenticationError:
            logger.warning(
                "password_artifact_authentication_failed version=%s",
                hashed_password.version,
            )
            return False

    async def _verify(self, password: Password, hashed_password: HashedPassword) -> bool:
        if hashed_password.version != self._version:
            raise UnsupportedVersionError(f"unsupported artifact version {hashed_password.version}")

        key = await self._fetch_key()
        salted_hash = open_sealed(
            envelope=bytes(hashed_password.artifact),
            key=key,
            associated_data=self._associated_data(),
            plaintext_length=SALTED_HASH_LENGTH,
        )

        stored_fingerprint = salted_hash[:FINGERPRINT_LENGTH]
        salt = salted_hash[-SALT_LENGTH:]
        candidate_fingerprint = await self._derive(secret=password.normalized, salt=salt)

        return hmac.compare_digest(candidate_fingerprint, stored_fingerprint)

    async def _derive(self, *, secret: bytes, salt: bytes) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._derivation_pool,
            partial(
                derive_fingerprint,
                secret=secret,
                salt=salt,
                params=self._scrypt_parameters,
            ),
        )

    async def _fetch_key(self) -> bytes:
        try:
            key = await self._key_provider.get_key()
        except KeyUnavailableError:
            logger.error("data_encryption_key_unavailable")
            raise
        except Exception as error:  # noqa: BLE001
            logger.error("data_encryption_key_unavailable error_type=%s", type(error).__name__)
            raise KeyUnavailableError("data encryption key provider failed") from error

        if not isinstance(key, (bytes, bytearray)) or len(key) != DATA_ENCRYPTION_KEY_LENGTH:
            logger.error("data_encryption_key_invalid")
            raise KeyUnavailableError(
                f"data encryption key must be {DATA_ENCRYPTION_KEY_LENGTH} bytes"
            )
        return bytes(key)

    def _associated_data(self) -> bytes:
        return bytes([self._version])

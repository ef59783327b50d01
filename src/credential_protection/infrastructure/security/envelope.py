"""AES-256-GCM envelope helpers for password artifacts.

Layout: ``nonce(12) | ciphertext | tag(16)``. The caller supplies associated
data, which is authenticated but not stored in the envelope.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_LENGTH = 12
TAG_LENGTH = 16
ENVELOPE_OVERHEAD = NONCE_LENGTH + TAG_LENGTH


class MalformedArtifactError(ValueError):
    """Raised when an envelope does not match the expected byte layout."""


class ArtifactAuthenticationError(ValueError):
    """Raised when envelope authentication fails (tampering or wrong key)."""


def seal(*, plaintext: bytes, key: bytes, associated_data: bytes) -> bytes:
    """Encrypt plaintext under key with a fresh nonce and return the envelope."""

    nonce = os.urandom(NONCE_LENGTH)
    # AESGCM appends the tag to the ciphertext.
    ciphertext_and_tag = AESGCM(key).encrypt(nonce, plaintext, associated_data)
    return nonce + ciphertext_and_tag


def open_sealed(
    *,
    envelope: bytes,
    key: bytes,
    associated_data: bytes,
    plaintext_length: int,
) -> bytes:
    """Authenticate and decrypt an envelope produced by `seal`."""

    expected_length = ENVELOPE_OVERHEAD + plaintext_length
    if len(envelope) != expected_length:
        raise MalformedArtifactError(
            f"envelope must be {expected_length} bytes, got {len(envelope)}"
        )

    nonce = envelope[:NONCE_LENGTH]
    ciphertext_and_tag = envelope[NONCE_LENGTH:]
    try:
        return AESGCM(key).decrypt(nonce, ciphertext_and_tag, associated_data)
    except InvalidTag as error:
        raise ArtifactAuthenticationError("envelope authentication failed") from error

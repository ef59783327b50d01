"""scrypt key-derivation wrapper for password fingerprints."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SALT_LENGTH = 16
FINGERPRINT_LENGTH = 32


@dataclass(frozen=True)
class ScryptParameters:
    """Cost parameters for one scrypt derivation.

    See https://cheatsheetseries.owasp.org/cheatsheets/Password_Storage_Cheat_Sheet.html#scrypt
    """

    n: int = 2**13
    r: int = 8
    p: int = 10
    length: int = FINGERPRINT_LENGTH


def new_salt() -> bytes:
    """Return a fresh random salt from the OS CSPRNG."""

    return os.urandom(SALT_LENGTH)


def derive_fingerprint(*, secret: bytes, salt: bytes, params: ScryptParameters) -> bytes:
    """Derive a fixed-length fingerprint from secret bytes and salt.

    CPU and memory bound; callers on an event loop should run it in a worker thread.
    """

    if len(salt) != SALT_LENGTH:
        raise ValueError(f"salt must be {SALT_LENGTH} bytes")

    kdf = Scrypt(salt=salt, length=params.length, n=params.n, r=params.r, p=params.p)
    return kdf.derive(secret)

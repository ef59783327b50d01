from __future__ import annotations

import pytest

from credential_protection.infrastructure.security.key_derivation import (
    FINGERPRINT_LENGTH,
    SALT_LENGTH,
    ScryptParameters,
    derive_fingerprint,
    new_salt,
)

# Cheap parameters keep these unit tests fast; production defaults are covered by hasher tests.
_FAST = ScryptParameters(n=2**4, r=8, p=1)


def test_default_parameters_match_version_one() -> None:
    params = ScryptParameters()

    assert (params.n, params.r, params.p, params.length) == (2**13, 8, 10, 32)


def test_new_salt_is_random_and_sized() -> None:
    salts = {new_salt() for _ in range(8)}

    assert len(salts) == 8
    assert all(len(salt) == SALT_LENGTH for salt in salts)


def test_derivation_is_deterministic_for_same_salt() -> None:
    salt = b"s" * SALT_LENGTH

    first = derive_fingerprint(secret=b"secret", salt=salt, params=_FAST)
    second = derive_fingerprint(secret=b"secret", salt=salt, params=_FAST)

    assert first == second
    assert len(first) == FINGERPRINT_LENGTH


def test_derivation_depends_on_salt_and_secret() -> None:
    salt = b"s" * SALT_LENGTH
    baseline = derive_fingerprint(secret=b"secret", salt=salt, params=_FAST)

    assert derive_fingerprint(secret=b"secret", salt=b"t" * SALT_LENGTH, params=_FAST) != baseline
    assert derive_fingerprint(secret=b"secreT", salt=salt, params=_FAST) != baseline


def test_salt_length_is_enforced() -> None:
    with pytest.raises(ValueError):
        derive_fingerprint(secret=b"secret", salt=b"short", params=_FAST)

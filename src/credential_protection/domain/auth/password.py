"""Password value objects shared by hashing and verification flows."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass

_NORMALIZATION_FORM = "NFKD"


class Password:
    """Plaintext password normalized at the trust boundary.

    Leading/trailing whitespace is stripped and the text is NFKD-normalized, so
    Unicode-equivalent inputs produce identical bytes for hashing.
    """

    __slots__ = ("_value",)

    def __init__(self, raw: str) -> None:
        if not isinstance(raw, str):
            raise TypeError("password must be a string")
        object.__setattr__(self, "_value", unicodedata.normalize(_NORMALIZATION_FORM, raw.strip()))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Password is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Password is immutable")

    @property
    def value(self) -> str:
        """Return the normalized password text."""

        return self._value

    @property
    def normalized(self) -> bytes:
        """Return the canonical UTF-8 bytes fed to key derivation."""

        return self._value.encode("utf-8")

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "Password('***')"


@dataclass(frozen=True)
class HashedPassword:
    """Persisted password artifact and the format version that produced it."""

    artifact: bytes
    version: int

    def __post_init__(self) -> None:
        if self.artifact is None or self.version is None:
            raise TypeError("artifact and version are required")

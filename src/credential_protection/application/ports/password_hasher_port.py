"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol

from credential_protection.domain.auth.password import HashedPassword, Password


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    async def hash(self, password: Password) -> HashedPassword:
        """Hash normalized password into a storable artifact."""

    async def verify(self, password: Password, hashed_password: HashedPassword) -> bool:
        """Verify normalized password against a stored artifact."""

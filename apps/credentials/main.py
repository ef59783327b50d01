"""credentials entrypoint for key generation and offline hash/verify."""

from __future__ import annotations

import argparse
import asyncio
import hmac
import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from getpass import getpass

from credential_protection.application.ports.data_encryption_key_provider_port import (
    DATA_ENCRYPTION_KEY_LENGTH,
    KeyUnavailableError,
)
from credential_protection.config.settings import Settings, load_settings
from credential_protection.domain.auth.password import HashedPassword, Password
from credential_protection.infrastructure.logging import configure_logging
from credential_protection.infrastructure.security.key_providers import (
    MASTER_KEY_LENGTH,
    KeyProviderConfigError,
    build_data_encryption_key_provider,
    resolve_key_provider_config,
    unwrap_data_encryption_key,
    wrap_data_encryption_key,
)
from credential_protection.infrastructure.security.password_hasher import (
    CURRENT_VERSION,
    CredentialHasher,
)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedKeys:
    """Fresh master key, data key and the data key wrapped under the master key."""

    master_key: bytes
    data_key: bytes
    wrapped_data_key: bytes


def generate_keys() -> GeneratedKeys:
    """Generate a master/data key pair and check the wrapped key unwraps correctly."""

    master_key = os.urandom(MASTER_KEY_LENGTH)
    data_key = os.urandom(DATA_ENCRYPTION_KEY_LENGTH)
    wrapped_data_key = wrap_data_encryption_key(master_key=master_key, data_key=data_key)

    unwrapped = unwrap_data_encryption_key(master_key=master_key, wrapped_key=wrapped_data_key)
    if not hmac.compare_digest(unwrapped, data_key):
        raise KeyUnavailableError("wrapped data encryption key failed round-trip check")

    return GeneratedKeys(
        master_key=master_key,
        data_key=data_key,
        wrapped_data_key=wrapped_data_key,
    )


def build_credential_hasher(settings: Settings) -> CredentialHasher:
    """Build credential hasher with the key provider selected by settings."""

    config = resolve_key_provider_config(
        data_key_hex=settings.data_encryption_key,
        master_key_hex=settings.master_encryption_key,
        wrapped_data_key_hex=settings.wrapped_data_encryption_key,
    )
    return CredentialHasher(
        key_provider=build_data_encryption_key_provider(config),
        max_concurrent_derivations=settings.password_hash_max_concurrency,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="credentials",
        description="Password hashing with scrypt fingerprints sealed by AES-256-GCM.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("generate-keys", help="Generate MEK, DEK and wrapped DEK (hex)")

    hash_cmd = sub.add_parser("hash", help="Hash a password with the configured key")
    hash_cmd.add_argument("--stdin", action="store_true", help="Read password from stdin")

    verify_cmd = sub.add_parser("verify", help="Verify a password against an artifact")
    verify_cmd.add_argument("--artifact", required=True, help="Artifact bytes (hex)")
    verify_cmd.add_argument("--version", type=int, default=CURRENT_VERSION)
    verify_cmd.add_argument("--stdin", action="store_true", help="Read password from stdin")

    return parser


def _read_password(*, from_stdin: bool, confirm: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")

    try:
        password = getpass("Password: ")
        confirmation = getpass("Confirm password: ") if confirm else password
    except (EOFError, KeyboardInterrupt) as exc:
        raise ValueError("password input aborted") from exc
    if confirmation != password:
        raise ValueError("passwords do not match")
    return password


def _run_generate_keys() -> int:
    keys = generate_keys()
    print(f"MASTER_ENCRYPTION_KEY={keys.master_key.hex()}")
    print(f"DATA_ENCRYPTION_KEY={keys.data_key.hex()}")
    print(f"WRAPPED_DATA_ENCRYPTION_KEY={keys.wrapped_data_key.hex()}")
    return EXIT_OK


async def _run_hash(*, hasher: CredentialHasher, raw_password: str) -> int:
    password = Password(raw_password)
    if not password.value:
        raise ValueError("password cannot be blank")

    hashed = await hasher.hash(password)
    print(f"version={hashed.version}")
    print(f"artifact={hashed.artifact.hex()}")
    return EXIT_OK


async def _run_verify(
    *,
    hasher: CredentialHasher,
    raw_password: str,
    artifact_hex: str,
    version: int,
) -> int:
    try:
        artifact = bytes.fromhex(artifact_hex.strip())
    except ValueError as exc:
        raise ValueError("artifact must be hex encoded") from exc

    matched = await hasher.verify(
        Password(raw_password),
        HashedPassword(artifact=artifact, version=version),
    )
    print("match" if matched else "no match")
    return EXIT_OK if matched else EXIT_NO_MATCH


def main(argv: Sequence[str] | None = None) -> int:
    """Run one credentials command and return the process exit code."""

    args = build_parser().parse_args(argv)
    if args.cmd == "generate-keys":
        return _run_generate_keys()

    try:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        hasher = build_credential_hasher(settings)
        raw_password = _read_password(from_stdin=args.stdin, confirm=args.cmd == "hash")
        if args.cmd == "hash":
            return asyncio.run(_run_hash(hasher=hasher, raw_password=raw_password))
        return asyncio.run(
            _run_verify(
                hasher=hasher,
                raw_password=raw_password,
                artifact_hex=args.artifact,
                version=args.version,
            )
        )
    except (KeyProviderConfigError, KeyUnavailableError) as exc:
        logger.error("credentials_command_failed cmd=%s error=%s", args.cmd, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())

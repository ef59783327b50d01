"""Process logging configuration for credential protection entrypoints."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str) -> int:
    """Map a level name to a logging constant, falling back to INFO."""

    normalized_level = level.strip().upper() or "INFO"
    resolved_level = getattr(logging, normalized_level, None)
    if not isinstance(resolved_level, int):
        return logging.INFO
    return resolved_level


def configure_logging(*, level: str, stream: TextIO | None = None) -> None:
    """Configure process logging on stderr so command output stays clean on stdout."""

    logging.basicConfig(
        level=resolve_log_level(level),
        format=_LOG_FORMAT,
        stream=stream if stream is not None else sys.stderr,
    )

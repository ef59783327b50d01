from __future__ import annotations

import logging

import pytest

from credential_protection.infrastructure.logging import configure_logging, resolve_log_level


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("", logging.INFO),
        ("not-a-level", logging.INFO),
        ("BASIC_FORMAT", logging.INFO),
    ],
)
def test_resolve_log_level(level: str, expected: int) -> None:
    assert resolve_log_level(level) == expected


def test_configure_logging_sets_root_level(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", logging.WARNING)

    configure_logging(level="debug")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1

import pytest
from pydantic import ValidationError

from credential_protection.config.settings import Settings

_ENV_KEYS = (
    "DATA_ENCRYPTION_KEY",
    "MASTER_ENCRYPTION_KEY",
    "WRAPPED_DATA_ENCRYPTION_KEY",
    "PASSWORD_HASH_MAX_CONCURRENCY",
    "LOG_LEVEL",
)


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_are_deterministic(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings(_env_file=None)

    assert settings.data_encryption_key is None
    assert settings.master_encryption_key is None
    assert settings.wrapped_data_encryption_key is None
    assert settings.password_hash_max_concurrency == 4
    assert settings.log_level == "INFO"


def test_key_values_are_read_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("MASTER_ENCRYPTION_KEY", "ab" * 32)
    monkeypatch.setenv("WRAPPED_DATA_ENCRYPTION_KEY", "cd" * 60)
    monkeypatch.setenv("PASSWORD_HASH_MAX_CONCURRENCY", "8")

    settings = Settings(_env_file=None)

    assert settings.master_encryption_key == "ab" * 32
    assert settings.wrapped_data_encryption_key == "cd" * 60
    assert settings.password_hash_max_concurrency == 8


@pytest.mark.parametrize("value", ["abc", "zz" * 32, "ab" * 33])
def test_invalid_data_key_raises_validation_error(
    monkeypatch: pytest.MonkeyPatch,
    value: str,
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATA_ENCRYPTION_KEY", value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_wrapped_key_length_is_validated(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("WRAPPED_DATA_ENCRYPTION_KEY", "ab" * 32)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_non_positive_concurrency_raises_validation_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PASSWORD_HASH_MAX_CONCURRENCY", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)

"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

HexKey = Annotated[str, Field(pattern=r"^[0-9a-fA-F]{64}$")]
HexWrappedKey = Annotated[str, Field(pattern=r"^[0-9a-fA-F]{120}$")]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven credential protection settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    data_encryption_key: HexKey | None = Field(
        default=None,
        validation_alias="DATA_ENCRYPTION_KEY",
    )
    master_encryption_key: HexKey | None = Field(
        default=None,
        validation_alias="MASTER_ENCRYPTION_KEY",
    )
    wrapped_data_encryption_key: HexWrappedKey | None = Field(
        default=None,
        validation_alias="WRAPPED_DATA_ENCRYPTION_KEY",
    )
    password_hash_max_concurrency: PositiveInt = Field(
        default=4,
        validation_alias="PASSWORD_HASH_MAX_CONCURRENCY",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()

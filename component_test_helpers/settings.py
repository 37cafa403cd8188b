import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HarnessSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COMPONENT_TEST_")

    hooks: str = Field("pytest", description="Name of the default hook adapter")
    log_level: str = Field("WARNING")
    port_base: int = Field(19000, ge=1024, le=65535)
    port_block_size: int = Field(1000, gt=0)

    @field_validator("log_level")
    @classmethod
    def level_is_valid(cls, level: str) -> str:
        level = level.upper()
        levelName = logging.getLevelName(level)

        if isinstance(levelName, int):
            return level
        else:
            raise ValueError(f"must be valid log level from Python's 'logging' module, got '{level}'")


@lru_cache
def get_settings() -> HarnessSettings:
    return HarnessSettings()

"""Pydantic settings loaded from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    api_key: str

    # Empty disables tag augmentation
    tagging_server_url: str = ""
    # None waits on the tagging server indefinitely
    tagging_timeout: float | None = None

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]

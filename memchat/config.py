"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """memchat configuration. All values come from environment variables."""

    # Supermemory
    supermemory_api_key: str = Field(default="")
    supermemory_base_url: str = Field(default="https://api.supermemory.ai")
    memory_request_timeout: float = Field(default=20.0)

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # Session cookie carrying the opaque user id
    session_cookie_name: str = Field(default="__session")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @property
    def memory_enabled(self) -> bool:
        """True when a Supermemory API key is configured."""
        return bool(self.supermemory_api_key.strip())


settings = Settings()

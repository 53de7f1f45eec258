"""
Settings for dbwrapper, read from the environment (or a local .env file).

Constructor arguments on DbWrapper / create_wrapper override these defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Seconds to wait for the driver to establish a connection.
    EXTERNAL_DB_CONNECT_TIMEOUT: int = Field(default=10, ge=1)
    # Session-level statement timeout in seconds; None disables it.
    EXTERNAL_DB_STATEMENT_TIMEOUT: float | None = None

    DB_KEEP_ALIVE: bool = False
    DB_IDLE_TIMEOUT_MS: int = Field(default=120_000, gt=0)
    DB_ERROR_LOG_ENABLED: bool = True
    # Re-raise typed failures to the caller after reporting them.
    DB_RAISE_ERRORS: bool = False


settings = Settings()

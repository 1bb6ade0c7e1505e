"""Application configuration."""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

ENV_FILE = ".env"


class ConfigurationError(Exception):
    """Raised when settings cannot be loaded from the environment."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database connection
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_ssl_mode: str

    # Connection pool
    db_max_open_conns: int = 25
    db_max_idle_conns: int = 25
    db_conn_max_lifetime: int = 300  # seconds
    db_connect_timeout: int = 5  # seconds
    db_statement_timeout: int = 30  # seconds
    db_bootstrap_timeout: int = 10  # seconds

    # HTTP server
    server_port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = ENV_FILE
        extra = "ignore"
        frozen = True


def load_settings() -> Settings:
    """
    Read settings from the process environment and the .env file.

    Raises:
        ConfigurationError: If the .env file is absent, or a required
            variable is missing or malformed
    """
    if not Path(ENV_FILE).is_file():
        raise ConfigurationError(f"error loading env variables: {ENV_FILE} not found")

    try:
        return Settings()
    except ValidationError as e:
        missing = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"error loading env variables: invalid or missing {', '.join(missing)}"
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()

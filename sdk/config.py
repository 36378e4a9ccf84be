"""Client settings loaded from the environment (prefix INVENTORY_) or a .env file."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


class Settings(BaseSettings):
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the product service (without /api/products)",
    )
    # None means requests never time out
    request_timeout: Optional[float] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Route log records through rich so they render next to the CLI panels."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )

"""Application configuration via environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    storage_backend: Literal["local", "memory"] = "local"
    root_dir: str = ".threadinbox"

    # Inbox behaviour
    retention_days: int = Field(30, ge=0)
    archive_read: bool = True

    # Logging
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "THREADINBOX_",
    }


settings = Settings()

"""
Application configuration for Falcon HTTP.

The configuration is an explicit value built once at startup and handed
to ``create_app``. Nothing in the package reads paths from a global.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field


DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "falcon"


class AppConfig(BaseModel):
    """
    Runtime settings for the service.

    Attributes:
        data_dir: Directory holding the database file
        database_name: SQLite file name inside data_dir
        persist_delay: Quiet period (seconds) before a store snapshot is written
        request_timeout: Timeout for outgoing requests, None disables it
        log_level: Level for the package logger
    """
    data_dir: Path = DEFAULT_DATA_DIR
    database_name: str = "falcon.db"
    persist_delay: float = Field(default=0.5, ge=0)
    request_timeout: float | None = None
    log_level: str = "INFO"

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_name

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_path}"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a configuration from FALCON_* environment variables."""
        values: dict = {}
        if data_dir := os.environ.get("FALCON_DATA_DIR"):
            values["data_dir"] = Path(data_dir).expanduser()
        if delay := os.environ.get("FALCON_PERSIST_DELAY"):
            values["persist_delay"] = float(delay)
        if level := os.environ.get("FALCON_LOG_LEVEL"):
            values["log_level"] = level.upper()
        return cls(**values)

    def ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

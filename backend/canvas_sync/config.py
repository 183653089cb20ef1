"""
Configuration for Canvas Sync.

Values come from the environment, optionally populated from a .env file in
the working directory and from ~/.canvas-scraper.env. Real environment
variables always win over file values.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigError

DEFAULT_CANVAS_URL = "https://canvas.colorado.edu/"
DEFAULT_ENV_FILES = (Path(".env"), Path.home() / ".canvas-scraper.env")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_REDACTED = "[REDACTED]"


class Account(BaseModel):
    username: str = ""
    password: str = ""


class ExportTargets(BaseModel):
    todoist: bool = False
    notion: bool = False

    @property
    def any(self) -> bool:
        return self.todoist or self.notion


class LoggingSettings(BaseModel):
    level: str = "INFO"
    dev: bool = False
    file_logging: bool = True
    log_dir: str = "logs"


class Config(BaseModel):
    """Everything the scraper and exporters need for one run."""
    url: str = DEFAULT_CANVAS_URL
    account: Account = Field(default_factory=Account)
    todoist_api_key: str = ""
    notion_api_key: str = ""
    notion_db_id: str = ""
    export_to: ExportTargets = Field(default_factory=ExportTargets)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def validate_for_scraping(self):
        """Raise ConfigError if Canvas login cannot possibly work."""
        missing = []
        if not self.url:
            missing.append("CANVAS_URL")
        if not self.account.username:
            missing.append("CANVAS_USERNAME")
        if not self.account.password:
            missing.append("CANVAS_PWD")
        if missing:
            raise ConfigError(f"Missing configuration: {', '.join(missing)}")

    def redacted(self) -> dict:
        """Config as a dict that is safe to log."""
        data = self.model_dump()
        if data["account"]["password"]:
            data["account"]["password"] = _REDACTED
        for key in ("todoist_api_key", "notion_api_key"):
            if data[key]:
                data[key] = _REDACTED
        return data


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_config(env_files: Optional[list] = None) -> Config:
    """Build a Config from .env files and the process environment.

    Args:
        env_files: Files to load before reading the environment. Defaults to
            ./.env and ~/.canvas-scraper.env; missing files are ignored.
    """
    for env_file in env_files if env_files is not None else DEFAULT_ENV_FILES:
        if Path(env_file).is_file():
            load_dotenv(env_file, override=False)

    return Config(
        url=os.getenv("CANVAS_URL") or DEFAULT_CANVAS_URL,
        account=Account(
            username=os.getenv("CANVAS_USERNAME", ""),
            password=os.getenv("CANVAS_PWD", ""),
        ),
        todoist_api_key=os.getenv("TODOIST_API_KEY", ""),
        notion_api_key=os.getenv("NOTION_API_KEY", ""),
        notion_db_id=os.getenv("NOTION_DB_ID", ""),
        export_to=ExportTargets(
            todoist=_env_flag("TODOIST_EXPORT"),
            notion=_env_flag("NOTION_EXPORT"),
        ),
        logging=LoggingSettings(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            file_logging=_env_flag("ENABLE_FILE_LOGGING", default=True),
        ),
    )

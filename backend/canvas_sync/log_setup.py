"""
Logging configuration.

Everything in the package logs through module-level loggers; this module
decides where those records go. Call configure_logging() once at startup.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .config import LoggingSettings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(session)s%(name)s - %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024

# Third-party loggers that are too chatty at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "selenium", "WDM")


class SessionFilter(logging.Filter):
    """Stamp every record with the run's session id."""

    def __init__(self, session_id: str = ""):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session = f"[session {self.session_id[:8]}] " if self.session_id else ""
        return True


def _file_handler(path: str, level: int, max_files: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=max_files, encoding="utf-8")
    handler.setLevel(level)
    return handler


def configure_logging(settings: LoggingSettings, session_id: str = "", dev: bool = False) -> list[logging.Handler]:
    """Install console and (optionally) rotating file handlers on the root logger.

    Returns:
        The handlers that were installed
    """
    dev = dev or settings.dev
    console_level = logging.DEBUG if dev else getattr(logging, settings.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    console = logging.StreamHandler()
    console.setLevel(console_level)
    handlers.append(console)

    if settings.file_logging:
        try:
            os.makedirs(settings.log_dir, exist_ok=True)
            handlers.append(_file_handler(os.path.join(settings.log_dir, "app.log"), logging.INFO, 5))
            handlers.append(_file_handler(os.path.join(settings.log_dir, "error.log"), logging.ERROR, 5))
            if dev:
                handlers.append(_file_handler(os.path.join(settings.log_dir, "debug.log"), logging.DEBUG, 3))
        except OSError as e:
            # Console handler still works; keep going without files
            logging.getLogger(__name__).warning(f"File logging disabled: {e}")

    formatter = logging.Formatter(LOG_FORMAT)
    session_filter = SessionFilter(session_id)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(session_filter)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handlers

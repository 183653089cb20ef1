"""Exception hierarchy for Canvas Sync."""

from typing import Optional


class CanvasSyncError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(CanvasSyncError):
    """Configuration is missing or unusable."""


class ScraperError(CanvasSyncError):
    """Fatal scraping failure that aborts the run."""


class CanvasLoginError(ScraperError):
    """Login form or post-login dashboard link not found."""


class CanvasNavigationError(ScraperError):
    """Planner view could not be reached."""


class ExportError(CanvasSyncError):
    """An export target could not load its remote state."""


class ApiError(CanvasSyncError):
    """A single Todoist/Notion API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (status {self.status_code})"
        return base

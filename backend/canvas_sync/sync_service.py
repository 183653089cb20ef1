"""
Sync Service for Canvas

Orchestrates one run: scrape Canvas (or load the last snapshot), export to
the enabled targets, and fall back to a local JSON snapshot when no target
is enabled.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .config import Config
from .errors import ExportError
from .models import CanvasItem, RunStats, ScrapeStats
from .notion_export import export_to_notion
from .scraper import CanvasScraper
from .snapshot import DEFAULT_SNAPSHOT, load_items, save_items
from .todoist_export import export_to_todoist

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    """Phases of a sync run."""
    PENDING = "pending"
    SCRAPING = "scraping"
    LOADING_SNAPSHOT = "loading_snapshot"
    EXPORTING_TODOIST = "exporting_todoist"
    EXPORTING_NOTION = "exporting_notion"
    SAVING_SNAPSHOT = "saving_snapshot"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncService:
    """Runs the scrape -> export pipeline once."""

    def __init__(self, config: Config, dev: bool = False,
                 snapshot_path: str | Path = DEFAULT_SNAPSHOT,
                 session_id: Optional[str] = None,
                 scraper_factory: Optional[Callable[..., CanvasScraper]] = None):
        """
        Args:
            config: Run configuration
            dev: Visible browser for debugging
            snapshot_path: Where output.json is written/read
            session_id: Correlation id for this run's logs (generated if omitted)
            scraper_factory: Builds the scraper; tests substitute a fake
        """
        self.config = config
        self.dev = dev
        self.snapshot_path = Path(snapshot_path)
        self.stats = RunStats(session_id=session_id or str(uuid.uuid4()))
        self.status = SyncStatus.PENDING
        self.items: list[CanvasItem] = []
        self._scraper_factory = scraper_factory or CanvasScraper

    def _update_status(self, status: SyncStatus, message: str):
        self.status = status
        logger.info(f"Sync [{self.stats.session_id[:8]}]: {status.value} - {message}")

    def _scrape(self) -> list[CanvasItem]:
        self._update_status(SyncStatus.SCRAPING, "Scraping planner items from Canvas...")
        self.config.validate_for_scraping()
        scraper = self._scraper_factory(
            self.config, headless=not self.dev, stats=self.stats.scraping,
        )
        return scraper.run()

    def _export(self, items: list[CanvasItem]):
        targets = self.config.export_to

        if targets.todoist:
            self._update_status(SyncStatus.EXPORTING_TODOIST, f"Exporting {len(items)} items to Todoist...")
            try:
                export_to_todoist(items, self.config, self.stats.todoist)
            except ExportError as e:
                logger.error(f"Todoist export failed completely: {e}")
            except Exception as e:
                logger.error(f"Todoist export aborted by an unexpected error: {type(e).__name__}: {e}")

        if targets.notion:
            self._update_status(SyncStatus.EXPORTING_NOTION, f"Exporting {len(items)} items to Notion...")
            try:
                export_to_notion(items, self.config, self.stats.notion)
            except ExportError as e:
                logger.error(f"Notion export failed completely: {e}")
            except Exception as e:
                logger.error(f"Notion export aborted by an unexpected error: {type(e).__name__}: {e}")

        if not targets.any:
            self._update_status(SyncStatus.SAVING_SNAPSHOT, f"No export target enabled, saving to {self.snapshot_path}")
            save_items(items, self.snapshot_path)

    def run(self, skip_scraping: bool = False) -> RunStats:
        """Run the pipeline.

        Args:
            skip_scraping: Load items from the snapshot instead of Canvas

        Returns:
            The run's counters

        Raises:
            ConfigError / ScraperError: fatal problems, after logging them
        """
        logger.info(f"Starting Canvas sync (mode: {'development' if self.dev else 'production'})")
        logger.debug(f"Configuration: {self.config.redacted()}")

        try:
            if skip_scraping:
                self._update_status(SyncStatus.LOADING_SNAPSHOT, f"Loading items from {self.snapshot_path}")
                self.items = load_items(self.snapshot_path)
            else:
                self.items = self._scrape()

            logger.info(f"Found {len(self.items)} items in total")
            self._export(self.items)
        except Exception as e:
            self.stats.finished_at = datetime.now(timezone.utc)
            self._update_status(SyncStatus.FAILED, f"{type(e).__name__}: {e}")
            raise

        self.stats.finished_at = datetime.now(timezone.utc)
        self._update_status(SyncStatus.COMPLETED, self.summary())
        return self.stats

    def summary(self) -> str:
        parts = [f"{len(self.items)} items"]
        if self.stats.scraping != ScrapeStats():
            parts.append(f"scraping: {self.stats.scraping.summary()}")
        if self.config.export_to.todoist:
            parts.append(f"todoist: {self.stats.todoist.summary()}")
        if self.config.export_to.notion:
            parts.append(f"notion: {self.stats.notion.summary()}")
        parts.append(f"{self.stats.duration_seconds():.1f}s")
        return "; ".join(parts)

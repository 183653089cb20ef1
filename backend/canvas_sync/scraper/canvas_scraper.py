"""
Canvas Planner Scraper

This module handles:
- Canvas login via Selenium
- Navigation to the dashboard planner view
- Discovery of planner items (assignments, quizzes, announcements)
- Per-item extraction in an isolated browser tab

A failure on one planner item is logged and counted, never fatal to the
run. Failing to log in or to reach the planner aborts the run.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from ..config import Config
from ..errors import CanvasLoginError, CanvasNavigationError
from ..models import CanvasItem, DueDate, ItemKind, ScrapeStats
from .extractors import EXTRACTORS, classify_content, extract_class_name
from .selectors import SELECTORS, SELECTORS_VERSION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerLink:
    """A planner entry discovered on the dashboard."""
    index: int
    title: str
    href: str


class CanvasScraper:
    """Scraper for the Canvas dashboard planner."""

    # Bounded waits, in seconds
    LOGIN_USERNAME_TIMEOUT = 15
    LOGIN_CONTROL_TIMEOUT = 5
    POST_LOGIN_TIMEOUT = 30
    PLANNER_TIMEOUT = 30
    CONTENT_TIMEOUT = 20
    PAGE_LOAD_TIMEOUT = 60

    def __init__(self, config: Config, headless: bool = True,
                 stats: Optional[ScrapeStats] = None, driver=None):
        """Initialize the scraper.

        Args:
            config: Run configuration (Canvas URL and account)
            headless: Whether to run Chrome in headless mode
            stats: Counter sink for this run; a fresh one is created if omitted
            driver: Pre-built WebDriver (tests); built lazily when None
        """
        self.config = config
        self.headless = headless
        self.stats = stats if stats is not None else ScrapeStats()
        self.driver = driver

    def _setup_driver(self):
        """Set up Chrome WebDriver."""
        logger.info("Setting up Chrome options...")
        options = Options()
        if self.headless:
            options.add_argument("--headless=new")
            logger.info("Running in headless mode")
        else:
            logger.info("Running with a visible browser (development mode)")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--window-size=1920,1080")
        options.add_argument("--log-level=3")
        options.add_experimental_option('excludeSwitches', ['enable-logging'])

        logger.info("Installing/finding ChromeDriver...")
        service = Service(ChromeDriverManager().install())
        logger.info("Starting Chrome browser...")
        self.driver = webdriver.Chrome(service=service, options=options)
        self.driver.set_page_load_timeout(self.PAGE_LOAD_TIMEOUT)
        logger.info("Chrome WebDriver initialized successfully")

    def _wait_for_element(self, locator: tuple, timeout: int):
        """Wait for an element to be attached to the DOM."""
        return WebDriverWait(self.driver, timeout).until(
            EC.presence_of_element_located(locator)
        )

    def _wait_for_visible(self, locator: tuple, timeout: int):
        """Wait for an element to be visible."""
        return WebDriverWait(self.driver, timeout).until(
            EC.visibility_of_element_located(locator)
        )

    def _wait_for_invisible(self, locator: tuple, timeout: int):
        """Wait for an element to be hidden or removed."""
        return WebDriverWait(self.driver, timeout).until(
            EC.invisibility_of_element_located(locator)
        )

    def _page_title(self) -> str:
        try:
            return self.driver.title
        except WebDriverException:
            return "Unknown"

    def login(self):
        """Log in to Canvas with the configured account.

        Raises:
            CanvasLoginError: if Canvas cannot be loaded, the login form is
                missing, or the dashboard never appears after submitting
        """
        account = self.config.account
        selectors = SELECTORS["login"]

        logger.info(f"Navigating to Canvas at {self.config.url}...")
        try:
            self.driver.get(self.config.url)
        except WebDriverException as e:
            logger.error(f"Failed to load Canvas at {self.config.url}: {e}")
            raise CanvasLoginError(f"Could not load {self.config.url}") from e

        logger.info(
            f"Attempting Canvas login (username: "
            f"{'[PROVIDED]' if account.username else '[MISSING]'})"
        )
        try:
            username_field = self._wait_for_element(selectors["username"], self.LOGIN_USERNAME_TIMEOUT)
            password_field = self._wait_for_element(selectors["password"], self.LOGIN_CONTROL_TIMEOUT)
            submit_button = self._wait_for_element(selectors["submit"], self.LOGIN_CONTROL_TIMEOUT)
        except TimeoutException as e:
            logger.error(
                f"Canvas login form elements not found "
                f"(url: {self.driver.current_url}, title: {self._page_title()!r})"
            )
            raise CanvasLoginError("Canvas login form not found") from e

        username_field.clear()
        username_field.send_keys(account.username)
        password_field.clear()
        password_field.send_keys(account.password)
        submit_button.click()
        logger.info("Submitted login form")

        try:
            self._wait_for_element(SELECTORS["navigation"]["dashboard_link"], self.POST_LOGIN_TIMEOUT)
        except TimeoutException as e:
            logger.error(
                f"Dashboard link not found after login - invalid credentials or Canvas UI change "
                f"(url: {self.driver.current_url}, title: {self._page_title()!r})"
            )
            raise CanvasLoginError("Dashboard not reached after login") from e

        logger.info("Canvas login successful")

    def navigate_to_planner(self):
        """Make sure the dashboard planner is showing.

        Raises:
            CanvasNavigationError: if the planner view does not load
        """
        navigation = SELECTORS["navigation"]
        current_url = self.driver.current_url

        if current_url != self.config.url:
            logger.info(f"Not on the dashboard ({current_url}), clicking dashboard link")
            try:
                self.driver.find_element(*navigation["dashboard_link"]).click()
            except WebDriverException as e:
                logger.error(f"Failed to click dashboard link: {e}")
                raise CanvasNavigationError("Could not open the dashboard") from e

        try:
            self._wait_for_element(navigation["planner_button"], self.PLANNER_TIMEOUT)
        except TimeoutException as e:
            logger.error(
                f"Planner button not found after dashboard navigation "
                f"(url: {self.driver.current_url}, title: {self._page_title()!r})"
            )
            raise CanvasNavigationError("Planner view not found") from e

        logger.info("Accessing Canvas planner view")

    def discover_items(self) -> list[PlannerLink]:
        """Collect every planner item link, in page order.

        An empty planner is not an error: it may just mean nothing is due.
        """
        locator = SELECTORS["planner"]["items"]
        elements = self.driver.find_elements(*locator)

        links = []
        for i, element in enumerate(elements, 1):
            href = element.get_dom_attribute("href") or element.get_attribute("href")
            if not href:
                logger.warning(f"Planner item {i} has no href, ignoring it")
                continue
            try:
                title = " ".join(element.text.split()) or f"Item {i}"
            except WebDriverException:
                title = f"Item {i}"
            links.append(PlannerLink(index=i, title=title, href=href))

        self.stats.total_items = len(links)
        logger.info(f"Discovered {len(links)} planner items")
        if not links:
            logger.warning(
                f"No planner items found - no outstanding work or a Canvas UI change "
                f"(selector: {locator[1]}, url: {self.driver.current_url})"
            )
        return links

    @contextmanager
    def isolated_page(self):
        """Open a new browser tab for the duration of the block.

        The tab is always closed and focus returned to the planner tab,
        whatever happens inside the block.
        """
        main_handle = self.driver.current_window_handle
        self.driver.switch_to.new_window("tab")
        try:
            yield
        finally:
            try:
                self.driver.close()
            except WebDriverException as e:
                logger.warning(f"Failed to close item tab: {e}")
            self.driver.switch_to.window(main_handle)

    def _wait_for_content(self):
        """Wait until the item's main content has rendered."""
        content = SELECTORS["content"]
        self._wait_for_element(content["main"], self.CONTENT_TIMEOUT)
        self._wait_for_element(content["main_children"], self.CONTENT_TIMEOUT)
        self._wait_for_visible(content["main"], self.CONTENT_TIMEOUT)

        if self.driver.find_elements(*content["spinner"]):
            logger.info(f"Waiting for content spinner to disappear ({self.driver.current_url})")
            self._wait_for_invisible(content["spinner"], self.CONTENT_TIMEOUT)

    def scrape_item(self, link: PlannerLink) -> Optional[CanvasItem]:
        """Load one planner item in the current tab and extract it.

        Returns:
            The extracted item, or None if the page is not a known type
        """
        url = urljoin(self.config.url, link.href)
        self.driver.get(url)
        self._wait_for_content()

        soup = BeautifulSoup(self.driver.page_source, "html.parser")
        class_name = extract_class_name(soup)

        content_type = classify_content(soup)
        extractor = EXTRACTORS.get(content_type)
        if extractor is None:
            self.stats.skipped += 1
            logger.info(f"Skipping item {link.index} ({link.title!r}): unrecognized content at {url}")
            return None

        fields = extractor(soup)
        kind = ItemKind(content_type.value)
        self.stats.record_kind(kind)
        return CanvasItem(
            title=fields.title,
            due_date=DueDate(fields.due_date),
            description=fields.description,
            class_name=class_name,
            source_url=self.driver.current_url or url,
            kind=kind,
        )

    def scrape_items(self, links: list[PlannerLink]) -> list[CanvasItem]:
        """Scrape every planner link, one at a time, in discovery order."""
        items = []
        total = len(links)

        for link in links:
            logger.info(f"Scraping item {link.index}/{total}: {link.title}")
            try:
                with self.isolated_page():
                    item = self.scrape_item(link)
                if item is not None:
                    items.append(item)
                    self.stats.processed_items += 1
                    logger.info(f"  -> {item.kind.value}: {item.title!r} ({item.class_name}), due {item.due_date.text!r}")
            except Exception as e:
                self.stats.errors += 1
                logger.error(
                    f"Failed to scrape item {link.index}/{total} ({link.title!r}, "
                    f"{urljoin(self.config.url, link.href)}): {type(e).__name__}: {e}"
                )

        return items

    def run(self) -> list[CanvasItem]:
        """Run the full scrape: login, planner, items.

        The browser is always closed and final counters logged, even if a
        fatal error is raised.
        """
        logger.info(f"Starting Canvas scrape (selectors {SELECTORS_VERSION})")
        try:
            if self.driver is None:
                self._setup_driver()
            self.login()
            self.navigate_to_planner()
            links = self.discover_items()
            items = self.scrape_items(links)
            logger.info(f"Scraping completed: {len(items)} items extracted")
            return items
        finally:
            self.close()
            logger.info(f"Canvas scraping session finished: {self.stats.summary()}")

    def close(self):
        """Close the browser."""
        if self.driver:
            try:
                self.driver.quit()
                logger.info("Browser closed")
            except WebDriverException as e:
                logger.error(f"Browser cleanup failed: {e}")
            finally:
                self.driver = None

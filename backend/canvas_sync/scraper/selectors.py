"""
Canvas selector registry.

Every locator the scraper and extractors use lives here, as a Selenium
(By, value) tuple. When Canvas changes its markup this is the only file
that should need editing.

All locators use the CSS strategy so the same value can be applied to the
live page (driver.find_element(*locator)) and to a BeautifulSoup snapshot
of it (soup.select_one(locator[1])).
"""

from selenium.webdriver.common.by import By

SELECTORS_VERSION = "2025.09"

SELECTORS = {
    "login": {
        "username": (By.CSS_SELECTOR, 'input[id="username"]'),
        "password": (By.CSS_SELECTOR, 'input[id="password"]'),
        "submit": (By.CSS_SELECTOR, 'button[type="submit"]'),
    },
    "navigation": {
        "dashboard_link": (By.CSS_SELECTOR, 'a[id="global_nav_dashboard_link"]'),
        "planner_button": (By.CSS_SELECTOR, 'button[id="planner-today-btn"]'),
    },
    "planner": {
        "items": (By.CSS_SELECTOR, "div[class*='planner-item'] a[class*='view-link']"),
    },
    "content": {
        "main": (By.CSS_SELECTOR, "#content"),
        "main_children": (By.CSS_SELECTOR, "#content > *"),
        "spinner": (By.CSS_SELECTOR, "#content div[class*='spinner']"),
    },
    "breadcrumbs": {
        "class_name": (
            By.CSS_SELECTOR,
            "#breadcrumbs > ul:nth-child(1) > li:nth-child(2) > a:nth-child(1) > span:nth-child(1)",
        ),
        "first_level": (
            By.CSS_SELECTOR,
            "#breadcrumbs > ul:nth-child(1) > li:nth-child(1) > a:nth-child(1) > span:nth-child(1)",
        ),
    },
    # Per-kind sections: "marker" identifies the content type, the rest are fields
    "assignment": {
        "marker": (By.CSS_SELECTOR, "#assignment-student-header-content"),
        "title": (By.CSS_SELECTOR, '#assignment-student-header-content [data-testid="title"]'),
        "due_date": (By.CSS_SELECTOR, '[data-testid="due-date"]'),
        "description": (
            By.CSS_SELECTOR,
            'div[data-testid="assignments-2-assignment-toggle-details-text"]',
        ),
    },
    "quiz": {
        "marker": (By.CSS_SELECTOR, "div[id='quiz_show']"),
        "title": (By.CSS_SELECTOR, 'h1[id="quiz_title"]'),
        "due_date": (
            By.CSS_SELECTOR,
            "#quiz_student_details > li:nth-child(1) > span:nth-child(2) > span:nth-child(1)",
        ),
    },
    "discussion": {
        "marker": (By.CSS_SELECTOR, "a[class='discussion-reply-action discussion-reply-box']"),
        "title": (By.CSS_SELECTOR, "h1[class='discussion-title']"),
        "due_date": (By.CSS_SELECTOR, "div[class='discussion-pubdate']"),
        "description": (By.CSS_SELECTOR, "div[class='discussion-section message_wrapper']"),
    },
}

# Breadcrumb text that marks an announcement page
ANNOUNCEMENTS_CRUMB = "Announcements"


def get_selector_context(page_type: str) -> dict:
    """Return the locator group for a page type (e.g. 'login', 'quiz').

    Raises:
        ValueError: if the page type is unknown
    """
    try:
        return SELECTORS[page_type]
    except KeyError:
        raise ValueError(f"Unknown page type: {page_type}") from None


def css(locator: tuple) -> str:
    """CSS string of a locator, for use against a BeautifulSoup snapshot."""
    by, value = locator
    if by != By.CSS_SELECTOR:
        raise ValueError(f"Locator {locator!r} is not a CSS selector")
    return value

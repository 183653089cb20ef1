"""Scrape Canvas planner items and sync them to Todoist and Notion."""

__version__ = "0.1.0"

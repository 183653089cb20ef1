"""
Notion API client.

Covers only what the exporter needs: query a database, create a page and
update a page. Pure HTTP (requests library).
"""

import logging

import requests

from .errors import ApiError

logger = logging.getLogger(__name__)

NOTION_BASE_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"


class NotionClient:
    """Client for the Notion public API."""

    def __init__(self, token: str, base_url: str = NOTION_BASE_URL, timeout: int = 30):
        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"
        self.session.headers["Notion-Version"] = NOTION_VERSION
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Notion {method} {path} failed: {e}") from e
        if not resp.ok:
            raise ApiError(f"Notion {method} {path} failed", resp.status_code, resp.text[:500])
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"Notion {method} {path} returned invalid JSON", resp.status_code) from e

    def query_database(self, database_id: str, filter: dict | None = None) -> list[dict]:
        """Query every page of a database, following has_more/next_cursor."""
        pages = []
        body = {"page_size": 100}
        if filter:
            body["filter"] = filter

        while True:
            data = self._request("POST", f"databases/{database_id}/query", json=body)
            pages.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                break
            body["start_cursor"] = data["next_cursor"]

        logger.debug(f"Notion: fetched {len(pages)} pages from database {database_id}")
        return pages

    def create_page(self, database_id: str, properties: dict) -> dict:
        """Create a page (row) in a database."""
        return self._request("POST", "pages", json={
            "parent": {"database_id": database_id},
            "properties": properties,
        })

    def update_page(self, page_id: str, properties: dict) -> dict:
        """Overwrite properties of an existing page."""
        return self._request("PATCH", f"pages/{page_id}", json={"properties": properties})

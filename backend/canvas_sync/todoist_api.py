"""
Todoist REST API client.

Covers only what the exporter needs: list tasks, list projects, create a
task and update a task. Pure HTTP (requests library).
"""

import logging

import requests

from .errors import ApiError
from .models import RemoteProject, RemoteTask

logger = logging.getLogger(__name__)

TODOIST_BASE_URL = "https://api.todoist.com/api/v1"


class TodoistClient:
    """Client for the Todoist API (v1)."""

    def __init__(self, token: str, base_url: str = TODOIST_BASE_URL, timeout: int = 30):
        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Todoist {method} {path} failed: {e}") from e
        if not resp.ok:
            raise ApiError(f"Todoist {method} {path} failed", resp.status_code, resp.text[:500])
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"Todoist {method} {path} returned invalid JSON", resp.status_code) from e

    def _paginate(self, path: str, params: dict | None = None) -> list:
        """Follow next_cursor pagination. Returns all results across pages."""
        results = []
        params = dict(params or {})

        while True:
            data = self._request("GET", path, params=params)
            if isinstance(data, list):
                # Older endpoints return a bare list without pagination
                results.extend(data)
                break
            results.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not cursor:
                break
            params["cursor"] = cursor

        return results

    def get_tasks(self) -> list[RemoteTask]:
        """Get all active tasks."""
        tasks = [RemoteTask.from_api(t) for t in self._paginate("tasks", {"limit": 200})]
        logger.debug(f"Todoist: fetched {len(tasks)} tasks")
        return tasks

    def get_projects(self) -> list[RemoteProject]:
        """Get all projects."""
        projects = [RemoteProject.from_api(p) for p in self._paginate("projects", {"limit": 200})]
        logger.debug(f"Todoist: fetched {len(projects)} projects")
        return projects

    def add_task(self, payload: dict) -> RemoteTask:
        """Create a task."""
        return RemoteTask.from_api(self._request("POST", "tasks", json=payload))

    def update_task(self, task_id: str, payload: dict) -> RemoteTask | None:
        """Update fields of an existing task."""
        data = self._request("POST", f"tasks/{task_id}", json=payload)
        return RemoteTask.from_api(data) if data else None

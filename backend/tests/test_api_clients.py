"""Tests for the Todoist and Notion HTTP clients, with requests mocked out."""

from unittest.mock import MagicMock

import pytest
import requests

from canvas_sync.errors import ApiError
from canvas_sync.notion_api import NOTION_VERSION, NotionClient
from canvas_sync.todoist_api import TodoistClient


def response(data=None, status=200, text=""):
    resp = MagicMock()
    resp.ok = status < 400
    resp.status_code = status
    resp.text = text
    resp.content = b"{}" if data is not None else b""
    resp.json.return_value = data
    return resp


class TestTodoistClient:
    def test_auth_header(self):
        client = TodoistClient("tk")
        assert client.session.headers["Authorization"] == "Bearer tk"

    def test_tasks_follow_cursor(self):
        client = TodoistClient("tk")
        client.session.request = MagicMock(side_effect=[
            response({"results": [{"id": 1, "content": "A"}], "next_cursor": "c2"}),
            response({"results": [{"id": 2, "content": "B", "checked": True}], "next_cursor": None}),
        ])
        tasks = client.get_tasks()
        assert [t.id for t in tasks] == ["1", "2"]
        assert tasks[1].is_completed
        second_params = client.session.request.call_args_list[1].kwargs["params"]
        assert second_params["cursor"] == "c2"

    def test_bare_list_response(self):
        client = TodoistClient("tk")
        client.session.request = MagicMock(return_value=response([{"id": "p1", "name": "ATLS"}]))
        assert client.get_projects()[0].name == "ATLS"

    def test_http_error(self):
        client = TodoistClient("tk")
        client.session.request = MagicMock(return_value=response(status=403, text="forbidden"))
        with pytest.raises(ApiError) as exc:
            client.add_task({"content": "A"})
        assert exc.value.status_code == 403
        assert exc.value.body == "forbidden"
        assert "status 403" in str(exc.value)

    def test_network_error(self):
        client = TodoistClient("tk")
        client.session.request = MagicMock(side_effect=requests.exceptions.ConnectionError("down"))
        with pytest.raises(ApiError):
            client.get_tasks()

    def test_update_with_empty_body(self):
        client = TodoistClient("tk")
        client.session.request = MagicMock(return_value=response(None, status=204))
        assert client.update_task("1", {"description": "d"}) is None


class TestNotionClient:
    def test_headers(self):
        client = NotionClient("nk")
        assert client.session.headers["Notion-Version"] == NOTION_VERSION
        assert client.session.headers["Authorization"] == "Bearer nk"

    def test_query_follows_has_more(self):
        client = NotionClient("nk")
        client.session.request = MagicMock(side_effect=[
            response({"results": [{"id": "p1"}], "has_more": True, "next_cursor": "c2"}),
            response({"results": [{"id": "p2"}], "has_more": False, "next_cursor": None}),
        ])
        pages = client.query_database("db-1", filter={"property": "Due Date"})
        assert [p["id"] for p in pages] == ["p1", "p2"]
        body = client.session.request.call_args_list[1].kwargs["json"]
        assert body["start_cursor"] == "c2"
        assert body["filter"] == {"property": "Due Date"}

    def test_update_uses_patch(self):
        client = NotionClient("nk")
        client.session.request = MagicMock(return_value=response({"id": "p1"}))
        client.update_page("p1", {"Title": {}})
        method, url = client.session.request.call_args.args
        assert method == "PATCH"
        assert url.endswith("/pages/p1")

    def test_invalid_json(self):
        client = NotionClient("nk")
        resp = response({})
        resp.json.side_effect = ValueError("no json")
        client.session.request = MagicMock(return_value=resp)
        with pytest.raises(ApiError):
            client.create_page("db-1", {})

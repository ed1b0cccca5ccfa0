import http.client
import json
import socket
import urllib.error
import urllib.parse
from typing import Any
from unittest.mock import patch

import pytest

from notion_api.client import NotionClient
from notion_api.errors import (
    NotionAPIError,
    NotionResponseError,
    NotionTransportError,
    NotionValidationError,
)
from notion_api.models import Settings
from tests.conftest import PAGE_ID, PAGE_UUID, http_error, json_response, raw_response


def sent_request(mock_urlopen: Any):
    """The urllib.request.Request passed to the (single) urlopen call."""
    assert mock_urlopen.call_count == 1
    return mock_urlopen.call_args.args[0]


def sent_body(mock_urlopen: Any) -> Any:
    data = sent_request(mock_urlopen).data
    return None if data is None else json.loads(data.decode("utf-8"))


def sent_query(mock_urlopen: Any) -> dict[str, list[str]]:
    url = sent_request(mock_urlopen).full_url
    return urllib.parse.parse_qs(urllib.parse.urlsplit(url).query)


class TestTransport:
    def test_headers_are_applied(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({"object": "user"})) as mock_urlopen:
            client.get_me()

        request = sent_request(mock_urlopen)
        assert request.full_url == "https://api.notion.com/v1/users/me"
        assert request.get_method() == "GET"
        assert request.get_header("Authorization") == "Bearer secret_test"
        assert request.get_header("Notion-version") == "2022-06-28"
        assert request.get_header("Content-type") == "application/json"
        assert request.data is None

    def test_custom_base_url_and_version(self) -> None:
        client = NotionClient(Settings(api_key="k", base_url="http://localhost:9000", api_version="2025-09-03"))
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.get_me()

        request = sent_request(mock_urlopen)
        assert request.full_url == "http://localhost:9000/v1/users/me"
        assert request.get_header("Notion-version") == "2025-09-03"

    def test_success_body_passes_through(self, client: NotionClient) -> None:
        payload = {"object": "page", "id": PAGE_UUID, "brand_new_field": {"x": 1}}
        with patch("urllib.request.urlopen", return_value=json_response(payload)):
            assert client.get_page(PAGE_ID) == payload

    def test_http_error_with_message(self, client: NotionClient) -> None:
        error = http_error(404, {
            "object": "error",
            "status": 404,
            "code": "object_not_found",
            "message": "Could not find page",
            "request_id": "req-123",
        })
        with patch("urllib.request.urlopen", side_effect=error):
            with pytest.raises(NotionAPIError) as exc_info:
                client.get_page(PAGE_ID)

        err = exc_info.value
        assert err.status == 404
        assert err.message == "Could not find page"
        assert err.endpoint == f"/v1/pages/{PAGE_UUID}"
        assert err.request_id == "req-123"
        assert str(err) == (
            "Notion API error: 404 - Could not find page\n"
            f"Endpoint: /v1/pages/{PAGE_UUID}\n"
            "Request ID: req-123"
        )

    def test_http_error_without_message_uses_raw_body(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", side_effect=http_error(502, b"Bad Gateway")):
            with pytest.raises(NotionAPIError) as exc_info:
                client.get_me()

        assert exc_info.value.status == 502
        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.request_id is None
        assert "Request ID: unknown" in str(exc_info.value)

    def test_http_error_json_without_message_field(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", side_effect=http_error(500, {"code": "internal"})):
            with pytest.raises(NotionAPIError) as exc_info:
                client.get_me()
        assert json.loads(exc_info.value.message) == {"code": "internal"}

    def test_transport_failure(self, client: NotionClient) -> None:
        cause = urllib.error.URLError(socket.gaierror("Name or service not known"))
        with patch("urllib.request.urlopen", side_effect=cause):
            with pytest.raises(NotionTransportError) as exc_info:
                client.get_me()
        assert "/v1/users/me" in str(exc_info.value)
        assert exc_info.value.__cause__ is cause

    def test_timeout_is_transport_failure(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", side_effect=socket.timeout("timed out")):
            with pytest.raises(NotionTransportError, match="timed out"):
                client.get_me()

    def test_non_json_success_body(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=raw_response(b"<html>")):
            with pytest.raises(NotionResponseError):
                client.get_me()

    def test_non_utf8_success_body(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=raw_response(b"\xff\xfe")):
            with pytest.raises(NotionResponseError) as exc_info:
                client.get_me()
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_bad_status_line_is_transport_failure(self, client: NotionClient) -> None:
        cause = http.client.BadStatusLine("garbage")
        with patch("urllib.request.urlopen", side_effect=cause):
            with pytest.raises(NotionTransportError) as exc_info:
                client.get_me()
        assert exc_info.value.__cause__ is cause

    def test_truncated_body_is_transport_failure(self, client: NotionClient) -> None:
        response = raw_response(b"")
        response.read.side_effect = http.client.IncompleteRead(b'{"obj', 20)
        with patch("urllib.request.urlopen", return_value=response):
            with pytest.raises(NotionTransportError, match="/v1/users/me"):
                client.get_me()

    def test_no_retry_on_failure(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", side_effect=http_error(429, {"message": "slow down"})) as mock_urlopen:
            with pytest.raises(NotionAPIError):
                client.get_me()
        assert mock_urlopen.call_count == 1


class TestValidationBeforeDispatch:
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.get_page("bad"),
            lambda c: c.update_page("bad", archived=True),
            lambda c: c.get_database("bad"),
            lambda c: c.query_database("bad"),
            lambda c: c.create_database("bad", [], {}),
            lambda c: c.get_block("bad"),
            lambda c: c.get_block_children("bad"),
            lambda c: c.append_block_children("bad", []),
            lambda c: c.get_comments("bad"),
            lambda c: c.create_comment([], page_id="bad"),
            lambda c: c.create_page({"type": "page_id", "page_id": "bad"}, {}),
            lambda c: c.create_page({"type": "database_id", "database_id": "bad"}, {}),
        ],
    )
    def test_invalid_id_never_hits_network(self, client: NotionClient, call) -> None:
        with patch("urllib.request.urlopen") as mock_urlopen:
            with pytest.raises(NotionValidationError, match="Invalid Notion ID format: bad"):
                call(client)
        mock_urlopen.assert_not_called()

    def test_create_page_rejects_unknown_parent_type(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen") as mock_urlopen:
            with pytest.raises(NotionValidationError, match="Invalid parent type"):
                client.create_page({"type": "workspace"}, {})
        mock_urlopen.assert_not_called()

    @pytest.mark.parametrize("user_id", ["", "   ", "\t\n"])
    def test_blank_user_id_never_hits_network(self, client: NotionClient, user_id: str) -> None:
        with patch("urllib.request.urlopen") as mock_urlopen:
            with pytest.raises(NotionValidationError, match="User ID cannot be empty"):
                client.get_user(user_id)
        mock_urlopen.assert_not_called()

    def test_create_comment_needs_a_target(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen") as mock_urlopen:
            with pytest.raises(NotionValidationError):
                client.create_comment([])
            with pytest.raises(NotionValidationError):
                client.create_comment([], page_id=PAGE_ID, block_id=PAGE_ID)
        mock_urlopen.assert_not_called()


class TestOperations:
    def test_list_users(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({"results": []})) as mock_urlopen:
            client.list_users(start_cursor="abc")
        assert sent_query(mock_urlopen) == {"start_cursor": ["abc"], "page_size": ["100"]}

    def test_list_users_without_cursor(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({"results": []})) as mock_urlopen:
            client.list_users()
        assert sent_query(mock_urlopen) == {"page_size": ["100"]}

    def test_get_user_quotes_id(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.get_user("user/1")
        assert sent_request(mock_urlopen).full_url.endswith("/v1/users/user%2F1")

    def test_search_drops_empty_keys(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({"results": []})) as mock_urlopen:
            client.search(filter={"property": "object", "value": "page"}, page_size=100)

        request = sent_request(mock_urlopen)
        assert request.get_method() == "POST"
        assert request.full_url == "https://api.notion.com/v1/search"
        assert sent_body(mock_urlopen) == {
            "filter": {"property": "object", "value": "page"},
            "page_size": 100,
        }

    def test_create_page_normalizes_parent(self, client: NotionClient) -> None:
        parent = {"type": "database_id", "database_id": PAGE_ID}
        with patch("urllib.request.urlopen", return_value=json_response({"object": "page"})) as mock_urlopen:
            client.create_page(parent, {"Name": {"title": []}})

        body = sent_body(mock_urlopen)
        assert body["parent"] == {"type": "database_id", "database_id": PAGE_UUID}
        assert "children" not in body
        assert parent["database_id"] == PAGE_ID

    def test_update_page(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.update_page(PAGE_ID, archived=True)

        request = sent_request(mock_urlopen)
        assert request.get_method() == "PATCH"
        assert request.full_url.endswith(f"/v1/pages/{PAGE_UUID}")
        assert sent_body(mock_urlopen) == {"archived": True}

    def test_create_database(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.create_database(PAGE_ID, [{"type": "text", "text": {"content": "T"}}], {"Name": {"title": {}}})

        assert sent_body(mock_urlopen) == {
            "parent": {"type": "page_id", "page_id": PAGE_UUID},
            "title": [{"type": "text", "text": {"content": "T"}}],
            "properties": {"Name": {"title": {}}},
        }

    def test_query_database(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.query_database(PAGE_ID, filter={"property": "Done", "checkbox": {"equals": True}})

        request = sent_request(mock_urlopen)
        assert request.full_url.endswith(f"/v1/databases/{PAGE_UUID}/query")
        assert sent_body(mock_urlopen) == {"filter": {"property": "Done", "checkbox": {"equals": True}}}

    def test_get_block_children_uses_query_string(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.get_block_children(PAGE_ID, start_cursor="next", page_size=10)

        request = sent_request(mock_urlopen)
        assert request.get_method() == "GET"
        assert request.data is None
        assert sent_query(mock_urlopen) == {"start_cursor": ["next"], "page_size": ["10"]}

    def test_append_block_children(self, client: NotionClient) -> None:
        children = [{"object": "block", "type": "divider", "divider": {}}]
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.append_block_children(PAGE_ID, children)

        assert sent_request(mock_urlopen).get_method() == "PATCH"
        assert sent_body(mock_urlopen) == {"children": children}

    def test_get_comments(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.get_comments(PAGE_ID)
        assert sent_query(mock_urlopen) == {"block_id": [PAGE_UUID], "page_size": ["100"]}

    def test_create_comment_on_block(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.create_comment([{"type": "text", "text": {"content": "hi"}}], block_id=PAGE_ID)
        assert sent_body(mock_urlopen)["parent"] == {"block_id": PAGE_UUID}

    def test_create_comment_in_discussion(self, client: NotionClient) -> None:
        with patch("urllib.request.urlopen", return_value=json_response({})) as mock_urlopen:
            client.create_comment([{"type": "text", "text": {"content": "hi"}}], discussion_id="disc-1")

        body = sent_body(mock_urlopen)
        assert body["discussion_id"] == "disc-1"
        assert "parent" not in body

# =============================================================================
# notion_api/client.py  —  Notion REST API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   NotionClient is the single point of contact with https://api.notion.com.
#   Each public method is one Notion operation, and each operation is
#   exactly ONE HTTP round trip.  No caching, no retries, no batching.
#
# HOW A CALL FLOWS:
#   1. Any page / block / database ID is normalized (identifiers.py).
#      A bad ID raises NotionValidationError here, before step 2.
#   2. An ApiRequest (method, path, body, query) is built in full.
#   3. _send() attaches the auth + version headers, serializes the body
#      and performs the request with urllib.
#   4. 2xx  → parsed JSON returned as-is (unknown fields pass through)
#      4xx/5xx → NotionAPIError with status, message, endpoint, request id
#      no response → NotionTransportError wrapping the cause
#
# HEADERS:
#   Authorization, Notion-Version and the JSON content headers are the same
#   for every request and cannot be changed per call.
# =============================================================================

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from notion_api.errors import (
    NotionAPIError,
    NotionResponseError,
    NotionTransportError,
    NotionValidationError,
)
from notion_api.identifiers import normalize_notion_id
from notion_api.models import ApiRequest, Settings
from notion_api.payloads import DEFAULT_PAGE_SIZE


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


class NotionClient:
    """Thin, stateless wrapper over the Notion REST API."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Notion-Version": self._settings.api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def build_url(self, request: ApiRequest) -> str:
        url = f"{self._settings.base_url}{request.path}"
        query = _drop_none(request.query)
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        return url

    def request(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send one request to Notion and return the parsed JSON body."""
        return self._send(ApiRequest(method=method, path=path, body=body, query=query or {}))

    def _send(self, request: ApiRequest) -> dict[str, Any]:
        data = None
        if request.body is not None and request.method != "GET":
            data = json.dumps(request.body).encode("utf-8")

        http_request = urllib.request.Request(
            self.build_url(request),
            data=data,
            headers=self._headers(),
            method=request.method,
        )

        try:
            with urllib.request.urlopen(http_request) as response:
                payload = response.read()
        except urllib.error.HTTPError as e:
            raise self._api_error(e, request.path) from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            reason = getattr(e, "reason", None) or repr(e)
            raise NotionTransportError(
                f"Network error calling Notion API {request.path}: {reason}"
            ) from e

        try:
            raw = payload.decode("utf-8")
            if not raw.strip():
                return {}
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise NotionResponseError(
                f"Notion API returned a non-JSON response for {request.path}: {payload[:200]!r}"
            ) from e

    @staticmethod
    def _api_error(error: urllib.error.HTTPError, endpoint: str) -> NotionAPIError:
        """Translate an HTTPError into a NotionAPIError and log the details."""
        try:
            raw = error.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""

        try:
            body = json.loads(raw) if raw else None
        except json.JSONDecodeError:
            body = None

        message = raw or str(error.reason)
        request_id = None
        if isinstance(body, dict):
            message = body.get("message") or raw
            request_id = body.get("request_id")

        logging.error(
            "Notion API error: status=%s endpoint=%s request_id=%s body=%s",
            error.code, endpoint, request_id, raw,
        )
        return NotionAPIError(
            status=error.code,
            message=message,
            endpoint=endpoint,
            request_id=request_id,
            body=body if body is not None else raw,
        )

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------
    def get_me(self) -> dict[str, Any]:
        """The bot user behind the current integration token."""
        return self.request("GET", "/v1/users/me")

    def list_users(
        self, start_cursor: Optional[str] = None, page_size: Optional[int] = DEFAULT_PAGE_SIZE
    ) -> dict[str, Any]:
        return self.request(
            "GET", "/v1/users",
            query={"start_cursor": start_cursor, "page_size": page_size},
        )

    def get_user(self, user_id: str) -> dict[str, Any]:
        user_id = (user_id or "").strip()
        if not user_id:
            raise NotionValidationError("User ID cannot be empty")
        return self.request("GET", f"/v1/users/{_quote(user_id)}")

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------
    def search(
        self,
        query: Optional[str] = None,
        filter: Optional[dict[str, Any]] = None,
        sort: Optional[dict[str, Any]] = None,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> dict[str, Any]:
        """Search pages and databases shared with the integration."""
        body = _drop_none({
            "query": query,
            "filter": filter,
            "sort": sort,
            "start_cursor": start_cursor,
            "page_size": page_size,
        })
        return self.request("POST", "/v1/search", body=body)

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------
    def get_page(self, page_id: str) -> dict[str, Any]:
        page_id = normalize_notion_id(page_id)
        return self.request("GET", f"/v1/pages/{page_id}")

    def create_page(
        self,
        parent: dict[str, Any],
        properties: dict[str, Any],
        children: Optional[list[dict[str, Any]]] = None,
        icon: Optional[dict[str, Any]] = None,
        cover: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Create a page under a page or a database.

        ``parent`` is ``{"type": "page_id" | "database_id", <type>: <id>}``.
        The parent ID is normalized; the caller's dict is not modified.
        """
        parent_type = parent.get("type")
        if parent_type not in ("page_id", "database_id"):
            raise NotionValidationError(
                f"Invalid parent type: {parent_type!r}. Expected 'page_id' or 'database_id'."
            )
        parent = dict(parent)
        parent[parent_type] = normalize_notion_id(parent.get(parent_type, ""))

        body = _drop_none({
            "parent": parent,
            "properties": properties,
            "children": children,
            "icon": icon,
            "cover": cover,
        })
        return self.request("POST", "/v1/pages", body=body)

    def update_page(
        self,
        page_id: str,
        properties: Optional[dict[str, Any]] = None,
        archived: Optional[bool] = None,
        icon: Optional[dict[str, Any]] = None,
        cover: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        page_id = normalize_notion_id(page_id)
        body = _drop_none({
            "properties": properties,
            "archived": archived,
            "icon": icon,
            "cover": cover,
        })
        return self.request("PATCH", f"/v1/pages/{page_id}", body=body)

    # -------------------------------------------------------------------------
    # Databases
    # -------------------------------------------------------------------------
    def get_database(self, database_id: str) -> dict[str, Any]:
        database_id = normalize_notion_id(database_id)
        return self.request("GET", f"/v1/databases/{database_id}")

    def create_database(
        self,
        parent_page_id: str,
        title: list[dict[str, Any]],
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        """Create a database inside a page.  ``title`` is a rich text array."""
        body = {
            "parent": {"type": "page_id", "page_id": normalize_notion_id(parent_page_id)},
            "title": title,
            "properties": properties,
        }
        return self.request("POST", "/v1/databases", body=body)

    def query_database(
        self,
        database_id: str,
        filter: Optional[dict[str, Any]] = None,
        sorts: Optional[list[Any]] = None,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> dict[str, Any]:
        database_id = normalize_notion_id(database_id)
        body = _drop_none({
            "filter": filter,
            "sorts": sorts,
            "start_cursor": start_cursor,
            "page_size": page_size,
        })
        return self.request("POST", f"/v1/databases/{database_id}/query", body=body)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------
    def get_block(self, block_id: str) -> dict[str, Any]:
        block_id = normalize_notion_id(block_id)
        return self.request("GET", f"/v1/blocks/{block_id}")

    def get_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> dict[str, Any]:
        block_id = normalize_notion_id(block_id)
        return self.request(
            "GET", f"/v1/blocks/{block_id}/children",
            query={"start_cursor": start_cursor, "page_size": page_size},
        )

    def append_block_children(
        self, block_id: str, children: list[dict[str, Any]]
    ) -> dict[str, Any]:
        block_id = normalize_notion_id(block_id)
        return self.request(
            "PATCH", f"/v1/blocks/{block_id}/children", body={"children": children}
        )

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------
    def get_comments(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Unresolved comments on a page or block."""
        block_id = normalize_notion_id(block_id)
        return self.request(
            "GET", "/v1/comments",
            query={"block_id": block_id, "start_cursor": start_cursor, "page_size": page_size},
        )

    def create_comment(
        self,
        rich_text: list[dict[str, Any]],
        page_id: Optional[str] = None,
        block_id: Optional[str] = None,
        discussion_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Comment on a page or block, or reply inside an existing discussion.

        With ``discussion_id`` the comment joins that thread and no parent is
        sent.  Otherwise exactly one of ``page_id`` / ``block_id`` is needed.
        """
        body: dict[str, Any] = {"rich_text": rich_text}
        if discussion_id:
            body["discussion_id"] = discussion_id
        elif page_id and block_id:
            raise NotionValidationError("Give either page_id or block_id for a comment, not both")
        elif page_id:
            body["parent"] = {"page_id": normalize_notion_id(page_id)}
        elif block_id:
            body["parent"] = {"block_id": normalize_notion_id(block_id)}
        else:
            raise NotionValidationError(
                "A comment needs a page_id, a block_id or a discussion_id"
            )
        return self.request("POST", "/v1/comments", body=body)

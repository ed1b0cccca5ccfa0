# =============================================================================
# notion_mcp/server.py  —  FastMCP Tool Server (ALL Notion tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool the agent can call.  Each tool is a thin wrapper
#   around one NotionClient method: it reshapes flat parameters into the
#   nested body Notion expects (notion_api/payloads.py), makes the call, and
#   returns the response as text.
#
# HOW IT WORKS (the flow):
#   1. The agent host calls a tool by name over stdio (e.g., "get-page")
#   2. FastMCP validates the parameters against the declared schema
#   3. The tool function builds the request and calls NotionClient
#   4. The JSON response (or an error message) comes back as one text item
#
# ERRORS ARE CONTENT:
#   A tool never raises to the host.  Validation errors, Notion API errors
#   and network errors are all caught here and returned as
#   "Error <action>: <message>" so the agent can read them and react
#   (fix the ID, pick another page, tell the user...).
#
# ENABLEMENT:
#   build_server() consults TOOL_CONFIG (notion_api/config.py).  A tool set
#   to False is never registered, so the agent never even sees it.
# =============================================================================

import logging
import sys
from typing import Annotated, Any, Callable, Literal, Mapping, Optional

from fastmcp import FastMCP
from pydantic import Field

from notion_api.client import NotionClient
from notion_api.config import TOOL_CONFIG, is_tool_enabled
from notion_api.payloads import (
    DEFAULT_PAGE_SIZE,
    all_pages_params,
    database_properties,
    emoji_icon,
    external_file,
    page_children,
    page_parent,
    page_properties,
    pages_summary,
    paragraph_block,
    rich_text,
    search_params,
    to_text,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP host talks to this process over STDOUT.
# A log line on stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for responses
#     - YELLOW for status messages
#     - RED for errors returned to the agent
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

SERVER_NAME = "notion"

BoundedPageSize = Annotated[int, Field(ge=1, le=100)]
PageSize = Annotated[
    Optional[BoundedPageSize],
    Field(description="Number of results to return (max 100)"),
]
StartCursor = Annotated[Optional[str], Field(description="Pagination cursor")]


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the size of a tool response in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {len(text)} chars{_RESET}")
    return text


def _log_error(tool_name: str, text: str) -> str:
    logging.warning(f"{_RED}  ← {tool_name} error: {text}{_RESET}")
    return text


def _invoke(
    tool_name: str,
    action: str,
    call: Callable[[], Any],
    render: Callable[[Any], str] = to_text,
) -> str:
    """Run one client call and turn the outcome into tool text.

    Anything raised by ``call`` or ``render`` becomes
    ``"Error <action>: <message>"``.
    """
    try:
        text = render(call())
    except Exception as e:
        return _log_error(tool_name, f"Error {action}: {str(e) or type(e).__name__}")
    return _log_response(tool_name, text)


def _render_pages(results: dict[str, Any]) -> str:
    return f"{pages_summary(results)}\n\n{to_text(results)}"


def build_server(
    client: NotionClient,
    tool_config: Mapping[str, bool] = TOOL_CONFIG,
) -> FastMCP:
    """Create the FastMCP server and register every enabled Notion tool."""
    mcp = FastMCP(SERVER_NAME)

    def tool(name: str, description: str):
        def register(fn):
            if is_tool_enabled(tool_config, name):
                mcp.tool(name=name, description=description)(fn)
            else:
                _log_status(f"{name} disabled by configuration")
            return fn
        return register

    # =========================================================================
    # Users
    # =========================================================================
    @tool("get-current-user", "Get information about the current authenticated user (bot)")
    def get_current_user() -> str:
        _log_request("get-current-user")
        return _invoke("get-current-user", "fetching current user", client.get_me)

    @tool("list-users", "List all users in the workspace")
    def list_users(start_cursor: StartCursor = None, page_size: PageSize = None) -> str:
        _log_request("list-users", start_cursor=start_cursor, page_size=page_size)
        return _invoke(
            "list-users", "listing users",
            lambda: client.list_users(start_cursor, page_size or DEFAULT_PAGE_SIZE),
        )

    @tool("get-user", "Retrieve a user by ID")
    def get_user(
        user_id: Annotated[str, Field(description="ID of the user to retrieve")],
    ) -> str:
        _log_request("get-user", user_id=user_id)
        return _invoke("get-user", "retrieving user", lambda: client.get_user(user_id))

    # =========================================================================
    # Search
    # =========================================================================
    @tool("search", "Search for pages or databases in Notion workspace")
    def search(
        query: Annotated[Optional[str], Field(description="Search query")] = None,
        filter: Annotated[
            Optional[Literal["page", "database"]],
            Field(description="Filter by object type"),
        ] = None,
        sort: Annotated[
            Optional[Literal["last_edited_time"]],
            Field(description="Sort by property"),
        ] = None,
        sort_direction: Annotated[
            Optional[Literal["ascending", "descending"]],
            Field(description="Sort direction (default descending)"),
        ] = None,
        page_size: PageSize = None,
        start_cursor: StartCursor = None,
    ) -> str:
        _log_request("search", query=query, filter=filter, sort=sort,
                     sort_direction=sort_direction, page_size=page_size,
                     start_cursor=start_cursor)
        return _invoke(
            "search", "searching Notion",
            lambda: client.search(**search_params(
                query, filter, sort, sort_direction, start_cursor, page_size,
            )),
        )

    @tool("get-all-pages", "Retrieve all pages from Notion that the integration has access to")
    def get_all_pages(
        start_cursor: Annotated[
            Optional[str],
            Field(description="Pagination cursor for getting the next batch of results"),
        ] = None,
        page_size: Annotated[
            Optional[BoundedPageSize],
            Field(description="Number of results to return per request (max 100)"),
        ] = None,
    ) -> str:
        _log_request("get-all-pages", start_cursor=start_cursor, page_size=page_size)
        return _invoke(
            "get-all-pages", "retrieving pages",
            lambda: client.search(**all_pages_params(start_cursor, page_size)),
            render=_render_pages,
        )

    # =========================================================================
    # Pages
    # =========================================================================
    @tool("get-page", "Retrieve a page by ID")
    def get_page(
        page_id: Annotated[str, Field(description="ID of the page to retrieve")],
    ) -> str:
        _log_request("get-page", page_id=page_id)
        return _invoke("get-page", "retrieving page", lambda: client.get_page(page_id))

    @tool("create-page", "Create a new page in Notion")
    def create_page(
        parent_type: Annotated[
            Literal["page_id", "database_id"],
            Field(description="Type of the parent (page or database)"),
        ],
        parent_id: Annotated[str, Field(description="ID of the parent page or database")],
        title: Annotated[str, Field(description="Title of the page")],
        properties: Annotated[
            Optional[dict[str, Any]],
            Field(description="Additional properties for the page (database parents only)"),
        ] = None,
        content: Annotated[
            Optional[str], Field(description="Text content for the page body"),
        ] = None,
    ) -> str:
        _log_request("create-page", parent_type=parent_type, parent_id=parent_id,
                     title=title, properties=properties, content=content)
        return _invoke(
            "create-page", "creating page",
            lambda: client.create_page(
                parent=page_parent(parent_type, parent_id),
                properties=page_properties(parent_type, title, properties),
                children=page_children(content),
            ),
        )

    @tool("update-page", "Update a page's properties, archive or restore it, or change its icon/cover")
    def update_page(
        page_id: Annotated[str, Field(description="ID of the page to update")],
        properties: Annotated[
            Optional[dict[str, Any]], Field(description="Property values to set"),
        ] = None,
        archived: Annotated[
            Optional[bool], Field(description="True to archive the page, False to restore it"),
        ] = None,
        icon_emoji: Annotated[
            Optional[str], Field(description="Emoji to use as the page icon"),
        ] = None,
        cover_url: Annotated[
            Optional[str], Field(description="URL of an external image to use as the page cover"),
        ] = None,
    ) -> str:
        _log_request("update-page", page_id=page_id, properties=properties,
                     archived=archived, icon_emoji=icon_emoji, cover_url=cover_url)
        return _invoke(
            "update-page", "updating page",
            lambda: client.update_page(
                page_id,
                properties=properties,
                archived=archived,
                icon=emoji_icon(icon_emoji),
                cover=external_file(cover_url),
            ),
        )

    # =========================================================================
    # Databases
    # =========================================================================
    @tool("get-database", "Retrieve a database by ID")
    def get_database(
        database_id: Annotated[str, Field(description="ID of the database to retrieve")],
    ) -> str:
        _log_request("get-database", database_id=database_id)
        return _invoke(
            "get-database", "retrieving database",
            lambda: client.get_database(database_id),
        )

    @tool("create-database", "Create a new database in Notion")
    def create_database(
        parent_id: Annotated[str, Field(description="ID of the parent page")],
        title: Annotated[str, Field(description="Title for the database")],
        properties: Annotated[
            Optional[dict[str, Any]],
            Field(description="Database properties/columns schema"),
        ] = None,
    ) -> str:
        _log_request("create-database", parent_id=parent_id, title=title,
                     properties=properties)
        return _invoke(
            "create-database", "creating database",
            lambda: client.create_database(
                parent_page_id=parent_id,
                title=rich_text(title),
                properties=database_properties(properties),
            ),
        )

    @tool("query-database", "Query a database to retrieve its pages")
    def query_database(
        database_id: Annotated[str, Field(description="ID of the database to query")],
        filter: Annotated[
            Optional[dict[str, Any]], Field(description="Filter conditions"),
        ] = None,
        sorts: Annotated[
            Optional[list[dict[str, Any]]], Field(description="Sort conditions"),
        ] = None,
        start_cursor: StartCursor = None,
        page_size: PageSize = None,
    ) -> str:
        _log_request("query-database", database_id=database_id, filter=filter,
                     sorts=sorts, start_cursor=start_cursor, page_size=page_size)
        return _invoke(
            "query-database", "querying database",
            lambda: client.query_database(
                database_id,
                filter=filter or None,
                sorts=sorts or None,
                start_cursor=start_cursor or None,
                page_size=page_size,
            ),
        )

    # =========================================================================
    # Blocks
    # =========================================================================
    @tool("get-block", "Retrieve a single block by ID")
    def get_block(
        block_id: Annotated[str, Field(description="ID of the block to retrieve")],
    ) -> str:
        _log_request("get-block", block_id=block_id)
        return _invoke("get-block", "retrieving block", lambda: client.get_block(block_id))

    @tool("get-block-children", "Retrieve children blocks of a block or page")
    def get_block_children(
        block_id: Annotated[str, Field(description="ID of the block or page")],
        start_cursor: StartCursor = None,
        page_size: PageSize = None,
    ) -> str:
        _log_request("get-block-children", block_id=block_id,
                     start_cursor=start_cursor, page_size=page_size)
        return _invoke(
            "get-block-children", "retrieving block children",
            lambda: client.get_block_children(block_id, start_cursor or None, page_size),
        )

    @tool("append-block-children", "Append a paragraph of text to a parent block or page")
    def append_block_children(
        block_id: Annotated[str, Field(description="ID of the parent block or page")],
        content: Annotated[str, Field(description="Text content to add as a paragraph")],
    ) -> str:
        _log_request("append-block-children", block_id=block_id, content=content)
        return _invoke(
            "append-block-children", "appending blocks",
            lambda: client.append_block_children(block_id, [paragraph_block(content)]),
        )

    # =========================================================================
    # Comments
    # =========================================================================
    @tool("get-comments", "Retrieve comments from a block or page")
    def get_comments(
        block_id: Annotated[str, Field(description="ID of the block or page")],
        start_cursor: StartCursor = None,
        page_size: PageSize = None,
    ) -> str:
        _log_request("get-comments", block_id=block_id,
                     start_cursor=start_cursor, page_size=page_size)
        return _invoke(
            "get-comments", "retrieving comments",
            lambda: client.get_comments(block_id, start_cursor or None, page_size or DEFAULT_PAGE_SIZE),
        )

    @tool("create-comment", "Create a comment on a page")
    def create_comment(
        page_id: Annotated[str, Field(description="ID of the page to comment on")],
        text: Annotated[str, Field(description="Comment text content")],
    ) -> str:
        _log_request("create-comment", page_id=page_id, text=text)
        return _invoke(
            "create-comment", "creating comment",
            lambda: client.create_comment(page_id=page_id, rich_text=rich_text(text)),
        )

    return mcp

# =============================================================================
# notion_api/payloads.py  —  Tool Parameters → Notion Request Bodies
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Agents call tools with FLAT parameters ("title", "content", "filter").
#   Notion wants NESTED bodies (rich_text arrays inside paragraph blocks
#   inside children lists).  Every function here does one of those
#   reshapings, and nothing else.
#
# WHY A SEPARATE MODULE?
#   The synthesis rules (when a Name property gets invented, what a
#   paragraph looks like, which defaults apply) are the only real logic in
#   the server.  Keeping them as pure functions means they are tested with
#   plain dicts: no HTTP, no MCP host.
# =============================================================================

import json
from typing import Any, Optional

DEFAULT_PAGE_SIZE = 100
DEFAULT_SORT_DIRECTION = "descending"


def rich_text(content: str) -> list[dict[str, Any]]:
    """Wrap plain text as a Notion rich text array."""
    return [{"type": "text", "text": {"content": content}}]


def paragraph_block(content: str) -> dict[str, Any]:
    """A single paragraph block holding ``content``."""
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": rich_text(content)},
    }


def page_parent(parent_type: str, parent_id: str) -> dict[str, Any]:
    return {"type": parent_type, parent_type: parent_id}


def page_properties(
    parent_type: str,
    title: Optional[str],
    properties: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Build the ``properties`` of a new page.

    Database parents: the caller's properties are used as given, and a
    ``Name`` title is added from ``title`` only when the caller didn't
    supply one.

    Page parents: the only valid property is ``title``, so it is always
    built from ``title`` and ``properties`` is ignored.
    """
    if parent_type == "database_id":
        props = dict(properties or {})
        if title and "Name" not in props:
            props["Name"] = {"title": rich_text(title)}
        return props

    return {"title": rich_text(title or "")}


def page_children(content: Optional[str]) -> Optional[list[dict[str, Any]]]:
    """Initial page content: one paragraph, or None when there's no text."""
    if not content:
        return None
    return [paragraph_block(content)]


def database_properties(properties: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Database schema, defaulting to a lone ``Name`` title column."""
    if properties:
        return properties
    return {"Name": {"title": {}}}


def search_params(
    query: Optional[str] = None,
    filter: Optional[str] = None,
    sort: Optional[str] = None,
    sort_direction: Optional[str] = None,
    start_cursor: Optional[str] = None,
    page_size: Optional[int] = None,
) -> dict[str, Any]:
    """Keyword arguments for NotionClient.search() from flat tool params.

    Empty values are dropped so Notion applies its own defaults.  A sort
    without a direction sorts newest first.
    """
    params: dict[str, Any] = {}
    if query:
        params["query"] = query
    if filter:
        params["filter"] = {"property": "object", "value": filter}
    if sort:
        params["sort"] = {
            "timestamp": sort,
            "direction": sort_direction or DEFAULT_SORT_DIRECTION,
        }
    if start_cursor:
        params["start_cursor"] = start_cursor
    if page_size:
        params["page_size"] = page_size
    return params


def all_pages_params(
    start_cursor: Optional[str] = None,
    page_size: Optional[int] = None,
) -> dict[str, Any]:
    """A text-less search restricted to pages: "everything I can see"."""
    return {
        "filter": {"property": "object", "value": "page"},
        "page_size": page_size or DEFAULT_PAGE_SIZE,
        "start_cursor": start_cursor,
    }


def pages_summary(results: dict[str, Any]) -> str:
    """One-line count summary put in front of a page listing."""
    count = len(results.get("results") or [])
    more = "More pages available." if results.get("has_more") else "No more pages available."
    return f"Found {count} pages. {more}"


def to_text(data: Any) -> str:
    """Serialize a Notion response for the agent."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def emoji_icon(emoji: Optional[str]) -> Optional[dict[str, Any]]:
    if not emoji:
        return None
    return {"type": "emoji", "emoji": emoji}


def external_file(url: Optional[str]) -> Optional[dict[str, Any]]:
    """An externally hosted file object, as used for page covers."""
    if not url:
        return None
    return {"type": "external", "external": {"url": url}}

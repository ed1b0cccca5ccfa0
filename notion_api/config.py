# =============================================================================
# notion_api/config.py  —  Settings & Tool Enablement
# =============================================================================
#
# TWO KINDS OF CONFIGURATION:
#
# 1. Settings (from the environment)
#      NOTION_API_KEY   → required; the integration's bearer token
#      NOTION_BASE_URL  → optional; defaults to https://api.notion.com
#      NOTION_VERSION   → optional; the Notion-Version header value
#    main.py calls load_dotenv() first, so these can also live in a .env
#    file next to the project.
#
# 2. TOOL_CONFIG (compiled in)
#    A read-only map of tool name → enabled.  Flip an entry to False to
#    hide that tool from the agent entirely.  Tools missing from the map
#    are enabled.  The map is read once, when the server registers its
#    tools; there is no runtime toggling.
# =============================================================================

import os
from types import MappingProxyType
from typing import Mapping, Optional

from notion_api.errors import NotionConfigError
from notion_api.models import DEFAULT_API_VERSION, DEFAULT_BASE_URL, Settings

TOOL_CONFIG: Mapping[str, bool] = MappingProxyType({
    # Users
    "get-current-user": True,
    "list-users": True,
    "get-user": True,
    # Search
    "search": True,
    "get-all-pages": True,
    # Pages
    "get-page": True,
    "create-page": True,
    "update-page": True,
    # Databases
    "get-database": True,
    "create-database": True,
    "query-database": True,
    # Blocks
    "get-block": True,
    "get-block-children": True,
    "append-block-children": True,
    # Comments
    "get-comments": True,
    "create-comment": True,
})


def is_tool_enabled(config: Mapping[str, bool], name: str) -> bool:
    """A tool is enabled unless its entry is explicitly False."""
    return config.get(name, True) is not False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Raises:
        NotionConfigError: if NOTION_API_KEY is missing or blank.
    """
    if environ is None:
        environ = os.environ

    api_key = (environ.get("NOTION_API_KEY") or "").strip()
    if not api_key:
        raise NotionConfigError("NOTION_API_KEY environment variable is required")

    return Settings(
        api_key=api_key,
        base_url=(environ.get("NOTION_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        api_version=environ.get("NOTION_VERSION") or DEFAULT_API_VERSION,
    )

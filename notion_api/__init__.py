# =============================================================================
# notion_api/__init__.py
# =============================================================================
# This package is the Remote API Client layer for the Notion MCP server.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP runtime.  Every module
#   here is plain Python plus the standard library HTTP stack, so the client,
#   the ID validation and the payload shaping can be tested without a host.
#
# The MCP wiring lives in notion_mcp/; this package is the engine it drives.
# =============================================================================

from notion_api.client import NotionClient
from notion_api.config import TOOL_CONFIG, is_tool_enabled, load_settings
from notion_api.errors import (
    NotionAPIError,
    NotionConfigError,
    NotionError,
    NotionResponseError,
    NotionTransportError,
    NotionValidationError,
)
from notion_api.identifiers import normalize_notion_id
from notion_api.models import ApiRequest, Settings

__all__ = [
    "ApiRequest",
    "NotionAPIError",
    "NotionClient",
    "NotionConfigError",
    "NotionError",
    "NotionResponseError",
    "NotionTransportError",
    "NotionValidationError",
    "Settings",
    "TOOL_CONFIG",
    "is_tool_enabled",
    "load_settings",
    "normalize_notion_id",
]

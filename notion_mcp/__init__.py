# =============================================================================
# notion_mcp/__init__.py
# =============================================================================
# FastMCP wrappers around notion_api.
#
# ARCHITECTURAL ROLE:
#   This is the translation layer between the agent host and the Notion
#   client.  server.py:
#     1. Declares each tool (name, description, typed parameters)
#     2. Reshapes flat parameters with notion_api.payloads
#     3. Calls one NotionClient method
#     4. Returns the JSON response, or the error, as text
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk HTTP (that's notion_api/client.py)
#   - They do NOT retry, cache or combine calls
#   - They do NOT raise to the host; errors come back as text
# =============================================================================

from notion_mcp.server import build_server

__all__ = ["build_server"]

# =============================================================================
# main.py  —  Entry Point for the Notion MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#   (or the installed console script: notion-mcp-server)
#
# WHAT HAPPENS:
#   1. Loads .env so NOTION_API_KEY can live in a file
#   2. Reads settings; a missing key is fatal (exit code 1)
#   3. Creates the NotionClient and the FastMCP server with its tools
#   4. Serves tool calls over stdio until the host disconnects
#
# The agent host (Claude Desktop, an ADK agent, any MCP client) starts this
# process as a subprocess and talks to it over stdin/stdout.  Everything we
# print goes to stderr.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from notion_api.client import NotionClient
from notion_api.config import load_settings
from notion_api.errors import NotionConfigError
from notion_mcp.server import build_server


def main() -> None:
    # Must happen BEFORE load_settings(), which reads the environment.
    load_dotenv()

    try:
        settings = load_settings()
    except NotionConfigError as e:
        logging.error(f"Fatal error during startup: {e}")
        sys.exit(1)

    server = build_server(NotionClient(settings))
    logging.info("Notion MCP Server running on stdio")
    server.run()


if __name__ == "__main__":
    main()

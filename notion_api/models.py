# =============================================================================
# notion_api/models.py  —  Data Models
# =============================================================================
#
# The server keeps no state between calls, so there are only two shapes
# worth naming:
#   - Settings:   the credential / base URL / version triple the client
#                 holds for its whole lifetime
#   - ApiRequest: one fully-built outbound call
#
# Notion's own objects (pages, blocks, users...) are NOT modelled here.
# Responses are passed through as plain dicts so fields Notion adds later
# still reach the agent untouched.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_BASE_URL = "https://api.notion.com"
DEFAULT_API_VERSION = "2022-06-28"


@dataclass(frozen=True)
class Settings:
    """Connection settings for the Notion API, fixed at startup."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION

    def __repr__(self) -> str:
        # Never let the credential end up in a log line.
        return (
            f"Settings(api_key='***', base_url={self.base_url!r}, "
            f"api_version={self.api_version!r})"
        )


@dataclass
class ApiRequest:
    """One outbound Notion API call, built completely before dispatch."""

    method: str                                    # "GET", "POST", "PATCH"
    path: str                                      # "/v1/pages/<id>"
    body: Optional[dict[str, Any]] = None          # JSON body (never for GET)
    query: dict[str, Any] = field(default_factory=dict)
    # query values that are None are dropped when the URL is built

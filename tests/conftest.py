import io
import json
import urllib.error
from typing import Any
from unittest.mock import MagicMock

import pytest

from notion_api.client import NotionClient
from notion_api.models import Settings

PAGE_ID = "0123456789abcdef0123456789abcdef"
PAGE_UUID = "01234567-89ab-cdef-0123-456789abcdef"


def json_response(payload: Any) -> MagicMock:
    """A stand-in for the object urlopen() returns, usable as a context manager."""
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def raw_response(raw: bytes) -> MagicMock:
    response = MagicMock()
    response.read.return_value = raw
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def http_error(status: int, payload: Any, url: str = "https://api.notion.com") -> urllib.error.HTTPError:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return urllib.error.HTTPError(url, status, "error", {}, io.BytesIO(raw))


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="secret_test")


@pytest.fixture
def client(settings: Settings) -> NotionClient:
    return NotionClient(settings)


@pytest.fixture
def mock_client() -> Any:
    return MagicMock(spec=NotionClient)

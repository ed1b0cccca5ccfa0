# =============================================================================
# notion_api/errors.py  —  Failure Taxonomy
# =============================================================================
#
# Every failure the client can raise derives from NotionError, so the tool
# layer can catch one type and still keep the message intact:
#
#   - NotionValidationError  → bad input caught before any network call
#   - NotionAPIError         → Notion answered with a non-2xx status
#   - NotionResponseError    → Notion answered 2xx with a body we can't parse
#   - NotionTransportError   → no response at all (DNS, refused, timeout)
#   - NotionConfigError      → startup problem (missing credential)
#
# None of these are retried anywhere.  A failure always reaches the caller
# on the first attempt.
# =============================================================================

from typing import Any, Optional


class NotionError(Exception):
    """Base class for every error raised by the Notion client layer."""


class NotionValidationError(NotionError):
    """Raised when input fails validation before a request is dispatched."""


class NotionConfigError(NotionError):
    """Raised at startup when required configuration is missing."""


class NotionTransportError(NotionError):
    """Raised when the HTTP request produced no response."""


class NotionResponseError(NotionError):
    """Raised when a successful response carries a body that isn't JSON."""


class NotionAPIError(NotionError):
    """A non-success HTTP status returned by the Notion API.

    Carries everything an agent needs to react to the failure: the status
    code, the message Notion reported (or the raw body when there was no
    message field), the endpoint path and Notion's request id.
    """

    def __init__(
        self,
        status: int,
        message: str,
        endpoint: str,
        request_id: Optional[str] = None,
        body: Any = None,
    ) -> None:
        self.status = status
        self.message = message
        self.endpoint = endpoint
        self.request_id = request_id
        self.body = body
        super().__init__(
            f"Notion API error: {status} - {message}\n"
            f"Endpoint: {endpoint}\n"
            f"Request ID: {request_id or 'unknown'}"
        )

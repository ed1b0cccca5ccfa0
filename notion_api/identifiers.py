# =============================================================================
# notion_api/identifiers.py  —  Notion ID Validation
# =============================================================================
#
# Notion IDs are UUIDs, but agents paste them in every shape imaginable:
# copied out of a URL with no dashes, wrapped in quotes, upper-cased, with
# trailing whitespace.  normalize_notion_id() accepts all of those and
# returns the canonical lowercase 8-4-4-4-12 form.
#
# Anything that doesn't reduce to exactly 32 hex characters is rejected
# here, before a request is built, so a typo never costs a network call.
# =============================================================================

import re

from notion_api.errors import NotionValidationError

_HEX32 = re.compile(r"^[0-9a-fA-F]{32}$")
_STRIP = re.compile(r"[\s'\"]")


def normalize_notion_id(value: str) -> str:
    """Return ``value`` as a canonical dashed, lowercase Notion ID.

    Raises:
        NotionValidationError: if the value is empty or isn't a
            32-character hexadecimal string once quotes, whitespace
            and dashes are removed.
    """
    if not value:
        raise NotionValidationError("Notion ID cannot be empty")

    cleaned = _STRIP.sub("", value).replace("-", "")
    if not _HEX32.match(cleaned):
        raise NotionValidationError(
            f"Invalid Notion ID format: {value}. "
            "Expected a 32-character hexadecimal string."
        )

    cleaned = cleaned.lower()
    return (
        f"{cleaned[:8]}-{cleaned[8:12]}-{cleaned[12:16]}-"
        f"{cleaned[16:20]}-{cleaned[20:]}"
    )

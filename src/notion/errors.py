"""Errors raised by the Notion API layer."""

from typing import Optional

# Substrings of well-known Notion error messages mapped to user guidance.
_HINTS = {
    "API token is invalid": (
        "Check that NOTION_TOKEN holds a valid internal integration secret."
    ),
    "Could not find database": (
        "Check the database ID and make sure the database is shared with the integration."
    ),
}


class NotionAPIError(Exception):
    """A request to the Notion API failed.

    Carries the upstream HTTP status code and message so the HTTP layer can
    pass them through unchanged.
    """

    def __init__(self, status_code: int, message: str, code: Optional[str] = None) -> None:
        super().__init__(f"Notion API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message
        self.code = code

    @property
    def hint(self) -> Optional[str]:
        """Targeted guidance for a few well-known failures, if any."""
        for needle, hint in _HINTS.items():
            if needle in self.message:
                return hint
        return None

"""Notion Database operations."""

from typing import Any, Dict, List, Optional

from loguru import logger

from .client import NotionClient
from .properties import plain_text
from .types import Page

# Notion's maximum page size; results past the first page are not fetched.
MAX_PAGE_SIZE = 100


class NotionDatabase:
    """A Notion database with metadata and query access."""

    def __init__(self, client: NotionClient, database_id: str) -> None:
        """Initialize a database.

        Args:
            client: The NotionClient instance to use for API calls
            database_id: The ID of the database
        """
        if not database_id:
            raise ValueError("database_id is required")
        self.client = client
        self.database_id = database_id

    async def retrieve(self) -> Dict[str, Any]:
        """Fetch the database metadata object."""
        return await self.client.get(f"databases/{self.database_id}")

    async def title(self) -> str:
        """Fetch the database title, defaulting to "Notion Database"."""
        meta = await self.retrieve()
        return plain_text(meta.get("title")) or "Notion Database"

    async def query(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        page_size: int = MAX_PAGE_SIZE,
    ) -> List[Page]:
        """Query a single page of results.

        Args:
            filter: Optional Notion filter object
            sorts: Optional list of Notion sort objects
            page_size: Number of results to request, capped at 100

        Returns:
            The raw page objects, in the order Notion returned them.
        """
        payload: Dict[str, Any] = {"page_size": min(page_size, MAX_PAGE_SIZE)}
        if filter:
            payload["filter"] = filter
        if sorts:
            payload["sorts"] = sorts

        data = await self.client.post(f"databases/{self.database_id}/query", payload)
        pages = [p for p in data.get("results", []) if p.get("object", "page") == "page"]
        if data.get("has_more"):
            logger.warning(
                f"[notion] database {self.database_id} has more than {len(pages)} "
                "matching pages; only the first page is returned"
            )
        logger.debug(f"[notion] query {self.database_id} -> {len(pages)} pages")
        return pages

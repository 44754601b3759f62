"""Notion Page operations."""

from typing import Any, Dict, List, Optional

from .client import NotionClient
from .properties import extract_title
from .types import Block, Page, PropertyValue


class NotionPage:
    """A Notion page with its properties and child blocks."""

    def __init__(self, client: NotionClient, page_id: str) -> None:
        """Initialize a page.

        Args:
            client: The NotionClient instance to use for API calls
            page_id: The ID of the page
        """
        self.client = client
        self.id = page_id
        self._data: Optional[Page] = None

    async def refresh(self) -> Page:
        """Refresh the page data from Notion."""
        self._data = await self.client.get(f"pages/{self.id}")  # type: ignore[assignment]
        return self._data  # type: ignore[return-value]

    async def data(self) -> Page:
        """Get the page data, fetching it if not already loaded."""
        if self._data is None:
            await self.refresh()
        return self._data or {}

    async def title(self) -> str:
        """Extract the page title from properties."""
        return extract_title((await self.data()).get("properties"))

    async def get_property(self, name: str) -> Optional[PropertyValue]:
        """Get a property by name."""
        return (await self.data()).get("properties", {}).get(name)

    async def blocks(self, page_size: int = 100) -> List[Block]:
        """Fetch the first page of child blocks."""
        params: Dict[str, Any] = {"page_size": page_size}
        data = await self.client.get(f"blocks/{self.id}/children", params=params)
        return data.get("results", [])

"""Notion connection session.

A session bundles the API client with the database ids it was opened for. The
app keeps at most one on ``app.state.session``: set by a successful connect,
dropped by disconnect. Without one, each request opens a session from settings.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import httpx

from inventory import ItemQueryEngine, RoomDirectory
from notion import NotionClient, NotionDatabase

from .settings import ConfigurationError, Settings


@dataclass
class NotionSession:
    client: NotionClient
    database_id: str
    rooms_database_id: Optional[str] = None
    items_database_id: Optional[str] = None
    room_heuristics: bool = False
    connected_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "NotionSession":
        """Open a session from configuration.

        Raises:
            ConfigurationError: If the token or main database id is missing.
        """
        try:
            settings.require("notion_token", "notion_database_id")
        except ConfigurationError as e:
            raise ConfigurationError(f"Notion credentials missing ({e})") from e
        return cls(
            client=NotionClient(settings.notion_token, transport=transport),
            database_id=settings.notion_database_id,  # type: ignore[arg-type]
            rooms_database_id=settings.notion_rooms_database_id,
            items_database_id=settings.notion_items_database_id,
            room_heuristics=settings.room_heuristics,
        )

    @property
    def database(self) -> NotionDatabase:
        return NotionDatabase(self.client, self.database_id)

    def query_engine(self) -> ItemQueryEngine:
        return ItemQueryEngine(self.client, self.database_id)

    def room_directory(self, with_items: bool = False) -> RoomDirectory:
        """Room lookups. ``with_items`` also requires the items database id."""
        if not self.rooms_database_id:
            raise ConfigurationError("Notion credentials or Rooms database ID missing")
        if with_items and not self.items_database_id:
            raise ConfigurationError("Notion Items database ID is not configured")
        return RoomDirectory(
            self.client,
            self.rooms_database_id,
            self.items_database_id or self.database_id,
            heuristics=self.room_heuristics,
        )

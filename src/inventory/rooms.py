"""Room listing and room-scoped item lookups."""

from typing import List, Optional

from loguru import logger

from notion import NotionClient, NotionDatabase
from notion.properties import decode, extract_attachments, extract_title
from notion.types import Page

from .models import Room, RoomItem
from .query import is_page_id, slugify
from .resolver import matches_room_heuristically

# Offered when the rooms database is reachable but empty.
DEFAULT_ROOMS = [
    "Kitchen",
    "Living Room",
    "Bedroom 1",
    "Bedroom 2",
    "Garage",
    "Attic",
    "Bathroom",
    "Harry Potter Closet",
]


def to_room_item(page: Page) -> RoomItem:
    properties = page.get("properties") or {}
    description = next(
        (decode(p, "rich_text") for p in properties.values() if decode(p, "rich_text")), ""
    )
    image = next(
        (files[0]["url"] for files in map(extract_attachments, properties.values()) if files),
        None,
    )
    name = extract_title(properties)
    return RoomItem(
        id=page.get("id", ""),
        name="Unnamed Item" if name == "Untitled" else name,
        description=description,
        image=image,
        last_updated=page.get("last_edited_time") or "",
    )


class RoomDirectory:
    """Rooms come from a dedicated rooms database; items from the items database."""

    def __init__(
        self,
        client: NotionClient,
        rooms_database_id: str,
        items_database_id: str,
        heuristics: bool = False,
    ) -> None:
        self.rooms = NotionDatabase(client, rooms_database_id)
        self.items = NotionDatabase(client, items_database_id)
        self.heuristics = heuristics

    async def _room_pages(self) -> List[Page]:
        return await self.rooms.query()

    async def list_rooms(self) -> List[Room]:
        """All rooms as ``{id: slug, name: title}``."""
        pages = await self._room_pages()
        titles = [extract_title(p.get("properties")) for p in pages]
        rooms = [Room(id=slugify(t), name=t) for t in titles]
        if not rooms:
            logger.warning("[rooms] rooms database is empty, using default room list")
            return [Room(id=slugify(name), name=name) for name in DEFAULT_ROOMS]
        logger.info(f"[rooms] found {len(rooms)} rooms: {', '.join(r.name for r in rooms)}")
        return rooms

    async def _find_room(self, slug: str) -> Optional[Page]:
        for page in await self._room_pages():
            title = extract_title(page.get("properties"))
            if slug in (slugify(title), title):
                return page
        return None

    async def items_in_room(self, room_id: str) -> List[RoomItem]:
        """Items related to a room, by Notion page id or by room slug."""
        if is_page_id(room_id):
            pages = await self.items.query(
                filter={"property": "Room", "relation": {"contains": room_id}}
            )
        else:
            room = await self._find_room(room_id)
            if room is not None:
                pages = await self.items.query(
                    filter={"property": "Room", "relation": {"contains": room["id"]}}
                )
            elif self.heuristics:
                room_name = room_id.replace("-", " ").title()
                logger.warning(f"[rooms] no room page for {room_id!r}, matching on {room_name!r}")
                pages = [
                    p for p in await self.items.query()
                    if matches_room_heuristically(p, room_name)
                ]
            else:
                logger.info(f"[rooms] unknown room {room_id!r}")
                pages = []
        items = [to_room_item(p) for p in pages]
        logger.info(f"[rooms] {len(items)} items in room {room_id}")
        return items

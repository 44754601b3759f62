"""Resolve room and box display names for normalized items.

Items reference boxes through a ``Box`` relation and rooms either through a
direct ``Room`` relation (box pages) or a ``Room`` rollup (item pages, via
their box). Lookups that fail degrade to the raw id (boxes) or an empty
string (rooms); they never fail the item.
"""

import asyncio
from typing import List, Optional

from loguru import logger

from notion import NotionAPIError, NotionClient, NotionPage
from notion.properties import (
    decode,
    extract_relation_ids,
    extract_rollup_relation,
    extract_select,
)
from notion.types import Page

from .models import DatabaseItem
from .normalizer import find_property


class RoomBoxResolver:
    """Fills ``room_name`` and ``box_names`` using follow-up page lookups."""

    def __init__(self, client: NotionClient) -> None:
        self.client = client

    async def page_title(self, page_id: str) -> Optional[str]:
        """Title of a related page, or None if it could not be fetched."""
        try:
            return await NotionPage(self.client, page_id).title()
        except (NotionAPIError, ValueError) as e:
            logger.warning(f"[resolver] could not fetch page {page_id}: {e}")
            return None

    async def room_name(self, page: Page) -> str:
        """Room name from a direct Room relation, else from a Room rollup."""
        room = find_property(page.get("properties") or {}, "Room")
        room_ids = extract_relation_ids(room)
        if room_ids:
            name = await self.page_title(room_ids[0])
            if name:
                return name
        return extract_rollup_relation(room)

    async def _box_name(self, box_id: str) -> str:
        return await self.page_title(box_id) or box_id

    async def box_names(self, box_ids: List[str]) -> List[str]:
        """Titles of the given boxes, in order; failed lookups keep the raw id."""
        if not box_ids:
            return []
        return list(await asyncio.gather(*(self._box_name(i) for i in box_ids)))

    async def resolve(self, item: DatabaseItem, page: Page) -> DatabaseItem:
        """Return a copy of ``item`` with room and box names filled in."""
        room_name, box_names = await asyncio.gather(
            self.room_name(page), self.box_names(item.box_ids)
        )
        logger.debug(f"[resolver] {item.id}: room={room_name!r} boxes={box_names}")
        return item.model_copy(update={"room_name": room_name, "box_names": box_names})


def matches_room_heuristically(page: Page, room_name: str) -> bool:
    """Guess room membership when the schema has no usable relation.

    A page matches when any select property equals ``room_name`` or any title or
    rich-text property contains it. Only used when room heuristics are enabled.
    """
    if not room_name:
        return False
    for prop in (page.get("properties") or {}).values():
        if not isinstance(prop, dict):
            continue
        ptype = prop.get("type")
        if ptype == "select" and extract_select(prop) == room_name:
            return True
        if ptype in ("title", "rich_text") and room_name in decode(prop, ptype):
            return True
    return False

"""Item listing: Notion query construction plus client-side filtering.

Notion's query API has no full-text search and cannot filter on rollups, so
``search`` and the ``room`` filter are applied after normalization. Only the
first page of up to 100 results is queried.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from notion import NotionClient, NotionDatabase, NotionPage
from notion.types import Page

from .models import ALL, DatabaseItem, ItemQuery
from .normalizer import normalize_page
from .resolver import RoomBoxResolver

FilterValue = Union[str, bool, None]

ROOM_PLACEHOLDER = {"timestamp": "created_time", "created_time": {"is_not_empty": True}}

_PAGE_ID = re.compile(r"^[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}$", re.I)


def slugify(name: str) -> str:
    """Lowercase and hyphenate whitespace: "Living Room" -> "living-room"."""
    return re.sub(r"\s+", "-", name.strip().lower())


def is_page_id(value: str) -> bool:
    """True for Notion page ids, with or without dashes."""
    return bool(_PAGE_ID.match(value))


def id_condition(schema: Dict[str, Any], item_id: str) -> Optional[Dict[str, Any]]:
    """Filter selecting the page whose custom ID property equals ``item_id``.

    ``schema`` is the ``properties`` map of the database metadata. Returns None
    when the database has no ID property or ``item_id`` cannot be one of its
    values.
    """
    name = "ID" if "ID" in schema else next((k for k in schema if k.lower() == "id"), None)
    if name is None:
        return None
    kind = (schema[name] or {}).get("type")
    if kind == "rich_text":
        return {"property": name, "rich_text": {"equals": item_id}}
    try:
        if kind == "number":
            number = float(item_id)
            value = int(number) if number.is_integer() else number
            return {"property": name, "number": {"equals": value}}
        if kind == "unique_id":
            return {"property": name, "unique_id": {"equals": int(item_id.rsplit("-", 1)[-1])}}
    except ValueError:
        return None
    return None


def active_filters(filters: Optional[Dict[str, FilterValue]]) -> Dict[str, Union[str, bool]]:
    """Drop unset filters; None and "All" both mean no constraint."""
    return {k: v for k, v in (filters or {}).items() if v is not None and v != ALL}


def build_filter(filters: Optional[Dict[str, FilterValue]]) -> Optional[Dict[str, Any]]:
    """Translate caller filters into a Notion compound filter.

    The room filter cannot be expressed natively (Room is a rollup), so it is
    replaced with an always-true condition on the creation time, which every
    database has whatever its title column is called, and applied later.
    """
    conditions = []
    for key, value in active_filters(filters).items():
        if key == "box":
            conditions.append({"property": "Box", "relation": {"contains": value}})
        elif key == "room":
            conditions.append(ROOM_PLACEHOLDER)
        elif isinstance(value, bool):
            conditions.append({"property": key, "checkbox": {"equals": value}})
        else:
            conditions.append({"property": key, "rich_text": {"equals": value}})
    return {"and": conditions} if conditions else None


def build_sorts(query: ItemQuery) -> Optional[List[Dict[str, str]]]:
    if query.sort is None:
        return None
    return [{"property": query.sort.property, "direction": query.sort.direction}]


def apply_search(items: List[DatabaseItem], search: str) -> List[DatabaseItem]:
    """Case-insensitive substring match on title or description."""
    needle = search.strip().lower()
    if not needle:
        return items
    return [i for i in items if needle in i.title.lower() or needle in i.description.lower()]


def apply_room_filter(items: List[DatabaseItem], room: Optional[str]) -> List[DatabaseItem]:
    """Keep items whose room name, or its slug, equals ``room``."""
    if not room or room == ALL:
        return items
    return [i for i in items if i.room_name and room in (i.room_name, slugify(i.room_name))]


def filter_items(items: List[DatabaseItem], query: ItemQuery) -> List[DatabaseItem]:
    """Apply the search and room constraints Notion could not evaluate."""
    room = active_filters(query.filters).get("room")
    items = apply_search(items, query.search)
    return apply_room_filter(items, room if isinstance(room, str) else None)


def ensure_unique_ids(items: List[DatabaseItem]) -> List[DatabaseItem]:
    """Fall back to the page id for items whose custom ID was already used."""
    seen = set()
    unique = []
    for item in items:
        if item.id in seen:
            logger.warning(f"[query] duplicate ID {item.id!r}, using page id {item.page_id}")
            item = item.model_copy(update={"id": item.page_id})
        seen.add(item.id)
        unique.append(item)
    return unique


class ItemQueryEngine:
    """Runs item queries against one Notion database."""

    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        resolver: Optional[RoomBoxResolver] = None,
    ) -> None:
        self.client = client
        self.database = NotionDatabase(client, database_id)
        self.resolver = resolver or RoomBoxResolver(client)

    def build_payload(self, query: ItemQuery) -> Tuple[Optional[Dict[str, Any]], Optional[list]]:
        """Return the (filter, sorts) pair sent to Notion."""
        return build_filter(query.filters), build_sorts(query)

    async def _normalize(self, page: Page) -> DatabaseItem:
        return await self.resolver.resolve(normalize_page(page), page)

    async def run(self, query: ItemQuery) -> List[DatabaseItem]:
        """Query, normalize, resolve and filter items, preserving Notion's order."""
        filter, sorts = self.build_payload(query)
        pages = await self.database.query(filter=filter, sorts=sorts)
        normalized = await asyncio.gather(*(self._normalize(p) for p in pages))
        items = filter_items(ensure_unique_ids(list(normalized)), query)
        logger.info(
            f"[query] {len(pages)} pages -> {len(items)} items "
            f"(search={query.search!r}, filters={active_filters(query.filters)})"
        )
        return items

    async def find_page_id(self, item_id: str) -> str:
        """Map an item id as listed (custom ID or page id) to its page id."""
        if is_page_id(item_id):
            return item_id
        meta = await self.database.retrieve()
        condition = id_condition(meta.get("properties") or {}, item_id)
        if condition is None:
            return item_id
        pages = await self.database.query(filter=condition, page_size=1)
        if not pages:
            logger.info(f"[query] no page with ID {item_id!r}, trying it as a page id")
            return item_id
        return pages[0]["id"]

    async def get_item(self, item_id: str) -> DatabaseItem:
        """Fetch one page with its blocks and fully resolved names."""
        page = NotionPage(self.client, await self.find_page_id(item_id))
        data, blocks = await asyncio.gather(page.data(), page.blocks())
        return await self.resolver.resolve(normalize_page(data, blocks), data)

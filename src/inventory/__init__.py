"""Household inventory on top of Notion: items, rooms and boxes."""

from .cache import NoCachedDataError, OfflineCache
from .models import DatabaseItem, FilterOption, ItemQuery, Room, RoomItem
from .normalizer import normalize_page
from .query import ItemQueryEngine
from .resolver import RoomBoxResolver
from .rooms import RoomDirectory

__all__ = [
    "DatabaseItem",
    "FilterOption",
    "ItemQuery",
    "ItemQueryEngine",
    "NoCachedDataError",
    "OfflineCache",
    "Room",
    "RoomBoxResolver",
    "RoomDirectory",
    "RoomItem",
    "normalize_page",
]

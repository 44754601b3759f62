"""Application-level records built from Notion pages."""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ALL = "All"  # filter sentinel meaning "no constraint"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Attachment(CamelModel):
    name: str
    url: str


class DatabaseItem(CamelModel):
    """One inventory item, flattened from a Notion page."""

    id: str
    page_id: str
    notion_id: Optional[str] = None
    title: str = "Untitled"
    description: str = ""
    room_name: str = ""
    box_ids: List[str] = Field(default_factory=list)
    box_names: List[str] = Field(default_factory=list)
    images: List[Attachment] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    status: str = ""
    priority: str = ""
    category: str = ""
    assigned_to: str = ""
    date: Optional[str] = None
    url: str = ""
    last_updated: str = ""


class FilterOption(CamelModel):
    """A filter the UI can offer; ``available`` always starts with ``"All"``."""

    id: str
    type: str
    name: str
    value: Optional[str] = None
    available: List[str] = Field(default_factory=lambda: [ALL])


class Room(CamelModel):
    id: str
    name: str


class RoomItem(CamelModel):
    id: str
    name: str
    description: str = ""
    image: Optional[str] = None
    last_updated: str = ""


class DatabaseInfo(CamelModel):
    id: str
    title: str
    last_synced: str


class SortSpec(CamelModel):
    property: str
    direction: Literal["ascending", "descending"] = "ascending"


class ItemQuery(CamelModel):
    """Caller-supplied search, filters and sort for an item listing."""

    search: str = ""
    filters: Dict[str, Union[str, bool, None]] = Field(default_factory=dict)
    sort: Optional[SortSpec] = None

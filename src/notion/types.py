"""Type definitions and constants for Notion API."""

from typing import Any, Dict, List, Literal, Optional, TypedDict

PropertyType = Literal[
    "title",
    "rich_text",
    "select",
    "multi_select",
    "status",
    "date",
    "people",
    "files",
    "relation",
    "rollup",
    "unique_id",
    "number",
    "checkbox",
    "url",
]

RichText = List[Dict[str, Any]]


class PropertyValue(TypedDict, total=False):
    """A Notion property value, tagged by ``type``."""

    id: str
    type: PropertyType
    title: RichText
    rich_text: RichText
    select: Optional[Dict[str, Any]]
    multi_select: List[Dict[str, Any]]
    status: Optional[Dict[str, Any]]
    date: Optional[Dict[str, Any]]
    people: List[Dict[str, Any]]
    files: List[Dict[str, Any]]
    relation: List[Dict[str, str]]
    rollup: Dict[str, Any]
    unique_id: Dict[str, Any]
    number: Optional[float]
    checkbox: bool
    url: Optional[str]


Properties = Dict[str, PropertyValue]


class Page(TypedDict, total=False):
    """A Notion page object as returned by the pages and query endpoints."""

    object: str
    id: str
    url: str
    last_edited_time: str
    properties: Properties


class Block(TypedDict, total=False):
    """A Notion block object. Only the fields we read are listed."""

    object: str
    id: str
    type: str
    paragraph: Dict[str, Any]

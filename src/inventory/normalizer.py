"""Flatten raw Notion pages into DatabaseItem records.

Normalization is a pure transform: fetching child blocks and resolving
room/box names happens in the callers (see ``resolver`` and ``query``).
"""

from typing import Iterable, List, Optional

from notion.properties import (
    decode,
    extract_attachments,
    extract_date,
    extract_id,
    extract_person,
    extract_relation_ids,
    extract_rich_text,
    extract_rollup_relation,
    extract_select,
    extract_status,
    extract_title,
    plain_text,
)
from notion.types import Block, Page, Properties, PropertyValue

from .models import Attachment, DatabaseItem


def find_property(properties: Properties, *names: str) -> Optional[PropertyValue]:
    """Look up a property by name, trying each name exactly then case-insensitively."""
    for name in names:
        if name in properties:
            return properties[name]
    lowered = {n.lower() for n in names}
    for key, prop in properties.items():
        if key.lower() in lowered:
            return prop
    return None


def _choice(prop: Optional[PropertyValue]) -> str:
    # Status-like fields may be modelled as select or as Notion's status type
    return extract_select(prop) or extract_status(prop)


def paragraph_texts(blocks: Iterable[Block]) -> List[str]:
    """Plain text of every non-empty paragraph block, in block order."""
    texts = []
    for block in blocks:
        if block.get("type") != "paragraph":
            continue
        text = plain_text((block.get("paragraph") or {}).get("rich_text"))
        if text:
            texts.append(text)
    return texts


def build_description(properties: Properties, blocks: Optional[Iterable[Block]] = None) -> str:
    """Description property text followed by paragraph blocks, blank-line separated."""
    parts = []
    prop_text = extract_rich_text(find_property(properties, "Description"))
    if prop_text:
        parts.append(prop_text)
    if blocks:
        parts.extend(paragraph_texts(blocks))
    return "\n\n".join(parts)


def normalize_page(page: Page, blocks: Optional[Iterable[Block]] = None) -> DatabaseItem:
    """Build a DatabaseItem from a raw page and, optionally, its child blocks.

    Room and box display names are left for the resolver, except the room name
    carried inline by a Room rollup.
    """
    properties: Properties = page.get("properties") or {}
    notion_id = extract_id(properties)

    room = find_property(properties, "Room")
    assigned = find_property(properties, "Assigned To", "Assignee", "Owner")
    images = extract_attachments(find_property(properties, "Image", "Images"))
    attachments = extract_attachments(find_property(properties, "Attachments"))
    category = find_property(properties, "Category")

    return DatabaseItem(
        id=notion_id or page.get("id", ""),
        page_id=page.get("id", ""),
        notion_id=notion_id,
        title=extract_title(properties),
        description=build_description(properties, blocks),
        room_name=extract_rollup_relation(room),
        box_ids=extract_relation_ids(find_property(properties, "Box")),
        images=[Attachment(**f) for f in images],
        attachments=[Attachment(**f) for f in attachments],
        status=_choice(find_property(properties, "Status")),
        priority=_choice(find_property(properties, "Priority")),
        category=_choice(category) or ", ".join(decode(category, "multi_select")),
        assigned_to=extract_person(assigned),
        date=extract_date(find_property(properties, "Date", "Due Date")),
        url=page.get("url") or "",
        last_updated=page.get("last_edited_time") or "",
    )

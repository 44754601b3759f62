"""Decoders for Notion property values.

Notion returns every property as a tagged union: ``{"type": "<kind>", "<kind>": ...}``.
Each supported kind has exactly one decoder registered in ``DECODERS``; ``decode``
dispatches on the type tag. Decoders never raise: a malformed or mismatched value
decodes to the kind's empty value from ``EMPTY``.

The ``extract_*`` helpers are the named entry points the rest of the code uses.
"""

from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from .types import Properties, PropertyValue, RichText

UNTITLED = "Untitled"


def plain_text(runs: Optional[RichText]) -> str:
    """Concatenate the plain text of a list of rich-text runs."""
    if not isinstance(runs, list):
        return ""
    return "".join(run.get("plain_text", "") for run in runs if isinstance(run, dict))


def _decode_title(prop: PropertyValue) -> str:
    return plain_text(prop.get("title"))


def _decode_rich_text(prop: PropertyValue) -> str:
    return plain_text(prop.get("rich_text"))


def _decode_select(prop: PropertyValue) -> str:
    return (prop.get("select") or {}).get("name") or ""


def _decode_status(prop: PropertyValue) -> str:
    return (prop.get("status") or {}).get("name") or ""


def _decode_multi_select(prop: PropertyValue) -> List[str]:
    return [opt["name"] for opt in prop.get("multi_select") or [] if opt.get("name")]


def _decode_date(prop: PropertyValue) -> Optional[str]:
    return (prop.get("date") or {}).get("start") or None


def _decode_people(prop: PropertyValue) -> List[str]:
    return [p.get("name") or p.get("id", "") for p in prop.get("people") or []]


def _decode_files(prop: PropertyValue) -> List[Dict[str, str]]:
    files = []
    for entry in prop.get("files") or []:
        # Notion-hosted files live under "file", linked ones under "external"
        url = (entry.get("file") or {}).get("url") or (entry.get("external") or {}).get("url")
        if url:
            files.append({"name": entry.get("name") or "Attachment", "url": url})
    return files


def _decode_relation(prop: PropertyValue) -> List[str]:
    return [rel["id"] for rel in prop.get("relation") or [] if rel.get("id")]


def _decode_rollup(prop: PropertyValue) -> str:
    rollup = prop.get("rollup") or {}
    if rollup.get("type") != "array":
        return ""
    elements = rollup.get("array") or []

    # Rollups of titles (or of relations that Notion inlines with their titles)
    titles = [plain_text(el.get("title")) for el in elements if el.get("title")]
    titles = [t for t in titles if t]
    if titles:
        return ", ".join(titles)

    ids = [
        rel.get("id", "")
        for el in elements
        if el.get("type") == "relation"
        for rel in el.get("relation") or []
    ]
    return ", ".join(i for i in ids if i)


def _decode_unique_id(prop: PropertyValue) -> Optional[str]:
    uid = prop.get("unique_id") or {}
    number = uid.get("number")
    if number is None:
        return None
    prefix = uid.get("prefix")
    return f"{prefix}-{number}" if prefix else str(number)


def _decode_number(prop: PropertyValue) -> Optional[float]:
    number = prop.get("number")
    return number if isinstance(number, (int, float)) else None


def _decode_checkbox(prop: PropertyValue) -> bool:
    return bool(prop.get("checkbox"))


def _decode_url(prop: PropertyValue) -> str:
    return prop.get("url") or ""


DECODERS: Dict[str, Callable[[PropertyValue], Any]] = {
    "title": _decode_title,
    "rich_text": _decode_rich_text,
    "select": _decode_select,
    "status": _decode_status,
    "multi_select": _decode_multi_select,
    "date": _decode_date,
    "people": _decode_people,
    "files": _decode_files,
    "relation": _decode_relation,
    "rollup": _decode_rollup,
    "unique_id": _decode_unique_id,
    "number": _decode_number,
    "checkbox": _decode_checkbox,
    "url": _decode_url,
}

EMPTY: Dict[str, Any] = {
    "title": "",
    "rich_text": "",
    "select": "",
    "status": "",
    "multi_select": [],
    "date": None,
    "people": [],
    "files": [],
    "relation": [],
    "rollup": "",
    "unique_id": None,
    "number": None,
    "checkbox": False,
    "url": "",
}


def _empty(kind: Optional[str]) -> Any:
    value = EMPTY.get(kind) if kind else None
    return list(value) if isinstance(value, list) else value


def decode(prop: Optional[PropertyValue], expected: Optional[str] = None) -> Any:
    """Decode a property value by its type tag.

    Args:
        prop: The raw property value, or None if the page lacks it.
        expected: If given, the type tag the caller expects. A missing property
            or a different tag yields ``EMPTY[expected]``.

    Returns:
        The decoded value, or the kind's empty value. Unknown kinds decode to None.
    """
    empty = _empty(expected)
    if not isinstance(prop, dict):
        return empty
    ptype = prop.get("type")
    if expected and ptype != expected:
        return empty
    decoder = DECODERS.get(ptype)  # type: ignore[arg-type]
    if decoder is None:
        return empty
    try:
        return decoder(prop)
    except (AttributeError, TypeError, KeyError, IndexError) as e:
        logger.debug(f"[notion] malformed {ptype!r} property: {e!r}")
        return _empty(ptype)  # type: ignore[arg-type]


def extract_title(properties: Optional[Properties]) -> str:
    """Return the text of the page's title property, or ``"Untitled"``."""
    for prop in (properties or {}).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return decode(prop, "title") or UNTITLED
    return UNTITLED


def extract_rich_text(prop: Optional[PropertyValue]) -> str:
    return decode(prop, "rich_text")


def extract_select(prop: Optional[PropertyValue]) -> str:
    return decode(prop, "select")


def extract_status(prop: Optional[PropertyValue]) -> str:
    return decode(prop, "status")


def extract_date(prop: Optional[PropertyValue]) -> Optional[str]:
    return decode(prop, "date")


def extract_person(prop: Optional[PropertyValue]) -> str:
    """Name (or id, if unnamed) of the first assigned person."""
    people = decode(prop, "people")
    return people[0] if people else ""


def extract_attachments(prop: Optional[PropertyValue]) -> List[Dict[str, str]]:
    """``{name, url}`` pairs for a files property; entries without a URL are dropped."""
    return decode(prop, "files")


def extract_relation_ids(prop: Optional[PropertyValue]) -> List[str]:
    return decode(prop, "relation")


def extract_rollup_relation(prop: Optional[PropertyValue]) -> str:
    """Flatten a rollup of relations or titles into a display string.

    Title text carried by the rollup elements wins and is joined with ", ";
    otherwise the related page ids are joined. Any other shape yields "".
    """
    return decode(prop, "rollup")


def extract_id(properties: Optional[Properties]) -> Optional[str]:
    """Read the custom "ID" property (exact name first, then case-insensitive)."""
    properties = properties or {}
    candidates = [properties["ID"]] if "ID" in properties else []
    candidates += [v for k, v in properties.items() if k != "ID" and k.lower() == "id"]
    for prop in candidates:
        if not isinstance(prop, dict):
            continue
        ptype = prop.get("type")
        if ptype == "rich_text":
            value = decode(prop, "rich_text")
            if value:
                return value
        elif ptype == "number":
            number = decode(prop, "number")
            if number is not None:
                return str(int(number)) if float(number).is_integer() else str(number)
        elif ptype == "unique_id":
            value = decode(prop, "unique_id")
            if value:
                return value
    return None

"""Filter options offered to the UI."""

from typing import Dict, Iterable, List, Optional

from .models import ALL, FilterOption, Room


def build_filter_options(
    rooms: Iterable[Room], selected: Optional[Dict[str, Optional[str]]] = None
) -> List[FilterOption]:
    """Filter descriptors for the item listing.

    Only rooms are offered; ``available`` is ``"All"`` followed by the room
    names in alphabetical order.
    """
    selected = selected or {}
    return [
        FilterOption(
            id="room",
            type="room",
            name="Room",
            value=selected.get("room"),
            available=[ALL] + sorted({r.name for r in rooms}),
        )
    ]

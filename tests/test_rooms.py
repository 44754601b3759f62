import asyncio

from inventory.rooms import RoomDirectory, is_page_id
from tests.fakes import FakeNotion, files, item, page, relation, rich_text, title

ROOM_A = "aaaaaaaa-0000-4000-8000-000000000001"
ROOM_B = "aaaaaaaa-0000-4000-8000-000000000002"


def _fake() -> FakeNotion:
    fake = FakeNotion()
    fake.add_database(
        "rooms",
        "Rooms",
        [page(ROOM_A, {"Name": title("Coffee Room")}), page(ROOM_B, {"Name": title("Office")})],
    )
    fake.add_database(
        "items",
        "Items",
        [
            item(
                "i1",
                "Grinder",
                Room=relation(ROOM_A),
                Notes=rich_text("Burr grinder"),
                Photo=files({"name": "g.jpg", "external": {"url": "https://img/g.jpg"}}),
            ),
            item("i2", "Desk", Room=relation(ROOM_B)),
            page("i3", {"Room": relation(ROOM_A)}),
            item("i4", "Office chair"),
        ],
    )
    return fake


def test_is_page_id():
    assert is_page_id(ROOM_A)
    assert is_page_id(ROOM_A.replace("-", ""))
    assert not is_page_id("coffee-room")


def test_list_rooms_uses_title_slugs():
    rooms = asyncio.run(RoomDirectory(_fake().client(), "rooms", "items").list_rooms())
    assert [(r.id, r.name) for r in rooms] == [("coffee-room", "Coffee Room"), ("office", "Office")]


def test_list_rooms_falls_back_to_defaults_when_empty():
    fake = FakeNotion()
    fake.add_database("rooms", "Rooms")
    rooms = asyncio.run(RoomDirectory(fake.client(), "rooms", "items").list_rooms())
    assert rooms[0].name == "Kitchen"
    assert rooms[1].id == "living-room"
    assert rooms[-1].id == "harry-potter-closet"


def test_items_by_page_id():
    items = asyncio.run(RoomDirectory(_fake().client(), "rooms", "items").items_in_room(ROOM_A))

    assert [i.id for i in items] == ["i1", "i3"]
    assert items[0].name == "Grinder"
    assert items[0].description == "Burr grinder"
    assert items[0].image == "https://img/g.jpg"
    assert items[1].name == "Unnamed Item"
    assert items[1].image is None


def test_items_by_slug_resolve_room_page():
    fake = _fake()
    items = asyncio.run(RoomDirectory(fake.client(), "rooms", "items").items_in_room("coffee-room"))

    assert [i.id for i in items] == ["i1", "i3"]
    assert fake.queries[-1][1]["filter"] == {"property": "Room", "relation": {"contains": ROOM_A}}


def test_unknown_slug_without_heuristics_is_empty():
    directory = RoomDirectory(_fake().client(), "rooms", "items")
    assert asyncio.run(directory.items_in_room("guest-suite")) == []


def test_unknown_slug_with_heuristics_matches_titles():
    fake = _fake()
    fake.add_page(item("i5", "Guest Suite towels"), "items")
    directory = RoomDirectory(fake.client(), "rooms", "items", heuristics=True)

    items = asyncio.run(directory.items_in_room("guest-suite"))

    assert [i.id for i in items] == ["i5"]

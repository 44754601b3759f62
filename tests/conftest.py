import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.session import NotionSession
from app.settings import Settings, get_settings
from tests.fakes import BEDROOM_ID, ITEMS_DB, ROOMS_DB, FakeNotion, item, page, relation, title


@pytest.fixture
def fake() -> FakeNotion:
    notion = FakeNotion()
    notion.add_database(
        ROOMS_DB,
        "Rooms",
        [
            page(BEDROOM_ID, {"Name": title("Bedroom")}),
            page("1c2d3e4f-0000-4000-8000-00000000b002", {"Name": title("Kitchen")}),
        ],
    )
    notion.add_database(
        ITEMS_DB,
        "Home Inventory",
        [
            item("item-1", "Winter coat", "Bedroom", Room=relation(BEDROOM_ID)),
            item("item-2", "Cast iron pan", "Kitchen"),
            item("item-3", "Spare blanket", "Bedroom", Room=relation(BEDROOM_ID)),
        ],
    )
    return notion


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        notion_token=None,
        notion_database_id=None,
        notion_rooms_database_id=None,
        notion_items_database_id=None,
        state_dir=tmp_path / "state",
        offline_mode=False,
        room_heuristics=False,
    )


@pytest.fixture
def api(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.session = None
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.session = None


@pytest.fixture
def connected(api, fake):
    """API client with a session bound to the fake Notion backend."""
    app.state.session = NotionSession(
        client=fake.client(),
        database_id=ITEMS_DB,
        rooms_database_id=ROOMS_DB,
        items_database_id=ITEMS_DB,
    )
    return api

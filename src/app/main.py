import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from inventory import ItemQuery, NoCachedDataError, OfflineCache
from inventory.filters import build_filter_options
from inventory.models import DatabaseInfo, DatabaseItem, Room, SortSpec
from inventory.query import filter_items
from notion import NotionAPIError

from .session import NotionSession
from .settings import ConfigurationError, Settings, get_settings

app = FastAPI(title="Notion Home Inventory")
app.state.session = None

REQUIRED_VARS = ["NOTION_TOKEN", "NOTION_DATABASE_ID"]


class BadRequest(ValueError):
    pass


@app.exception_handler(ConfigurationError)
async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"[api] {request.url.path}: configuration error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": f"Server configuration error: {exc}"},
    )


@app.exception_handler(NotionAPIError)
async def _notion_error(request: Request, exc: NotionAPIError) -> JSONResponse:
    logger.warning(f"[api] {request.url.path}: {exc}")
    content: Dict[str, Any] = {"success": False, "message": exc.message}
    if exc.hint:
        content["hint"] = exc.hint
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(NoCachedDataError)
async def _no_cache(request: Request, exc: NoCachedDataError) -> JSONResponse:
    logger.info(f"[api] {request.url.path}: nothing cached for {exc.key!r}")
    return JSONResponse(status_code=503, content={"success": False, "message": str(exc)})


@app.exception_handler(BadRequest)
async def _bad_request(request: Request, exc: BadRequest) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[api] {request.url.path}: unexpected error")
    return JSONResponse(
        status_code=500, content={"success": False, "message": "Internal server error"}
    )


def get_cache(settings: Settings = Depends(get_settings)) -> OfflineCache:
    return OfflineCache(settings.state_dir)


def current_session(request: Request, settings: Settings) -> NotionSession:
    """The connected session, or a fresh one opened from settings."""
    session = request.app.state.session
    return session if session is not None else NotionSession.from_settings(settings)


def _json_param(name: str, raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise BadRequest(f"Invalid JSON in {name!r} parameter") from e


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True)


async def _database_info(session: NotionSession) -> Dict[str, str]:
    title = await session.database.title()
    info = DatabaseInfo(
        id=session.database_id,
        title=title,
        last_synced=datetime.now(timezone.utc).isoformat(),
    )
    return _dump(info)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/api/diagnostics/env")
def diagnostics_env(settings: Settings = Depends(get_settings)) -> dict:
    missing = set(settings.missing("notion_token", "notion_database_id"))
    variables = {name: name not in missing for name in REQUIRED_VARS}
    ok = not missing
    return {
        "success": ok,
        "message": "All required environment variables are present"
        if ok
        else "Some required environment variables are missing",
        "variables": variables,
    }


@app.post("/api/notion/connect")
async def connect(request: Request, settings: Settings = Depends(get_settings)) -> dict:
    session = request.app.state.session or NotionSession.from_settings(settings)
    database = await _database_info(session)
    request.app.state.session = session
    logger.info(f"[api] connected to database {session.database_id}")
    return {"success": True, "database": database}


@app.post("/api/notion/disconnect")
def disconnect(request: Request) -> dict:
    request.app.state.session = None
    logger.info("[api] disconnected")
    return {"success": True}


@app.get("/api/notion/database-info")
async def database_info(request: Request, settings: Settings = Depends(get_settings)) -> dict:
    session = current_session(request, settings)
    return {"success": True, "connected": True, "database": await _database_info(session)}


@app.get("/api/notion/database")
async def list_items(
    request: Request,
    filters: Optional[str] = None,
    sort: Optional[str] = None,
    search: str = "",
    offline: bool = False,
    settings: Settings = Depends(get_settings),
    cache: OfflineCache = Depends(get_cache),
) -> List[dict]:
    parsed_filters = _json_param("filters", filters) or {}
    parsed_sort = _json_param("sort", sort)
    try:
        query = ItemQuery(
            search=search,
            filters=parsed_filters,
            sort=SortSpec(**parsed_sort) if parsed_sort else None,
        )
    except (TypeError, ValueError) as e:
        raise BadRequest(f"Invalid query parameters: {e}") from e

    if offline or settings.offline_mode:
        session = request.app.state.session
        database_id = session.database_id if session else settings.notion_database_id
        cached = [DatabaseItem(**i) for i in cache.require(f"database-{database_id}")]
        return [_dump(i) for i in filter_items(cached, query)]

    session = current_session(request, settings)
    items = [_dump(i) for i in await session.query_engine().run(query)]
    cache.set(f"database-{session.database_id}", items)
    return items


@app.get("/api/notion/database/{item_id}")
async def get_item(
    item_id: str,
    request: Request,
    offline: bool = False,
    settings: Settings = Depends(get_settings),
    cache: OfflineCache = Depends(get_cache),
) -> dict:
    key = f"database-item-{item_id}"
    if offline or settings.offline_mode:
        return cache.require(key)

    session = current_session(request, settings)
    item = _dump(await session.query_engine().get_item(item_id))
    cache.set(key, item)
    return item


@app.get("/api/notion/rooms")
async def rooms(
    request: Request,
    offline: bool = False,
    settings: Settings = Depends(get_settings),
    cache: OfflineCache = Depends(get_cache),
) -> dict:
    if offline or settings.offline_mode:
        return {"success": True, "rooms": cache.require("notion-rooms")}

    session = current_session(request, settings)
    found = [_dump(r) for r in await session.room_directory().list_rooms()]
    cache.set("notion-rooms", found)
    return {"success": True, "rooms": found}


@app.get("/api/notion/room-items")
async def room_items(
    roomId: str,
    request: Request,
    settings: Settings = Depends(get_settings),
) -> dict:
    session = current_session(request, settings)
    items = await session.room_directory(with_items=True).items_in_room(roomId)
    return {"success": True, "items": [_dump(i) for i in items]}


@app.get("/api/notion/filters")
async def filter_options(
    request: Request,
    filters: Optional[str] = None,
    offline: bool = False,
    settings: Settings = Depends(get_settings),
    cache: OfflineCache = Depends(get_cache),
) -> dict:
    selected = _json_param("filters", filters) or {}
    if not isinstance(selected, dict):
        raise BadRequest("'filters' must be a JSON object")
    if offline or settings.offline_mode:
        found = [Room(**r) for r in cache.require("notion-rooms")]
    else:
        session = current_session(request, settings)
        found = await session.room_directory().list_rooms()
    options = build_filter_options(found, selected)
    return {"success": True, "filters": [_dump(o) for o in options]}


@app.delete("/api/cache")
def clear_cache(cache: OfflineCache = Depends(get_cache)) -> dict:
    return {"success": True, "cleared": cache.clear()}

"""In-memory Notion backend and property builders for tests."""

import json
from typing import Any, Dict, List, Optional

import httpx

from notion import NotionClient
from notion.properties import decode

ITEMS_DB = "db-items"
ROOMS_DB = "db-rooms"
BEDROOM_ID = "1c2d3e4f-0000-4000-8000-00000000b001"


def title(text: str) -> dict:
    return {"type": "title", "title": [{"plain_text": text}] if text else []}


def rich_text(text: str) -> dict:
    return {"type": "rich_text", "rich_text": [{"plain_text": text}] if text else []}


def select(name: Optional[str]) -> dict:
    return {"type": "select", "select": {"name": name} if name else None}


def relation(*ids: str) -> dict:
    return {"type": "relation", "relation": [{"id": i} for i in ids]}


def rollup_titles(*names: str) -> dict:
    array = [{"type": "title", "title": [{"plain_text": n}]} for n in names]
    return {"type": "rollup", "rollup": {"type": "array", "array": array}}


def rollup_relations(*ids: str) -> dict:
    array = [{"type": "relation", "relation": [{"id": i}]} for i in ids]
    return {"type": "rollup", "rollup": {"type": "array", "array": array}}


def files(*entries: Dict[str, Any]) -> dict:
    return {"type": "files", "files": list(entries)}


def paragraph(text: str) -> dict:
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": [{"plain_text": text}]}}


def page(page_id: str, properties: Dict[str, Any]) -> dict:
    return {
        "object": "page",
        "id": page_id,
        "url": f"https://www.notion.so/{page_id}",
        "last_edited_time": "2024-05-01T10:00:00.000Z",
        "properties": properties,
    }


def item(page_id: str, name: str, room: Optional[str] = None, **extra: Any) -> dict:
    """An inventory item page whose Room rollup resolves to ``room``."""
    properties: Dict[str, Any] = {"Name": title(name)}
    if room is not None:
        properties["Room"] = rollup_titles(room)
    properties.update(extra)
    return page(page_id, properties)


def _matches(condition: Dict[str, Any], pg: dict) -> bool:
    if "and" in condition:
        return all(_matches(c, pg) for c in condition["and"])
    if "timestamp" in condition:
        return True
    prop = pg["properties"].get(condition["property"], {})
    if "relation" in condition:
        ids = [r["id"] for r in prop.get("relation", [])]
        return condition["relation"]["contains"] in ids
    if "unique_id" in condition:
        return (prop.get("unique_id") or {}).get("number") == condition["unique_id"]["equals"]
    for kind in ("number", "rich_text", "checkbox"):
        if kind in condition:
            return prop.get("type") == kind and decode(prop, kind) == condition[kind]["equals"]
    return True


class FakeNotion:
    """Routes Notion REST calls to in-memory pages, databases and blocks."""

    def __init__(self) -> None:
        self.pages: Dict[str, dict] = {}
        self.databases: Dict[str, Dict[str, Any]] = {}
        self.blocks: Dict[str, List[dict]] = {}
        self.unreachable: set = set()
        self.errors: Dict[str, tuple] = {}
        self.raw: Dict[str, tuple] = {}
        self.queries: List[tuple] = []
        self.requests: List[str] = []

    def add_database(
        self,
        database_id: str,
        name: str,
        pages: List[dict] = (),
        schema: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.databases[database_id] = {"title": name, "pages": [], "schema": schema or {}}
        for pg in pages:
            self.add_page(pg, database_id)

    def add_page(self, pg: dict, database_id: Optional[str] = None) -> None:
        self.pages[pg["id"]] = pg
        if database_id:
            self.databases[database_id]["pages"].append(pg["id"])

    def fail(self, path: str, status: int, message: str) -> None:
        self.errors[path] = (status, message)

    def respond_raw(self, path: str, status: int, body: str) -> None:
        """Answer ``path`` with a non-JSON body, like a proxy error page."""
        self.raw[path] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v1/")
        self.requests.append(f"{request.method} {path}")
        parts = path.split("/")

        if path in self.raw:
            status, body = self.raw[path]
            return httpx.Response(status, text=body, headers={"Content-Type": "text/html"})
        if path in self.errors:
            status, message = self.errors[path]
            return httpx.Response(
                status, json={"object": "error", "status": status, "code": "error", "message": message}
            )
        if parts[0] == "pages":
            if parts[1] in self.unreachable:
                raise httpx.ConnectError("connection refused", request=request)
            if parts[1] not in self.pages:
                return httpx.Response(
                    404,
                    json={"object": "error", "code": "object_not_found", "message": "Not found"},
                )
            return httpx.Response(200, json=self.pages[parts[1]])
        if parts[0] == "databases":
            db = self.databases.get(parts[1])
            if db is None:
                return httpx.Response(
                    404,
                    json={
                        "object": "error",
                        "code": "object_not_found",
                        "message": f"Could not find database with ID: {parts[1]}.",
                    },
                )
            if len(parts) == 2:
                return httpx.Response(
                    200,
                    json={
                        "object": "database",
                        "id": parts[1],
                        "title": [{"plain_text": db["title"]}],
                        "properties": db["schema"],
                    },
                )
            payload = json.loads(request.content)
            self.queries.append((parts[1], payload))
            results = [self.pages[i] for i in db["pages"]]
            if payload.get("filter"):
                results = [p for p in results if _matches(payload["filter"], p)]
            return httpx.Response(200, json={"object": "list", "results": results, "has_more": False})
        if parts[0] == "blocks":
            return httpx.Response(200, json={"object": "list", "results": self.blocks.get(parts[1], [])})
        return httpx.Response(400, json={"object": "error", "message": f"unexpected path {path}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> NotionClient:
        return NotionClient("secret-test-token", transport=self.transport)

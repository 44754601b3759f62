"""Base client for Notion API interactions."""

import os
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .errors import NotionAPIError


class NotionClient:
    """Async client for the Notion REST API."""

    API_BASE = "https://api.notion.com/v1"
    API_VERSION = "2022-06-28"  # stable version

    def __init__(
        self,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30,
    ) -> None:
        """Initialize the client.

        Args:
            token: Notion API token. If not provided, will look for NOTION_TOKEN env var.
            transport: Optional httpx transport, used to swap in a fake Notion backend.
            timeout: Request timeout in seconds.
        """
        self.token = token or os.getenv("NOTION_TOKEN")
        if not self.token:
            raise RuntimeError("NOTION_TOKEN not set")
        self.transport = transport
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        """Get the headers required for Notion API requests."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.API_VERSION,
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        """Construct a full URL from a path."""
        return f"{self.API_BASE}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            NotionAPIError: On any non-2xx response, transport failure or
                undecodable body.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.request(
                    method, self._url(path), headers=self._headers(), json=json, params=params
                )
            except httpx.TransportError as e:
                logger.warning(f"[notion] {method} {path} failed: {e!r}")
                raise NotionAPIError(502, f"Could not reach Notion: {e}") from e
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail, code = self._extract_error_detail(r)
            raise NotionAPIError(r.status_code, detail, code) from e
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            logger.warning(f"[notion] {method} {path} returned a non-JSON body")
            raise NotionAPIError(502, "Notion returned a response that is not JSON") from e

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a GET request to the Notion API."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        """Make a POST request to the Notion API."""
        return await self.request("POST", path, json=json)

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> tuple[str, Optional[str]]:
        """Extract error message and code from a Notion API response."""
        try:
            body = response.json()
        except ValueError:
            return "No details available", None
        return body.get("message") or "No details available", body.get("code")

"""Notion API client."""

from .client import NotionClient
from .database import NotionDatabase
from .errors import NotionAPIError
from .page import NotionPage

__all__ = ["NotionAPIError", "NotionClient", "NotionDatabase", "NotionPage"]

import os
import pathlib
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class ConfigurationError(RuntimeError):
    """Required configuration is missing."""


def _env(name: str) -> Optional[str]:
    return os.getenv(name, "").strip() or None


def _flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    notion_token: Optional[str] = Field(default_factory=lambda: _env("NOTION_TOKEN"))
    notion_database_id: Optional[str] = Field(default_factory=lambda: _env("NOTION_DATABASE_ID"))
    notion_rooms_database_id: Optional[str] = Field(
        default_factory=lambda: _env("NOTION_ROOMS_DATABASE_ID")
    )
    notion_items_database_id: Optional[str] = Field(
        default_factory=lambda: _env("NOTION_ITEMS_DATABASE_ID")
    )
    state_dir: pathlib.Path = Field(
        default_factory=lambda: pathlib.Path(os.getenv("STATE_DIR", ".state"))
    )
    offline_mode: bool = Field(default_factory=lambda: _flag("OFFLINE_MODE"))
    room_heuristics: bool = Field(default_factory=lambda: _flag("ROOM_HEURISTICS"))

    def missing(self, *names: str) -> list[str]:
        """Environment variable names of the given fields that are unset."""
        return [name.upper() for name in names if not getattr(self, name)]

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every unset field among ``names``."""
        missing = self.missing(*names)
        if missing:
            raise ConfigurationError(f"missing {', '.join(missing)}")


def get_settings() -> Settings:
    return Settings()

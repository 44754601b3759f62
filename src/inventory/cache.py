"""Offline snapshot cache.

Each key holds one JSON snapshot ``{"timestamp": <epoch seconds>, "data": ...}``
stored as a file under the state directory. Snapshots are only ever replaced
wholesale or deleted; the cache is never the source of truth.
"""

import hashlib
import json
import pathlib
import re
import time
from typing import Any, Optional

from loguru import logger

PREFIX = "cache_"


class NoCachedDataError(LookupError):
    """Offline mode was requested but no snapshot exists for the key."""

    def __init__(self, key: str) -> None:
        super().__init__("No cached data available while offline")
        self.key = key


class OfflineCache:
    """Timestamped key/value snapshots on disk."""

    def __init__(self, state_dir: Optional[pathlib.Path] = None) -> None:
        """Initialize the cache.

        Args:
            state_dir: Directory for snapshot files. Defaults to .state in current dir.
        """
        self.state_dir = pathlib.Path(state_dir or ".state")
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> pathlib.Path:
        # The digest keeps keys that sanitize alike ("a/b", "a_b") in separate files
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", key)
        digest = hashlib.sha1(key.encode()).hexdigest()[:8]
        return self.state_dir / f"{PREFIX}{safe}-{digest}.json"

    def set(self, key: str, data: Any) -> None:
        """Store ``data`` under ``key``, replacing any previous snapshot."""
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"timestamp": time.time(), "data": data}))
        tmp.replace(path)
        logger.debug(f"[cache] stored {key!r}")

    def get(self, key: str, max_age: Optional[float] = None) -> Any:
        """Return the snapshot data, or None if missing or older than ``max_age`` seconds.

        A ``max_age`` of 0 treats every snapshot as stale.
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text())
            timestamp, data = entry["timestamp"], entry["data"]
        except (ValueError, KeyError, TypeError):
            logger.warning(f"[cache] snapshot for {key!r} unreadable, ignoring")
            return None
        if max_age is not None and time.time() - timestamp >= max_age:
            return None
        return data

    def require(self, key: str, max_age: Optional[float] = None) -> Any:
        """Like ``get`` but raises NoCachedDataError when nothing usable is cached."""
        data = self.get(key, max_age)
        if data is None:
            raise NoCachedDataError(key)
        return data

    def clear(self) -> int:
        """Delete every snapshot; returns how many were removed."""
        removed = 0
        for path in self.state_dir.glob(f"{PREFIX}*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        logger.info(f"[cache] cleared {removed} snapshots")
        return removed

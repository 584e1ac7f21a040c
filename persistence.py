"""
Client-local persistence for the interview store.

Each storage key maps to one JSON file in the storage directory, mirroring the
browser's key/value local storage.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class JsonStorage:
    """Key/value store backed by one JSON file per key."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Load a stored value, or None when absent or unreadable."""
        path = self._path(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt storage file %s", path)
            return None

    def save(self, key: str, value: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2)
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

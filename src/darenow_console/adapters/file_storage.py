"""Durable key/value storage kept in a JSON file."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage:
    """Key/value storage persisted as one JSON object on disk.

    The file is re-read on every access so writes from another process are
    visible on the next read.
    """

    path: Path

    @classmethod
    def create(cls, path: str | Path) -> "JsonFileStorage":
        """Create storage rooted at a path, making parent directories."""
        resolved = Path(path).expanduser()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        return cls(path=resolved)

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value."""
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)

    def _load(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Ignoring unreadable storage file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, items: dict[str, object]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol, Union

from .pieces import Side

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get_int(self, key: str, default: int = 0) -> int:
        ...

    def set_int(self, key: str, value: int) -> None:
        ...


class MemoryStore:
    def __init__(self) -> None:
        self._values: Dict[str, int] = {}

    def get_int(self, key: str, default: int = 0) -> int:
        return self._values.get(key, default)

    def set_int(self, key: str, value: int) -> None:
        self._values[key] = int(value)


class JsonFileStore:
    """Integers persisted as one JSON object; a missing file reads as empty."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, int]:
        if not self.path.is_file():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def get_int(self, key: str, default: int = 0) -> int:
        return int(self._load().get(key, default))

    def set_int(self, key: str, value: int) -> None:
        data = self._load()
        data[key] = int(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Readers only ever see the old or the new file, never a partial one
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise


class ScoreStore:
    """Cumulative win points per side, kept in an injected key-value store."""

    KEY_PREFIX = "totalPoints"

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _key(self, side: Side) -> str:
        return f"{self.KEY_PREFIX}.{side.value}"

    def total_points(self, side: Side) -> int:
        return self._store.get_int(self._key(side))

    def add_win(self, side: Side, points: int) -> int:
        if points <= 0:
            raise ValueError(f"Win points must be positive, got {points}")
        new_total = self.total_points(side) + points
        self._store.set_int(self._key(side), new_total)
        logger.info("%s wins %d point(s), total %d", side.value, points, new_total)
        return new_total

    def reset(self) -> None:
        for side in Side:
            self._store.set_int(self._key(side), 0)

"""Key-value storage backends.

The tracker only needs ``get``/``set`` on string values.  Two
implementations are provided: a process-scoped in-memory store and a JSON
file store that survives restarts.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from parceltrack.exceptions import TrackingStateError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Structural storage interface used by :class:`~parceltrack.state.store.TrackingStateStore`."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store; state lives as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """Store persisted as a flat JSON object.

    The file is read once on construction and rewritten atomically on
    every ``set``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise TrackingStateError(f"Cannot read state file {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise TrackingStateError(f"State file {self._path} must contain a JSON object")
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._data.get(key) == value:
            return
        self._data[key] = value
        _logger.debug("Persisting %s to %s", key, self._path)
        self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

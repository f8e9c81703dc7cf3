"""JSON-file key-value store standing in for browser local storage.

Each key is persisted as ``<path>/<key>.json``.  Reads are served from an
in-memory copy once a key has been seen; writes go to disk immediately and
then notify subscribers of that key.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core.events import Event, EventBus, store_topic

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, path: Path | str | None = None, bus: Optional[EventBus] = None):
        if path is None:
            from core.config import DATA_DIR
            path = DATA_DIR
        self.path = Path(path)
        self.bus = bus or EventBus()
        self._memory: Dict[str, Any] = {}
        self._handlers: Dict[tuple, Callable[[Event, dict], dict]] = {}

    def _file(self, key: str) -> Path:
        return self.path / f"{key}.json"

    def get(self, key: str, default: Any) -> Any:
        """Return the value for ``key``, seeding it with ``default`` on first access."""
        if key in self._memory:
            return self._memory[key]
        target = self._file(key)
        if not target.exists():
            self._memory[key] = copy.deepcopy(default)
            self._write(key, self._memory[key])
            return self._memory[key]
        try:
            with target.open('r', encoding='utf-8') as handle:
                value = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Falling back to default for %s: %s", key, exc)
            value = copy.deepcopy(default)
        self._memory[key] = value
        return value

    def set(self, key: str, value: Any) -> None:
        self._memory[key] = value
        self._write(key, value)
        self.bus.publish(store_topic(key), {"key": key, "value": value})

    def remove(self, key: str) -> None:
        self._memory.pop(key, None)
        try:
            self._file(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove %s: %s", key, exc)

    def keys(self) -> List[str]:
        on_disk = set()
        if self.path.exists():
            on_disk = {p.stem for p in self.path.glob('*.json')}
        return sorted(on_disk | set(self._memory))

    def subscribe(self, key: str, handler: Callable[[Any], None]) -> None:
        def _on_update(event: Event, payload: dict) -> dict:
            handler(payload["value"])
            return {}

        self._handlers[(key, handler)] = _on_update
        self.bus.subscribe(store_topic(key), _on_update)

    def unsubscribe(self, key: str, handler: Callable[[Any], None]) -> None:
        wrapped = self._handlers.pop((key, handler), None)
        if wrapped is not None:
            self.bus.unsubscribe(store_topic(key), wrapped)

    def _write(self, key: str, value: Any) -> None:
        target = self._file(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(value, indent=2, ensure_ascii=False)
            # a half-written file must never replace the last good copy
            tmp = target.with_suffix(".tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(target)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not persist %s: %s", key, exc)

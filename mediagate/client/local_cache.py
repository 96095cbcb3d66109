"""Client-side persistent key/value cache with write notifications."""

import json
import logging
import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

WriteListener = Callable[[str, str], None]


class LocalCache:
    """
    String-valued slots, optionally persisted to a JSON file.

    All writers go through :meth:`set_item`; subscribers are told about every
    write after it is stored. ``remove_item`` and ``clear`` do not notify.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._items: dict[str, str] = {}
        self._listeners: list[WriteListener] = []
        if self._path is not None and self._path.exists():
            self._items = self._load(self._path)

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Local cache file %s is unreadable; starting empty", path)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _persist(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".cache-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._items, fh)
            os.replace(tmp, self._path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._persist()
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception:
                logger.exception("Local cache listener failed for key %s", key)

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._persist()

    def clear(self) -> None:
        self._items.clear()
        self._persist()

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: WriteListener) -> Callable[[], None]:
        """Register a write listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

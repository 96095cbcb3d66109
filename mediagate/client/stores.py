"""In-memory application state backed by one local cache slot each."""

import copy
import json
import logging
from collections.abc import Callable
from typing import Any

from mediagate.client.local_cache import LocalCache

logger = logging.getLogger(__name__)


class PersistedStore:
    """
    Reactive state mirrored to a LocalCache slot.

    ``set_state`` writes through the cache (and so reaches any sync listener);
    ``rehydrate`` re-reads the slot after someone else wrote it.
    """

    def __init__(
        self,
        cache: LocalCache,
        slot: str,
        default_factory: Callable[[], Any] = dict,
    ) -> None:
        self.cache = cache
        self.slot = slot
        self._default_factory = default_factory
        self._state: Any = default_factory()
        self._listeners: list[Callable[[Any], None]] = []
        self.rehydrate()

    @property
    def state(self) -> Any:
        return copy.deepcopy(self._state)

    def set_state(self, value: Any) -> None:
        self._state = copy.deepcopy(value)
        self.cache.set_item(self.slot, json.dumps(value))
        self._notify()

    def rehydrate(self) -> None:
        raw = self.cache.get_item(self.slot)
        if raw is None:
            self._state = self._default_factory()
        else:
            try:
                self._state = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Slot %s holds invalid JSON; using default state", self.slot)
                self._state = self._default_factory()
        self._notify()

    def subscribe(self, listener: Callable[[Any], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

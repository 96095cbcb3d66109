"""
Client state bridge: hydrate local cache slots from server buckets at boot,
then push local writes back to the server, debounced per bucket.

Boot order
----------
1. Resolve the current user and publish it to the ClientContext (anonymous
   if the call fails).
2. Fetch client config and merge env subscription sources into local settings.
   A failed config call skips the merge only.
3. Fetch the six boot buckets concurrently; a failed fetch only skips its own
   slot. Non-empty buckets overwrite their local slot.
4. Rehydrate every registered store, after all fetches have landed.
5. Start observing cache writes. Hydration writes happen before this point
   and are never echoed back to the server.

Pushes read the slot's current value when the timer fires, so rapid writes to
one slot coalesce into a single push of the latest value. Failed pushes are
logged and dropped; the next write to that slot retries naturally.
"""

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from mediagate.client.api import GatewayClient, GatewayError
from mediagate.client.context import ClientContext
from mediagate.client.local_cache import LocalCache
from mediagate.client.stores import PersistedStore
from mediagate.client.subscriptions import merge_env_subscriptions, parse_sources

logger = logging.getLogger(__name__)

SYNC_DEBOUNCE_SECONDS = 2.0

SETTINGS_SLOT = "mediagate-settings"

# Local slot name -> server bucket key. search-cache and premium-tags are
# valid bucket keys but are not hydrated at boot.
STORAGE_MAP: dict[str, str] = {
    SETTINGS_SLOT: "settings",
    "mediagate-history-store": "history",
    "mediagate-favorites-store": "favorites",
    "mediagate-search-history": "search-history",
    "mediagate-premium-history-store": "premium-history",
    "mediagate-premium-favorites-store": "premium-favorites",
}


class DataSyncBridge:
    """Mirror named LocalCache slots to per-user server buckets."""

    def __init__(
        self,
        client: GatewayClient,
        cache: LocalCache,
        context: ClientContext,
        stores: Iterable[PersistedStore] = (),
        storage_map: Mapping[str, str] = STORAGE_MAP,
        debounce_seconds: float = SYNC_DEBOUNCE_SECONDS,
    ) -> None:
        if len(set(storage_map.values())) != len(storage_map):
            raise ValueError("storage_map must map each slot to a distinct bucket key")
        self.client = client
        self.cache = cache
        self.context = context
        self.stores = list(stores)
        self.storage_map = dict(storage_map)
        self.debounce_seconds = debounce_seconds
        self._env_sources: list[str] = []
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._inflight: set[asyncio.Task[None]] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe = None
        self.ready = False

    # -- boot ------------------------------------------------------------

    async def boot(self) -> None:
        """
        Run the boot sequence. Identity, config and each bucket fail on their
        own: a failed step is logged and the rest still run, so hydration and
        rehydration always happen before sync starts.
        """
        try:
            await self._publish_identity()
            await self._merge_client_config()
            await self._hydrate()
            self._rehydrate_stores()
        finally:
            if not self.context.initialized:
                self.context.initialize(None)
            self.start()
            self.ready = True

    async def _publish_identity(self) -> None:
        try:
            user = await self.client.me()
        except (GatewayError, ValueError) as exc:
            logger.error("Failed to resolve current user: %s", exc)
            user = None
        self.context.initialize(user)

    async def _merge_client_config(self) -> None:
        try:
            config = await self.client.get_config()
        except (GatewayError, ValueError) as exc:
            logger.warning("Failed to load client config: %s", exc)
            return
        self._env_sources = parse_sources(config.get("subscriptionSources"))
        if self._env_sources:
            self._write_settings(self._read_slot(SETTINGS_SLOT))

    async def _fetch_bucket(self, slot: str, key: str) -> tuple[str, Any] | None:
        try:
            data = await self.client.get_user_data(key)
        except (GatewayError, ValueError) as exc:
            logger.warning("Failed to load bucket %s: %s", key, exc)
            return None
        if not data:
            return None
        return slot, data

    async def _hydrate(self) -> None:
        results = await asyncio.gather(
            *(self._fetch_bucket(slot, key) for slot, key in self.storage_map.items())
        )
        for result in results:
            if result is None:
                continue
            slot, data = result
            if slot == SETTINGS_SLOT:
                self._write_settings(data)
            else:
                self.cache.set_item(slot, json.dumps(data))

    def _rehydrate_stores(self) -> None:
        for store in self.stores:
            try:
                store.rehydrate()
            except Exception:
                logger.exception("Failed to rehydrate store %s", store.slot)

    def _read_slot(self, slot: str) -> Any:
        raw = self.cache.get_item(slot)
        if raw is None:
            return {}
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return {}

    def _write_settings(self, settings_state: Any) -> None:
        if self._env_sources:
            settings_state = merge_env_subscriptions(settings_state, self._env_sources)
        self.cache.set_item(SETTINGS_SLOT, json.dumps(settings_state))

    # -- continuous sync -------------------------------------------------

    def start(self) -> None:
        """Begin pushing cache writes. Must be called from the event loop thread."""
        if self._unsubscribe is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._unsubscribe = self.cache.subscribe(self._on_cache_write)

    def _on_cache_write(self, slot: str, _value: str) -> None:
        key = self.storage_map.get(slot)
        if key is None:
            return
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        self._timers[key] = self._loop.call_later(
            self.debounce_seconds, self._fire, slot, key
        )

    def _fire(self, slot: str, key: str) -> None:
        self._timers.pop(key, None)
        task = self._loop.create_task(self._push(slot, key))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _push(self, slot: str, key: str) -> None:
        raw = self.cache.get_item(slot)
        if not raw:
            return
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Not syncing %s: slot %s holds invalid JSON", key, slot)
            return
        try:
            await self.client.put_user_data(key, value)
        except (GatewayError, ValueError) as exc:
            logger.warning("Failed to sync %s to server: %s", key, exc)

    @property
    def pending_keys(self) -> list[str]:
        return sorted(self._timers)

    async def flush(self) -> None:
        """Push every pending slot now and wait for in-flight pushes."""
        pending = list(self._timers.items())
        self._timers.clear()
        inv = {key: slot for slot, key in self.storage_map.items()}
        for key, handle in pending:
            handle.cancel()
            self._fire(inv[key], key)
        if self._inflight:
            await asyncio.gather(*list(self._inflight))

    def close(self) -> None:
        """Stop observing writes and drop pending timers. In-flight pushes are not cancelled."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

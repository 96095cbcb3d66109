"""Client-side state bridge: local cache, persisted stores and server sync."""

from mediagate.client.api import GatewayClient, GatewayError
from mediagate.client.context import ClientContext
from mediagate.client.local_cache import LocalCache
from mediagate.client.stores import PersistedStore
from mediagate.client.sync import STORAGE_MAP, DataSyncBridge

__all__ = [
    "ClientContext",
    "DataSyncBridge",
    "GatewayClient",
    "GatewayError",
    "LocalCache",
    "PersistedStore",
    "STORAGE_MAP",
]

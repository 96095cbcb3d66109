"""Async HTTP client for the gateway API (cookie session held by httpx)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mediagate.client.local_cache import LocalCache
from mediagate.schemas.auth import UserOut

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class GatewayError(Exception):
    """Raised when the gateway answers with an error status or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code < 400:
        return
    try:
        detail = resp.json().get("detail") or resp.reason_phrase
    except (ValueError, AttributeError):
        detail = resp.text[:200] if resp.text else resp.reason_phrase
    raise GatewayError(str(detail), resp.status_code)


class GatewayClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    A successful ``login`` clears the whole local cache before returning, so
    state cached for a previous user on this device can never be merged into
    the new user's session.
    """

    def __init__(
        self,
        base_url: str,
        cache: LocalCache,
        api_prefix: str = "/api",
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cache = cache
        self.api_prefix = api_prefix.rstrip("/")
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> GatewayClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Gateway request failed: {exc}") from exc

    async def login(self, username: str, password: str) -> UserOut:
        resp = await self._request(
            "POST", "/auth/login", json={"username": username, "password": password}
        )
        _raise_for_status(resp)
        self.cache.clear()
        return UserOut.model_validate(resp.json()["user"])

    async def logout(self) -> None:
        resp = await self._request("POST", "/auth/logout")
        _raise_for_status(resp)
        self._http.cookies.clear()

    async def me(self) -> UserOut | None:
        """Return the current user, or None when the session is missing or stale."""
        resp = await self._request("GET", "/auth/me")
        if resp.status_code == 401:
            return None
        _raise_for_status(resp)
        return UserOut.model_validate(resp.json()["user"])

    async def get_config(self) -> dict[str, Any]:
        resp = await self._request("GET", "/config")
        _raise_for_status(resp)
        return resp.json()

    async def get_user_data(self, key: str) -> Any:
        resp = await self._request("GET", "/user/data", params={"key": key})
        _raise_for_status(resp)
        return resp.json().get("data")

    async def put_user_data(self, key: str, value: Any) -> None:
        resp = await self._request("PUT", "/user/data", json={"key": key, "value": value})
        _raise_for_status(resp)

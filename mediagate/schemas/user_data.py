"""Schemas for per-user data buckets and client configuration."""

from typing import Any

from pydantic import BaseModel

from mediagate.schemas.auth import CamelModel


class UserDataResponse(BaseModel):
    data: Any


class PutUserDataRequest(BaseModel):
    key: str = ""
    value: Any = None


class ClientConfigResponse(CamelModel):
    """Derived configuration the client may see (never secrets)."""

    subscription_sources: str
    disable_premium: bool

"""Client configuration: derived, non-secret values the client needs at boot."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mediagate.core.config import settings
from mediagate.core.database import get_db
from mediagate.schemas.user_data import ClientConfigResponse
from mediagate.services.session import resolve_claims

router = APIRouter()


@router.get("", response_model=ClientConfigResponse)
def get_client_config(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> ClientConfigResponse:
    """
    Return subscription sources and the caller's premium flag.

    disablePremium is read from the stored user and falls back to True
    when the session cannot be resolved.
    """
    user = resolve_claims(db, getattr(request.state, "session", None))
    return ClientConfigResponse(
        subscription_sources=settings.SUBSCRIPTION_SOURCES,
        disable_premium=user.disable_premium if user is not None else True,
    )

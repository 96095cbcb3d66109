"""Per-user data buckets read and written by the client state bridge."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mediagate.api.errors import to_http_exception
from mediagate.api.routes.auth import get_current_user
from mediagate.core.database import get_db
from mediagate.schemas.auth import CurrentUser, SuccessResponse
from mediagate.schemas.user_data import PutUserDataRequest, UserDataResponse
from mediagate.services.user_data import InvalidDataKeyError, get_user_data, set_user_data

router = APIRouter()


@router.get("/data", response_model=UserDataResponse)
def read_data(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    key: Annotated[str | None, Query()] = None,
) -> UserDataResponse:
    """Return one bucket as parsed JSON; unwritten buckets read as {}."""
    try:
        data = get_user_data(db, current_user.id, key)
    except InvalidDataKeyError as exc:
        raise to_http_exception(exc)
    return UserDataResponse(data=data)


@router.put("/data", response_model=SuccessResponse)
def write_data(
    body: PutUserDataRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Overwrite one bucket with the given JSON value (last write wins)."""
    try:
        set_user_data(db, current_user.id, body.key, body.value)
    except InvalidDataKeyError as exc:
        raise to_http_exception(exc)
    return SuccessResponse()

"""Per-user data buckets: opaque JSON blobs keyed by a fixed set of names."""

import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from mediagate.models import UserData

logger = logging.getLogger(__name__)

VALID_DATA_KEYS = frozenset(
    {
        "settings",
        "history",
        "favorites",
        "search-history",
        "premium-history",
        "premium-favorites",
        "search-cache",
        "premium-tags",
    }
)

EMPTY_BUCKET = "{}"


class InvalidDataKeyError(Exception):
    """Raised for bucket keys outside VALID_DATA_KEYS."""

    def __init__(self, key: str | None) -> None:
        self.key = key
        self.message = "Invalid data key."
        super().__init__(self.message)


def validate_key(key: str | None) -> str:
    if not key or key not in VALID_DATA_KEYS:
        raise InvalidDataKeyError(key)
    return key


def get_user_data(db: Session, user_id: int, key: str | None) -> Any:
    """Return the parsed bucket, or an empty object when it was never written."""
    validate_key(key)
    row = db.get(UserData, (user_id, key))
    raw = row.data_value if row is not None and row.data_value else EMPTY_BUCKET
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored bucket is not valid JSON: user_id=%s key=%s", user_id, key)
        return {}


def set_user_data(db: Session, user_id: int, key: str | None, value: Any) -> None:
    """Upsert one bucket; the last write wins."""
    validate_key(key)
    db.merge(UserData(user_id=user_id, data_key=key, data_value=json.dumps(value)))
    db.commit()
    logger.debug("Stored bucket user_id=%s key=%s", user_id, key)

"""Opaque keyset cursors for list endpoints (created_at + id of the last item)."""

import base64
import binascii
import json
import logging
from datetime import datetime

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def clamp_limit(limit: int | None, default: int) -> int:
    if limit is None or limit < 1:
        return default
    return min(limit, MAX_PAGE_SIZE)


def encode_cursor(created_at: datetime, item_id: str) -> str:
    raw = json.dumps({"createdAt": created_at.isoformat(), "id": item_id})
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str | None) -> tuple[datetime, str] | None:
    """Return (created_at, id) or None. A malformed cursor is ignored and the list starts over."""
    if not cursor:
        return None
    try:
        data = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
        return datetime.fromisoformat(data["createdAt"]), str(data["id"])
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError):
        logger.warning("Ignoring invalid pagination cursor")
        return None

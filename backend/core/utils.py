import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import dateparser
from bson import ObjectId

logger = logging.getLogger(__name__)

# Driver/ODM bookkeeping that never leaves the service
INTERNAL_FIELDS = ("__v",)


def to_bson_precision(value: datetime) -> datetime:
    """BSON dates keep milliseconds only"""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    """Naive UTC timestamp, matching what the driver hands back from BSON dates"""
    return to_bson_precision(datetime.now(timezone.utc).replace(tzinfo=None))


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a date-like value to a naive UTC datetime.
    Accepts datetime/date objects, epoch milliseconds (what a JSON client
    sends for Date.getTime()), ISO-8601 strings and looser human formats.
    Returns None when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Epoch milliseconds out of range: {value}")
            return None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            parsed = dateparser.parse(
                text,
                settings={
                    "PREFER_DATES_FROM": "future",
                    "RETURN_AS_TIMEZONE_AWARE": False,
                },
            )
            if parsed is None:
                logger.debug(f"Could not parse datetime from '{text}'")
                return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return to_bson_precision(parsed)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for a valid id string, None otherwise"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored document JSON-ready: string ids, ISO dates, no internals"""
    result = {}
    for key, value in document.items():
        if key in INTERNAL_FIELDS:
            continue
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        result[key] = value
    return result

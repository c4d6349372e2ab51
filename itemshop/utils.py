"""Small helpers: debug printing, local time and object id parsing."""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from bson import ObjectId
from bson.errors import InvalidId

logger = logging.getLogger(__name__)

_ZONE = ZoneInfo("Asia/Bangkok")
_TIME_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))? ([+-])(\d{2})(\d{2}) ([A-Za-z]+)"
)


def _json_default(obj):
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def debug(obj) -> None:
    """Print ``obj`` as tab-indented JSON."""
    try:
        raw = json.dumps(obj, indent="\t", default=_json_default)
    except (TypeError, ValueError):
        raw = ""
    print(raw)


def local_time() -> datetime:
    """Return the current time in the Asia/Bangkok zone."""
    return datetime.now(_ZONE)


def convert_string_time_to_time(text: str) -> datetime:
    """Parse ``2006-01-02T15:04:05.999 -0700 MST`` style text into Bangkok time.

    Unparseable text is logged and yields the zero time.
    """
    match = _TIME_PATTERN.fullmatch(text)
    result = None
    if match:
        year, month, day, hour, minute, second, frac, sign, oh, om, _ = match.groups()
        offset = timedelta(hours=int(oh), minutes=int(om))
        if sign == "-":
            offset = -offset
        micro = int((frac or "0")[:6].ljust(6, "0"))
        try:
            result = datetime(
                int(year), int(month), int(day), int(hour), int(minute), int(second),
                micro, tzinfo=timezone(offset),
            )
        except ValueError:
            result = None
    if result is None:
        logger.error("Error: Parse time failed : cannot parse %r", text)
        result = datetime(1, 1, 1, tzinfo=timezone.utc)
    return result.astimezone(_ZONE)


def convert_to_object(object_id: str) -> ObjectId:
    """Parse a hex object id; invalid input yields the all-zero id."""
    try:
        return ObjectId(object_id)
    except (InvalidId, TypeError):
        return ObjectId(bytes(12))
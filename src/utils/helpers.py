"""
Utility functions and helpers
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config.settings import ADMIN_TIMEZONE

logger = logging.getLogger(__name__)

def local_timezone(name: Optional[str] = None) -> ZoneInfo:
    """Zone used for wall-clock display and datetime-local inputs"""
    zone_name = name or ADMIN_TIMEZONE
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{zone_name}', falling back to UTC")
        return ZoneInfo("UTC")

def parse_store_timestamp(timestamp_str: Any) -> Optional[datetime]:
    """
    Parse a timestamp as stored by the record store.

    Accepts ISO strings with 'Z' or an explicit offset, and the store's
    space-separated form ("2024-05-01 14:30:00.000Z"). Naive values are
    taken as UTC. Returns None for empty or unparseable input.
    """
    if not timestamp_str or not isinstance(timestamp_str, str):
        return None
    value = timestamp_str.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    if len(value) > 10 and value[10] == ' ':
        value = value[:10] + 'T' + value[11:]
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        logger.warning(f"Failed to parse timestamp '{timestamp_str}': {e}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)

def format_utc_iso(moment: datetime) -> str:
    """Absolute timestamp in the store's wire form: 2024-05-01T14:30:00.000Z"""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

def resolve_path(record: Optional[Mapping[str, Any]], path: str) -> Any:
    """Follow a dot-separated attribute path; None when any hop is missing"""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current

"""
Display rules for list cells
"""

import math
from typing import Any, Dict, Mapping, Optional

from utils.helpers import local_timezone, parse_store_timestamp

EMPTY = "—"

def yes_no(value: Any) -> str:
    return "Yes" if value else "No"

def text_or_dash(value: Any) -> str:
    """Raw value, or an em-dash when nothing is set"""
    if value is None or value == "":
        return EMPTY
    if isinstance(value, bool):
        return yes_no(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else EMPTY
    return str(value)

def format_usd(value: Any) -> str:
    """Currency text for a cost-like value; em-dash when not numeric"""
    try:
        amount = float(value if value not in (None, "") else 0)
    except (TypeError, ValueError):
        return EMPTY
    if math.isnan(amount):
        return EMPTY
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"

def format_local(value: Any, tz_name: Optional[str] = None) -> str:
    """Locale-style wall-clock text (M/D/YYYY, h:mm:ss AM) in the admin timezone"""
    moment = parse_store_timestamp(value)
    if moment is None:
        return EMPTY
    local = moment.astimezone(local_timezone(tz_name))
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {suffix}"

def expanded(record: Mapping[str, Any], key: str) -> Any:
    """Related record(s) the store resolved for a relation key"""
    expand = record.get("expand") or {}
    if not isinstance(expand, Mapping):
        return None
    return expand.get(key)

def render_cell(column, record: Dict[str, Any]) -> str:
    """Apply a column's render rule, defaulting to the raw attribute"""
    if column.render is not None:
        return column.render(record)
    return text_or_dash(record.get(column.key))

"""
Mailing list service - lead listing by look-back window, CSV export
"""

import calendar
import csv
import io
import logging
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from config.settings import MAILING_LIST_LIMIT
from models.enums import TimeRange
from models.record import Record
from services.record_gateway import RecordGateway, escape_filter_value
from utils.display import format_local
from utils.helpers import format_utc_iso

logger = logging.getLogger(__name__)

COLLECTION = "mailing_list"
SEARCH_FIELDS = ["fname", "lname", "email", "phone"]
CSV_COLUMNS = ["fname", "lname", "email", "phone", "created"]
DEFAULT_RANGE = TimeRange.ONE_MONTH

def _shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole months, clamping the day to the target month's length"""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)

def parse_range(value: Optional[str]) -> TimeRange:
    """Unknown range keys fall back to one month"""
    try:
        return TimeRange(value)
    except ValueError:
        return DEFAULT_RANGE

def compute_range_start(range_key: TimeRange, now: datetime) -> datetime:
    """
    Start of a look-back window

    Args:
        range_key: Window to apply
        now: Current time, timezone-aware in the admin's zone

    Returns:
        Aware datetime; year-to-date starts at local midnight on January 1st
    """
    if range_key == TimeRange.YEAR_TO_DATE:
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    if range_key == TimeRange.ONE_DAY:
        return now - timedelta(days=1)
    if range_key == TimeRange.ONE_WEEK:
        return now - timedelta(days=7)
    if range_key == TimeRange.SIX_MONTHS:
        return _shift_months(now, -6)
    if range_key == TimeRange.ONE_YEAR:
        return _shift_months(now, -12)
    return _shift_months(now, -1)


def build_mailing_list_filter(start: datetime, query: Optional[str]) -> str:
    """created >= start, optionally narrowed by a contains search"""
    window = f'created >= "{format_utc_iso(start)}"'
    text = (query or "").strip()
    if not text:
        return window
    literal = escape_filter_value(text)
    search = " || ".join(f'{attr} ~ "{literal}"' for attr in SEARCH_FIELDS)
    return f"{window} && ({search})"

def leads_to_csv(rows: Sequence[Record], tz_name: Optional[str] = None) -> str:
    """CSV text with a header row; created rendered as local wall-clock text"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow([
            row.get("fname") or "",
            row.get("lname") or "",
            row.get("email") or "",
            row.get("phone") or "",
            format_local(row.get("created"), tz_name) if row.get("created") else "",
        ])
    return buffer.getvalue()

class MailingListService:
    """Service for mailing list lead operations"""

    def __init__(self, gateway: RecordGateway, tz: tzinfo):
        self.gateway = gateway
        self.tz = tz

    async def list_leads(
        self,
        range_key: TimeRange = DEFAULT_RANGE,
        query: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[Record]:
        """Leads created inside the window, newest first"""
        current = (now or datetime.now(self.tz)).astimezone(self.tz)
        start = compute_range_start(range_key, current)
        result = await self.gateway.list_records(
            COLLECTION,
            page=1,
            per_page=MAILING_LIST_LIMIT,
            sort="-created",
            filter_expr=build_mailing_list_filter(start, query)
        )
        logger.info(f"Loaded {len(result.items)} lead(s) for range {range_key.value}")
        return result.items

    async def delete_lead(self, record_id: str) -> None:
        await self.gateway.delete_record(COLLECTION, record_id)

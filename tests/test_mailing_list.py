"""
Mailing list windows, filters and CSV export
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from models.enums import TimeRange
from services.mailing_list_service import (
    MailingListService, build_mailing_list_filter, compute_range_start, leads_to_csv, parse_range
)

LA = ZoneInfo("America/Los_Angeles")
NOW = datetime(2024, 3, 31, 10, 0, tzinfo=LA)

class TestRangeStart:

    @pytest.mark.parametrize("range_key,expected", [
        (TimeRange.ONE_DAY, datetime(2024, 3, 30, 10, 0, tzinfo=LA)),
        (TimeRange.ONE_WEEK, datetime(2024, 3, 24, 10, 0, tzinfo=LA)),
        (TimeRange.ONE_MONTH, datetime(2024, 2, 29, 10, 0, tzinfo=LA)),
        (TimeRange.SIX_MONTHS, datetime(2023, 9, 30, 10, 0, tzinfo=LA)),
        (TimeRange.ONE_YEAR, datetime(2023, 3, 31, 10, 0, tzinfo=LA)),
        (TimeRange.YEAR_TO_DATE, datetime(2024, 1, 1, 0, 0, tzinfo=LA)),
    ])
    def test_window_start(self, range_key, expected):
        assert compute_range_start(range_key, NOW) == expected

    def test_unknown_range_defaults_to_one_month(self):
        assert parse_range("3w") == TimeRange.ONE_MONTH
        assert parse_range(None) == TimeRange.ONE_MONTH
        assert parse_range("ytd") == TimeRange.YEAR_TO_DATE

class TestFilter:

    def test_window_only(self):
        start = datetime(2024, 2, 29, 10, 0, tzinfo=LA)
        assert build_mailing_list_filter(start, "") == 'created >= "2024-02-29T18:00:00.000Z"'

    def test_window_and_search(self):
        start = datetime(2024, 2, 29, 10, 0, tzinfo=LA)
        assert build_mailing_list_filter(start, "ada") == (
            'created >= "2024-02-29T18:00:00.000Z" && '
            '(fname ~ "ada" || lname ~ "ada" || email ~ "ada" || phone ~ "ada")'
        )

class TestMailingListService:

    @pytest.mark.asyncio
    async def test_list_leads_newest_first_with_limit(self, store, gateway):
        store.on("GET", "/api/admin/mailing_list", payload={"items": [{"id": "l1", "email": "a@b.co"}]})
        service = MailingListService(gateway, LA)
        leads = await service.list_leads(TimeRange.ONE_WEEK, now=NOW)
        params = store.params()
        assert [lead["id"] for lead in leads] == ["l1"]
        assert params["sort"] == "-created"
        assert params["perPage"] == "500"
        assert params["filter"] == 'created >= "2024-03-24T17:00:00.000Z"'

    @pytest.mark.asyncio
    async def test_delete_lead(self, store, gateway):
        store.on("DELETE", "/api/admin/mailing_list/l1", status=204)
        await MailingListService(gateway, LA).delete_lead("l1")
        assert store.calls() == ["DELETE /api/admin/mailing_list/l1"]

class TestCsvExport:

    def test_header_and_rows(self):
        rows = [
            {"fname": "Ada", "lname": "Lovelace", "email": "ada@x.co", "phone": "555",
             "created": "2024-01-16 04:00:00.000Z"},
            {"fname": "Bo", "email": "bo@x.co"},
        ]
        assert leads_to_csv(rows, "America/Los_Angeles").splitlines() == [
            "fname,lname,email,phone,created",
            'Ada,Lovelace,ada@x.co,555,"1/15/2024, 8:00:00 PM"',
            "Bo,,bo@x.co,,",
        ]

    def test_empty_export_has_header_only(self):
        assert leads_to_csv([]) == "fname,lname,email,phone,created\n"

"""
Public catalog service - read-only data behind the marketing pages
"""

import logging
from typing import List, Optional

from config.settings import NAV_PAGES_LIMIT
from models.record import Record
from services.record_gateway import GatewayError, RecordGateway

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/api/public"

class CatalogService:
    """Teams, test categories, tests and navigation pages"""

    def __init__(self, gateway: RecordGateway):
        self.gateway = gateway

    async def _collection(self, path: str, key: str) -> List[Record]:
        payload = await self.gateway.request("GET", f"{PUBLIC_PREFIX}/{path}")
        items = payload.get(key) if isinstance(payload, dict) else None
        return items if isinstance(items, list) else []

    async def get_teams(self) -> List[Record]:
        return await self._collection("teams", "teams")

    async def get_categories(self) -> List[Record]:
        return await self._collection("categories", "categories")

    async def get_tests(self) -> List[Record]:
        return await self._collection("tests", "tests")

    async def get_test(self, test_id: str) -> Optional[Record]:
        """One test, or None when the store does not know it"""
        try:
            payload = await self.gateway.request("GET", f"{PUBLIC_PREFIX}/tests/{test_id}")
        except GatewayError as e:
            if e.status == 404:
                return None
            raise
        test = payload.get("test") if isinstance(payload, dict) else None
        return test if isinstance(test, dict) else None

    async def get_nav_pages(self) -> List[Record]:
        """
        Navigation entries in display order.

        The store's list rule already filters by role, publish flag and
        window; sorting by order then label keeps the result stable.
        """
        payload = await self.gateway.request(
            "GET",
            "/api/collections/pages/records",
            params={"page": 1, "perPage": NAV_PAGES_LIMIT, "sort": "order,label"}
        )
        items = payload.get("items") if isinstance(payload, dict) else None
        return items if isinstance(items, list) else []

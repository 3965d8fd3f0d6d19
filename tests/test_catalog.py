"""
Public catalog reads
"""

import pytest

from services.catalog_service import CatalogService
from services.record_gateway import GatewayError

class TestCatalogService:

    @pytest.mark.asyncio
    async def test_collections_are_unwrapped(self, store, gateway):
        store.on("GET", "/api/public/teams", payload={"teams": [{"id": "tm1", "title": "Lab"}]})
        store.on("GET", "/api/public/categories", payload={"categories": [{"id": "c1"}]})
        store.on("GET", "/api/public/tests", payload={})
        service = CatalogService(gateway)
        assert await service.get_teams() == [{"id": "tm1", "title": "Lab"}]
        assert await service.get_categories() == [{"id": "c1"}]
        assert await service.get_tests() == []

    @pytest.mark.asyncio
    async def test_single_test(self, store, gateway):
        store.on("GET", "/api/public/tests/t1", payload={"test": {"id": "t1", "name": "A1C"}})
        assert (await CatalogService(gateway).get_test("t1"))["name"] == "A1C"

    @pytest.mark.asyncio
    async def test_unknown_test_is_none(self, store, gateway):
        store.on("GET", "/api/public/tests/zz", status=404, payload={"error": "Not found"})
        assert await CatalogService(gateway).get_test("zz") is None

    @pytest.mark.asyncio
    async def test_other_failures_propagate(self, store, gateway):
        store.on("GET", "/api/public/tests/t1", status=500, payload={"error": "boom"})
        with pytest.raises(GatewayError):
            await CatalogService(gateway).get_test("t1")

    @pytest.mark.asyncio
    async def test_nav_pages_sorted_by_order_then_label(self, store, gateway):
        store.on("GET", "/api/collections/pages/records", payload={"items": [{"id": "p1", "label": "Home"}]})
        pages = await CatalogService(gateway).get_nav_pages()
        assert [p["label"] for p in pages] == ["Home"]
        assert store.params() == {"page": "1", "perPage": "200", "sort": "order,label"}

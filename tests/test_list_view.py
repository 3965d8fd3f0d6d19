"""
List view controller: loading, search, stale responses, deletes
"""

import asyncio

import httpx
import pytest

from conftest import STORE_URL, make_token
from schema.registry import get_schema
from services.record_gateway import RecordGateway, Session
from views.list_view import EMPTY_MESSAGE, ListView

def _serve_list(store, collection, items):
    store.on("GET", f"/api/admin/{collection}", payload={"items": items})

class TestListLoading:

    @pytest.mark.asyncio
    async def test_load_uses_collection_sort_and_expansion(self, store, gateway):
        _serve_list(store, "test", [{"id": "t1", "name": "Lipid panel", "cost": 49}])
        view = ListView(gateway, get_schema("test"))
        await view.load()
        params = store.params()
        assert params["sort"] == "-updated"
        assert params["expand"] == "cat_id,included_test"
        assert params["perPage"] == "100"
        assert "filter" not in params
        assert view.rows()[0][1][1] == "Lipid panel"
        assert view.rows()[0][1][3] == "$49.00"

    @pytest.mark.asyncio
    async def test_search_sends_filter(self, store, gateway):
        _serve_list(store, "pages", [])
        view = ListView(gateway, get_schema("pages"))
        await view.search("tests")
        assert store.params()["filter"] == 'label ~ "tests" || path ~ "tests" || external_url ~ "tests"'
        assert view.is_empty
        assert view.snapshot()["empty_message"] == EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_failure_shows_error_instead_of_rows(self, store, gateway):
        store.on("GET", "/api/admin/cart", status=403, payload={"message": "Only admins can list carts"})
        view = ListView(gateway, get_schema("cart"))
        await view.load()
        assert view.error == "Only admins can list carts"
        assert view.items == []
        assert not view.is_empty
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, store):
        release = asyncio.Event()
        started = asyncio.Event()

        async def transport(request):
            if request.url.path == "/api/admin/pages":
                started.set()
                await release.wait()
                return httpx.Response(200, json={"items": [{"id": "old"}]})
            return store(request)

        _serve_list(store, "ws_users", [{"id": "u1", "email": "a@b.co"}])
        gateway = RecordGateway(Session(STORE_URL, make_token()), transport=httpx.MockTransport(transport))

        view = ListView(gateway, get_schema("pages"))
        pending = asyncio.create_task(view.load())
        await started.wait()
        view.select_collection(get_schema("ws_users"))
        await view.load()
        release.set()
        await pending

        assert [r["id"] for r in view.items] == ["u1"]
        assert view.schema.name == "ws_users"
        await gateway.aclose()

class TestListDelete:

    @pytest.mark.asyncio
    async def test_declined_prompt_leaves_records_untouched(self, store, gateway):
        _serve_list(store, "testimonial", [{"id": "x1"}])
        prompts = []
        view = ListView(gateway, get_schema("testimonial"), confirm=lambda msg: prompts.append(msg) or False)
        await view.load()

        assert await view.delete({"id": "x1"}) is False
        assert prompts == ["Delete this testimonial record?"]
        assert store.calls("DELETE") == []
        assert [r["id"] for r in view.items] == ["x1"]

    @pytest.mark.asyncio
    async def test_confirmed_delete_refreshes_the_list(self, store, gateway):
        remaining = [{"id": "x1"}, {"id": "x2"}]
        store.on("GET", "/api/admin/testimonial", handler=lambda r: httpx.Response(200, json={"items": list(remaining)}))

        def delete(request):
            remaining.pop(0)
            return httpx.Response(204)

        store.on("DELETE", "/api/admin/testimonial/x1", handler=delete)

        async def confirm(message):
            return True

        view = ListView(gateway, get_schema("testimonial"), confirm=confirm)
        await view.load()
        assert await view.delete(view.items[0]) is True
        assert [r["id"] for r in view.items] == ["x2"]

    @pytest.mark.asyncio
    async def test_failed_delete_reports_error(self, store, gateway):
        _serve_list(store, "testimonial", [{"id": "x1"}])
        store.on("DELETE", "/api/admin/testimonial/x1", status=400, payload={"error": "Record is referenced"})
        view = ListView(gateway, get_schema("testimonial"), confirm=lambda msg: True)
        await view.load()
        assert await view.delete({"id": "x1"}) is False
        assert view.error == "Record is referenced"

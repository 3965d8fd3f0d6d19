"""
Edit view controller: seeding, gated pickers, self-exclusion, saving
"""

from zoneinfo import ZoneInfo

import pytest

from conftest import multipart_fields, multipart_filenames
from models.enums import EditState
from models.form import UploadedFile
from schema.registry import get_schema
from views.edit_view import EditView

LA = ZoneInfo("America/Los_Angeles")

TEST_RECORD = {
    "id": "t1",
    "name": "Wellness bundle",
    "cat_id": "c1",
    "cost": 120,
    "top_level_test": True,
    "included_test": ["t2"],
}

def _serve_test_options(store):
    store.on("GET", "/api/admin/test_category", payload={"items": [{"id": "c1", "name": "Blood"}]})
    store.on("GET", "/api/admin/test", payload={"items": [
        {"id": "t1", "name": "Wellness bundle"},
        {"id": "t2", "name": "Lipid panel"},
        {"id": "t3", "name": "A1C"},
    ]})

class TestOpening:

    @pytest.mark.asyncio
    async def test_open_seeds_draft_and_loads_options(self, store, gateway):
        _serve_test_options(store)
        view = EditView(gateway, get_schema("test"), LA)
        await view.open(TEST_RECORD)
        assert view.state == EditState.EDITING
        assert view.title == "Edit test"
        assert view.draft["included_test"] == ["t2"]
        assert [o.label for o in view.options["cat_id"]] == ["Blood"]

    @pytest.mark.asyncio
    async def test_new_record_title_and_empty_draft(self, store, gateway):
        _serve_test_options(store)
        view = EditView(gateway, get_schema("test"), LA)
        await view.open()
        assert view.is_new
        assert view.title == "Add test"
        assert view.draft["name"] == ""
        assert view.draft["top_level_test"] is False

    @pytest.mark.asyncio
    async def test_datetime_fields_are_seeded_as_local_wall_clock(self, store, gateway):
        view = EditView(gateway, get_schema("pages"), LA)
        await view.open({"id": "p1", "label": "Sale", "start_at": "2024-11-29T08:00:00.000Z"})
        assert view.draft["start_at"] == "2024-11-29T00:00"

    @pytest.mark.asyncio
    async def test_close_discards_draft(self, store, gateway):
        view = EditView(gateway, get_schema("testimonial"), LA)
        await view.open({"id": "x1", "name": "Sam"})
        view.set_value("name", "Samantha")
        view.close()
        assert view.state == EditState.CLOSED
        assert view.draft == {}
        with pytest.raises(RuntimeError):
            view.set_value("name", "late edit")

class TestIncludedTestsPicker:

    @pytest.mark.asyncio
    async def test_picker_hidden_until_top_level_is_checked(self, store, gateway):
        _serve_test_options(store)
        view = EditView(gateway, get_schema("test"), LA)
        await view.open({**TEST_RECORD, "top_level_test": False})
        field = view.schema.get_field("included_test")
        assert not view.is_visible(field)
        view.set_value("top_level_test", True)
        assert view.is_visible(field)

    @pytest.mark.asyncio
    async def test_own_record_is_disabled_and_never_submitted(self, store, gateway):
        _serve_test_options(store)
        view = EditView(gateway, get_schema("test"), LA)
        await view.open({**TEST_RECORD, "included_test": ["t1", "t2"]})
        field = view.schema.get_field("included_test")

        options = {o.id: o for o in view.picker_options(field)}
        assert options["t1"].disabled
        assert not options["t2"].disabled
        assert options["t2"].checked

        view.toggle_value("included_test", "t1")
        view.toggle_value("included_test", "t3")
        assert view.build_submission().get_all("included_test") == ["t2", "t3"]

    @pytest.mark.asyncio
    async def test_new_record_has_no_disabled_option(self, store, gateway):
        _serve_test_options(store)
        view = EditView(gateway, get_schema("test"), LA)
        await view.open()
        field = view.schema.get_field("included_test")
        assert not any(o.disabled for o in view.picker_options(field))

class TestSaving:

    @pytest.mark.asyncio
    async def test_existing_record_is_updated(self, store, gateway):
        _serve_test_options(store)
        store.on("PATCH", "/api/admin/test/t1", payload={"id": "t1", "name": "Bundle"})
        saved = []
        view = EditView(gateway, get_schema("test"), LA, on_saved=saved.append)
        await view.open(TEST_RECORD)
        view.set_value("name", "Bundle")
        view.set_value("cost", "abc")

        assert await view.save() is True
        assert view.state == EditState.CLOSED
        assert saved == [{"id": "t1", "name": "Bundle"}]
        fields = dict(multipart_fields(store.requests[-1]))
        assert fields["name"] == "Bundle"
        assert fields["cost"] == ""
        assert fields["available"] == "false"

    @pytest.mark.asyncio
    async def test_new_record_is_created(self, store, gateway):
        store.on("POST", "/api/admin/testimonial", payload={"item": {"id": "x9"}})
        view = EditView(gateway, get_schema("testimonial"), LA)
        await view.open()
        view.set_value("name", "Sam")
        view.set_value("show", True)
        assert await view.save() is True
        assert store.calls("POST") == ["POST /api/admin/testimonial"]

    @pytest.mark.asyncio
    async def test_failed_save_alerts_and_keeps_the_draft(self, store, gateway):
        store.on("POST", "/api/admin/testimonial", status=400, payload={"message": "rating: must be 1-5"})
        alerts = []
        view = EditView(gateway, get_schema("testimonial"), LA, alert=alerts.append)
        await view.open()
        view.set_value("rating", "9")

        assert await view.save() is False
        assert alerts == ["rating: must be 1-5"]
        assert view.state == EditState.EDITING
        assert view.draft["rating"] == "9"

    @pytest.mark.asyncio
    async def test_page_with_path_and_external_url_saves(self, store, gateway):
        store.on("POST", "/api/admin/pages", payload={"id": "p5"})
        view = EditView(gateway, get_schema("pages"), LA)
        await view.open()
        view.set_value("label", "Partners")
        view.set_value("path", "/partners")
        view.set_value("external_url", "https://partners.example.com")
        assert await view.save() is True
        fields = multipart_fields(store.requests[-1])
        assert ("path", "/partners") in fields
        assert ("external_url", "https://partners.example.com") in fields
        assert ("roles", "") in fields

    @pytest.mark.asyncio
    async def test_chosen_image_is_uploaded(self, store, gateway):
        store.on("PATCH", "/api/admin/team_members/m1", payload={"id": "m1"})
        view = EditView(gateway, get_schema("team_members"), LA)
        await view.open({"id": "m1", "name": "Ada", "image": "ada_old.png"})
        view.choose_file("image", UploadedFile("ada.png", b"\x89PNG", "image/png"))
        assert await view.save() is True
        assert multipart_filenames(store.requests[-1]) == ["ada.png"]

    @pytest.mark.asyncio
    async def test_save_ignored_unless_editing(self, store, gateway):
        view = EditView(gateway, get_schema("testimonial"), LA)
        assert await view.save() is False
        assert store.calls() == []

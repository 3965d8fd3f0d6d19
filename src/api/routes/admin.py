"""
Admin console routes - collection lists, create/edit forms, deletes
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from starlette.datastructures import FormData, UploadFile

from api.templating import render
from models.form import UploadedFile
from schema.base import (
    RELATION_KINDS, CheckboxField, CollectionSchema, FileField, JsonField, MultiRelationField,
    MultiSelectField
)
from schema.registry import get_menu, get_schema
from services.record_gateway import GatewayError
from services.site_settings_service import SiteSettingsService
from utils.auth import AdminContext, AuthConfig
from utils.form_encoding import json_container, json_text
from utils.helpers import local_timezone
from views.edit_view import EditView
from views.list_view import ListView

router = APIRouter()
logger = logging.getLogger(__name__)

def _list_url(collection: str) -> str:
    return f"/admin/{collection}"

def _record_url(schema: CollectionSchema, record_id: Optional[str]) -> str:
    return _list_url(schema.name) + ("/" + record_id if record_id else "/new")

def _safe_return(value: Any) -> Optional[str]:
    """Post-save destination, only ever a console path"""
    if isinstance(value, str) and value.startswith("/admin/"):
        return value
    return None

def _with_return(url: str, return_to: Optional[str]) -> str:
    return f"{url}?return_to={quote(return_to, safe='')}" if return_to else url

async def _read_upload(value: Any) -> Optional[UploadedFile]:
    """A chosen file, or None when the file input was left empty"""
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    content = await value.read()
    return UploadedFile(
        filename=value.filename,
        content=content,
        content_type=value.content_type or "application/octet-stream"
    )

async def apply_form(view: EditView, form: FormData) -> List[str]:
    """
    Copy a browser form post into the open draft, one field kind at a time

    Returns:
        One message per field whose text could not be read; empty when the
        draft is ready to save.
    """
    problems: List[str] = []
    for field in view.schema.form_fields:
        if isinstance(field, CheckboxField):
            # Unchecked boxes are absent from the post
            view.set_value(field.key, form.get(field.key) is not None)
        elif isinstance(field, (MultiSelectField, MultiRelationField)):
            view.set_value(field.key, [v for v in form.getlist(field.key) if isinstance(v, str) and v])
        elif isinstance(field, FileField):
            upload = await _read_upload(form.get(field.key))
            if upload is not None:
                view.choose_file(field.key, upload)
        elif isinstance(field, JsonField):
            text = form.get(field.key)
            text = text.strip() if isinstance(text, str) else ""
            try:
                parsed = json.loads(text) if text else None
            except json.JSONDecodeError:
                problems.append(f"{field.label}: Invalid JSON")
                # Typed text stays in the draft so the form shows it again
                view.set_value(field.key, text)
            else:
                view.set_value(field.key, json_container(parsed, field.shape))
        else:
            value = form.get(field.key)
            view.set_value(field.key, value if isinstance(value, str) else "")
    return problems

def _widget_context(view: EditView) -> List[Dict[str, Any]]:
    """Per-field render data for edit.html"""
    here = _record_url(view.schema, view.record_id)
    widgets = []
    for field in view.schema.form_fields:
        widget: Dict[str, Any] = {
            "field": field,
            "kind": field.kind.value,
            "value": view.draft.get(field.key),
            "visible": view.is_visible(field),
        }
        if isinstance(field, FileField):
            current = view.draft.get(field.key)
            widget["current"] = current if isinstance(current, str) else None
        if isinstance(field, JsonField):
            value = view.draft.get(field.key)
            widget["text"] = value if isinstance(value, str) else json_text(value)
        if field.kind in RELATION_KINDS:
            widget["options"] = view.picker_options(field)
        if isinstance(field, MultiRelationField) and not get_schema(field.collection).in_menu:
            # Records outside the side navigation are managed from this form
            widget["manage"] = {
                "new": _with_return(_list_url(field.collection) + "/new", here),
                "base": _list_url(field.collection),
                "back": quote(here, safe=""),
            }
        widgets.append(widget)
    return widgets

def _edit_page(
    request: Request,
    view: EditView,
    alert: Optional[str] = None,
    status_code: int = 200,
    return_to: Optional[str] = None
):
    delete_url = None
    if view.record_id:
        delete_url = _with_return(f"{_record_url(view.schema, view.record_id)}/delete", return_to)
    return render(
        request,
        "edit.html",
        {
            "schema": view.schema,
            "title": view.title,
            "record_id": view.record_id,
            "widgets": _widget_context(view),
            "alert": alert,
            "action": _record_url(view.schema, view.record_id),
            "return_to": return_to,
            "close": return_to or _list_url(view.schema.name),
            "delete_url": delete_url,
        },
        active=view.schema.name,
        status_code=status_code
    )

async def _open_edit(ctx: AdminContext, schema: CollectionSchema, record_id: Optional[str], alerts: List[str]) -> EditView:
    view = EditView(ctx.gateway, schema, local_timezone(), alert=alerts.append)
    record = None
    if record_id:
        fetched = await ctx.gateway.get_record(schema.name, record_id)
        # The addressed id decides update vs create, whatever the body carries
        record = {**fetched, "id": record_id}
    await view.open(record)
    return view

def _record_unavailable(request: Request, schema: CollectionSchema, record_id: Optional[str], error: GatewayError):
    logger.error(f"Failed to load {schema.name} {record_id}: {error.message}")
    return render(
        request,
        "error.html",
        {"title": "Record unavailable", "message": error.message, "trace_id": None},
        active=schema.name,
        status_code=404 if error.status == 404 else 502
    )

@router.get("")
async def admin_index(
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Land on the first collection of the side navigation"""
    first = get_menu()[0]
    return RedirectResponse(_list_url(first.key), status_code=303)

@router.post("/pages/settings")
async def update_site_settings(
    show_footer: Optional[str] = Form(None),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Footer switch shown above the pages list"""
    service = SiteSettingsService(ctx.gateway)
    await service.set_show_footer(show_footer is not None)
    return RedirectResponse(_list_url("pages"), status_code=303)

@router.get("/{collection}")
async def list_collection(
    request: Request,
    collection: str,
    q: str = Query("", description="Free-text search"),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """List one collection, optionally filtered by a search query"""
    schema = get_schema(collection)
    view = ListView(ctx.gateway, schema)
    await view.search(q)

    settings = None
    if schema.name == "pages":
        settings = await SiteSettingsService(ctx.gateway).get_settings()

    return render(
        request,
        "list.html",
        {"view": view.snapshot(), "schema": schema, "settings": settings},
        active=schema.name
    )

@router.get("/{collection}/new")
async def new_record_form(
    request: Request,
    collection: str,
    return_to: str = Query("", description="Console path to land on after saving"),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    schema = get_schema(collection)
    view = await _open_edit(ctx, schema, None, [])
    return _edit_page(request, view, return_to=_safe_return(return_to))

@router.get("/{collection}/{record_id}")
async def edit_record_form(
    request: Request,
    collection: str,
    record_id: str,
    return_to: str = Query("", description="Console path to land on after saving"),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    schema = get_schema(collection)
    try:
        view = await _open_edit(ctx, schema, record_id, [])
    except GatewayError as e:
        return _record_unavailable(request, schema, record_id, e)
    return _edit_page(request, view, return_to=_safe_return(return_to))

async def _save(request: Request, ctx: AdminContext, collection: str, record_id: Optional[str]):
    schema = get_schema(collection)
    alerts: List[str] = []
    try:
        view = await _open_edit(ctx, schema, record_id, alerts)
    except GatewayError as e:
        return _record_unavailable(request, schema, record_id, e)
    form = await request.form()
    return_to = _safe_return(form.get("return_to"))

    problems = await apply_form(view, form)
    if problems:
        logger.info(f"Not saving {schema.name}: {len(problems)} unreadable field(s)")
        return _edit_page(request, view, alert="; ".join(problems), status_code=400, return_to=return_to)

    if await view.save():
        return RedirectResponse(return_to or _list_url(schema.name), status_code=303)
    alert = alerts[-1] if alerts else "Save failed"
    return _edit_page(request, view, alert=alert, status_code=400, return_to=return_to)

@router.post("/{collection}/new")
async def create_record(
    request: Request,
    collection: str,
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Create a record from the posted form"""
    return await _save(request, ctx, collection, None)

@router.get("/{collection}/{record_id}/delete")
async def confirm_delete(
    request: Request,
    collection: str,
    record_id: str,
    return_to: str = Query(""),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    schema = get_schema(collection)
    back = _safe_return(return_to)
    return render(
        request,
        "confirm_delete.html",
        {
            "message": f"Delete this {schema.name} record?",
            "action": f"{_list_url(schema.name)}/{record_id}/delete",
            "cancel": back or _list_url(schema.name),
            "return_to": back,
        },
        active=schema.name
    )

@router.post("/{collection}/{record_id}/delete")
async def delete_record(
    request: Request,
    collection: str,
    record_id: str,
    confirm: str = Form(""),
    return_to: str = Form(""),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Delete after the confirmation page answered yes"""
    schema = get_schema(collection)
    view = ListView(ctx.gateway, schema, confirm=lambda _: confirm == "yes")
    deleted = await view.delete({"id": record_id})
    if deleted or view.error is None:
        return RedirectResponse(_safe_return(return_to) or _list_url(schema.name), status_code=303)

    error = view.error
    await view.load()
    view.error = error
    return render(
        request,
        "list.html",
        {"view": view.snapshot(), "schema": schema, "settings": None},
        active=schema.name,
        status_code=400
    )

@router.post("/{collection}/{record_id}")
async def update_record(
    request: Request,
    collection: str,
    record_id: str,
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Save the posted form over an existing record"""
    return await _save(request, ctx, collection, record_id)

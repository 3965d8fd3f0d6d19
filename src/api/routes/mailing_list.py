"""
Mailing list routes - lead table, CSV export, deletes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse, Response

from api.templating import render
from config.settings import ADMIN_TIMEZONE
from models.enums import TimeRange
from schema.registry import MAILING_LIST
from services.mailing_list_service import MailingListService, leads_to_csv, parse_range
from services.record_gateway import GatewayError
from utils.auth import AdminContext, AuthConfig
from utils.display import format_local
from utils.helpers import local_timezone

router = APIRouter()
logger = logging.getLogger(__name__)

LIST_URL = f"/admin/{MAILING_LIST}"

RANGE_LABELS = [
    (TimeRange.ONE_DAY, "Last day"),
    (TimeRange.ONE_WEEK, "Last week"),
    (TimeRange.ONE_MONTH, "Last month"),
    (TimeRange.SIX_MONTHS, "Last 6 months"),
    (TimeRange.ONE_YEAR, "Last year"),
    (TimeRange.YEAR_TO_DATE, "Year to date"),
]

def _service(ctx: AdminContext) -> MailingListService:
    return MailingListService(ctx.gateway, local_timezone())

async def _leads_page(
    request: Request,
    ctx: AdminContext,
    range_key: TimeRange,
    q: str,
    error: Optional[str] = None,
    status_code: int = 200
):
    """Lead table; a load failure (or an earlier one) shows as an inline panel"""
    leads = []
    try:
        leads = await _service(ctx).list_leads(range_key, q)
    except GatewayError as e:
        logger.error(f"Failed to load mailing list: {e.message}")
        error = error or e.message

    rows = [
        {
            "id": lead.get("id"),
            "name": " ".join(p for p in (lead.get("fname"), lead.get("lname")) if p),
            "email": lead.get("email") or "",
            "phone": lead.get("phone") or "",
            "created": format_local(lead.get("created"), ADMIN_TIMEZONE),
        }
        for lead in leads
    ]
    return render(
        request,
        "mailing_list.html",
        {
            "rows": rows,
            "error": error,
            "query": q,
            "range": range_key.value,
            "ranges": [(key.value, label) for key, label in RANGE_LABELS],
        },
        active=MAILING_LIST,
        status_code=status_code
    )

@router.get("")
async def list_leads(
    request: Request,
    time_range: str = Query(TimeRange.ONE_MONTH.value, alias="range", description="Look-back window"),
    q: str = Query("", description="Search over name, email and phone"),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Leads inside the chosen window, newest first"""
    return await _leads_page(request, ctx, parse_range(time_range), q)

@router.get("/export.csv")
async def export_leads(
    request: Request,
    time_range: str = Query(TimeRange.ONE_MONTH.value, alias="range"),
    q: str = Query(""),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Download the current selection as CSV"""
    range_key = parse_range(time_range)
    try:
        leads = await _service(ctx).list_leads(range_key, q)
    except GatewayError as e:
        logger.error(f"Mailing list export failed: {e.message}")
        return await _leads_page(request, ctx, range_key, q, error=f"Export failed: {e.message}", status_code=502)

    body = leads_to_csv(leads, ADMIN_TIMEZONE)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="mailing_list_{range_key.value}.csv"'}
    )

@router.get("/{record_id}/delete")
async def confirm_delete_lead(
    request: Request,
    record_id: str,
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    return render(
        request,
        "confirm_delete.html",
        {
            "message": f"Delete this {MAILING_LIST} record?",
            "action": f"{LIST_URL}/{record_id}/delete",
            "cancel": LIST_URL,
        },
        active=MAILING_LIST
    )

@router.post("/{record_id}/delete")
async def delete_lead(
    request: Request,
    record_id: str,
    confirm: str = Form(""),
    ctx: AdminContext = Depends(AuthConfig.get_auth_dependency())
):
    """Delete after confirmation; a refusal re-renders the table with the message"""
    if confirm != "yes":
        return RedirectResponse(LIST_URL, status_code=303)
    try:
        await _service(ctx).delete_lead(record_id)
    except GatewayError as e:
        logger.error(f"Failed to delete lead {record_id}: {e.message}")
        return await _leads_page(request, ctx, TimeRange.ONE_MONTH, "", error=e.message, status_code=400)
    return RedirectResponse(LIST_URL, status_code=303)

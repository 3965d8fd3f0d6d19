"""
Public catalog routes - read-only JSON for the marketing pages
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from services.catalog_service import CatalogService
from services.record_gateway import GatewayError, RecordGateway
from utils.auth import get_gateway

router = APIRouter()
logger = logging.getLogger(__name__)

def _unavailable(what: str, error: GatewayError) -> HTTPException:
    logger.error(f"Failed to load {what}: {error.message}")
    return HTTPException(status_code=502, detail=error.message)

@router.get("/teams")
async def list_teams(gateway: RecordGateway = Depends(get_gateway)):
    try:
        return {"teams": await CatalogService(gateway).get_teams()}
    except GatewayError as e:
        raise _unavailable("teams", e)

@router.get("/categories")
async def list_categories(gateway: RecordGateway = Depends(get_gateway)):
    try:
        return {"categories": await CatalogService(gateway).get_categories()}
    except GatewayError as e:
        raise _unavailable("categories", e)

@router.get("/tests")
async def list_tests(gateway: RecordGateway = Depends(get_gateway)):
    try:
        return {"tests": await CatalogService(gateway).get_tests()}
    except GatewayError as e:
        raise _unavailable("tests", e)

@router.get("/tests/{test_id}")
async def get_test(test_id: str, gateway: RecordGateway = Depends(get_gateway)):
    """Single test; 404 when the store does not know it"""
    try:
        test = await CatalogService(gateway).get_test(test_id)
    except GatewayError as e:
        raise _unavailable(f"test {test_id}", e)
    if test is None:
        raise HTTPException(status_code=404, detail="Test not found")
    return {"test": test}

@router.get("/nav")
async def list_nav_pages(gateway: RecordGateway = Depends(get_gateway)):
    """Navigation entries visible to the caller's credential"""
    try:
        return {"items": await CatalogService(gateway).get_nav_pages()}
    except GatewayError as e:
        raise _unavailable("navigation pages", e)

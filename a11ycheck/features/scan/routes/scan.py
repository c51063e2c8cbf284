from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from a11ycheck.features.auth.routes.auth import get_current_user_id
from a11ycheck.features.scan.dependencies.scanner import get_scanner
from a11ycheck.features.scan.schemas.scan import ScanCreateRequest
from a11ycheck.features.scan.services.history import (
    get_user_scan_activity,
    get_user_scan_history,
    get_user_scan_stats,
)
from a11ycheck.features.scan.services.scan_service import ScanService
from a11ycheck.features.scan.services.scanner import AccessibilityScanner
from a11ycheck.platform.db.session import get_db
from a11ycheck.platform.response import api_response

router = APIRouter(tags=["scan"])


@router.post(
    "/scan",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Scan a URL for accessibility issues",
)
async def create_scan(
    data: ScanCreateRequest,
    user_id: str = Depends(get_current_user_id),
    scanner: AccessibilityScanner = Depends(get_scanner),
    db: AsyncSession = Depends(get_db),
):
    """
    Run an accessibility scan and store the result.
    - **scan_type**: `quick` (15s budget) or `full` (30s budget)
    - **device_type**: `desktop` or `mobile` viewport and user agent
    """
    scan = await ScanService(db).create_scan(user_id, data, scanner)
    return api_response(data=scan, message="Scan completed successfully")


@router.get("/scan/{scan_id}", response_model=dict, summary="Get a scan with its issues")
async def get_scan(
    scan_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    scan = await ScanService(db).get_scan(user_id, scan_id)
    return api_response(data=scan, message="Scan retrieved successfully")


@router.delete("/scan/{scan_id}", response_model=dict, summary="Delete one of your scans")
async def delete_scan(
    scan_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await ScanService(db).delete_scan(user_id, scan_id)
    return api_response(data={"id": scan_id}, message="Scan deleted successfully")


@router.get("/scans", response_model=dict, summary="Scan history")
async def list_scans(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    days: int = Query(30, ge=1, le=3650),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    history = await get_user_scan_history(db, user_id, page=page, page_size=limit, days=days)
    return api_response(data=history, message="Scan history retrieved successfully")


@router.get("/stats", response_model=dict, summary="Dashboard statistics")
async def scan_stats(
    days: int = Query(30, ge=1, le=3650),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    stats = await get_user_scan_stats(db, user_id, days=days)
    return api_response(data=stats, message="Statistics retrieved successfully")


@router.get("/activity", response_model=dict, summary="Scan activity per day")
async def scan_activity(
    days: int = Query(30, ge=1, le=3650),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    activity = await get_user_scan_activity(db, user_id, days=days)
    return api_response(data=activity, message="Activity retrieved successfully")

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from a11ycheck.features.auth.routes.auth import get_current_user_id
from a11ycheck.features.reports.schemas.report import EmailReportRequest
from a11ycheck.features.reports.services.scan_report_email import ScanReportService
from a11ycheck.platform.db.session import get_db
from a11ycheck.platform.response import api_response
from a11ycheck.platform.services.email import MailTransport, get_mail_transport

router = APIRouter(tags=["reports"])


@router.post(
    "/email-scan-results",
    response_model=dict,
    summary="Email a scan report",
    description="Send the scan summary to the email address on the current user's account",
)
async def email_scan_results(
    request: EmailReportRequest,
    user_id: str = Depends(get_current_user_id),
    transport: Optional[MailTransport] = Depends(get_mail_transport),
    db: AsyncSession = Depends(get_db),
):
    result = await ScanReportService(db, transport).send_report(user_id, request)
    return api_response(data=result, message="Scan results emailed successfully")

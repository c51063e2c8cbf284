"""Email service for sending scan reports to users."""
import os
from datetime import datetime
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from a11ycheck.features.auth.models.user import User
from a11ycheck.features.reports.schemas.report import EmailReportRequest, EmailReportResponse
from a11ycheck.features.scan.models.scan import Scan
from a11ycheck.features.scan.schemas.scan import IssueRecord
from a11ycheck.features.scan.services.scan_service import is_valid_scan_id
from a11ycheck.features.scan.services.utils.issue_parser import count_by_severity
from a11ycheck.platform.config import settings
from a11ycheck.platform.exceptions import ConfigurationError, EmailDeliveryError, ValidationError
from a11ycheck.platform.logger import get_logger
from a11ycheck.platform.services.email import MailTransport

logger = get_logger(__name__)

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../template")

env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))

TOP_ISSUES_LIMIT = 5

SEVERITY_COLORS = {"error": "#ef4444", "warning": "#f59e0b", "notice": "#3b82f6"}


def score_band(score: int) -> tuple[str, str]:
    """(colour, verdict) for the score banner."""
    if score >= 90:
        return "#10b981", "Excellent Accessibility!"
    if score >= 75:
        return "#f59e0b", "Good with Room for Improvement"
    return "#ef4444", "Needs Significant Improvements"


def render_scan_report(
    url: str,
    score: int,
    total_issues: int,
    issues: Optional[List[IssueRecord]] = None,
    sent_at: Optional[datetime] = None,
) -> str:
    sent_at = sent_at or datetime.utcnow()
    score_color, verdict = score_band(score)

    breakdown = count_by_severity(issues) if issues is not None else None
    top_issues = [
        issue.model_dump(mode="json") for issue in (issues or [])[:TOP_ISSUES_LIMIT]
    ]

    template = env.get_template("scan_report.html")
    return template.render(
        url=url,
        score=score,
        score_color=score_color,
        verdict=verdict,
        total_issues=total_issues,
        breakdown=breakdown,
        top_issues=top_issues,
        severity_colors=SEVERITY_COLORS,
        scan_date=sent_at.strftime("%Y-%m-%d"),
        scan_time=sent_at.strftime("%H:%M:%S UTC"),
        dashboard_url=f"{settings.FRONTEND_URL.rstrip('/')}/dashboard",
    )


class ScanReportService:
    def __init__(self, db: AsyncSession, transport: Optional[MailTransport]):
        self.db = db
        self.transport = transport

    async def _get_owned_scan(self, user_id: str, scan_id: Optional[str]) -> Optional[Scan]:
        if not scan_id or not is_valid_scan_id(scan_id):
            return None
        result = await self.db.execute(
            select(Scan).where(Scan.id == scan_id, Scan.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def send_report(self, user_id: str, request: EmailReportRequest) -> EmailReportResponse:
        if self.transport is None:
            raise ConfigurationError()

        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user or not user.email:
            raise ValidationError("User email not found")

        scan = await self._get_owned_scan(user_id, request.scan_id)
        issues = None
        if scan is not None:
            issues = [IssueRecord.model_validate(issue) for issue in (scan.issue_details or [])]

        html_content = render_scan_report(
            url=request.url,
            score=request.score,
            total_issues=request.total_issues,
            issues=issues,
        )
        subject = f"A11yCheck Report: {request.url} (Score: {request.score}/100)"

        try:
            await run_in_threadpool(self.transport.send, user.email, subject, html_content)
        except Exception as e:
            logger.error(f"Email sending failed for user {user_id}: {e}")
            raise EmailDeliveryError(detail=str(e)) from e

        logger.info(f"Scan report for {request.url} emailed to {user.email}")
        return EmailReportResponse(email_sent=True, sent_to=user.email)

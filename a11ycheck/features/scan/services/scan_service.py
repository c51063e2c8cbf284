import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from a11ycheck.features.scan.models.scan import PAGE_TITLE_MAX_LENGTH, Scan, ScanStatus
from a11ycheck.features.scan.schemas.scan import (
    IssueRecord,
    ScanCreateRequest,
    ScanDetail,
    ScanSummary,
)
from a11ycheck.features.scan.services.page_metadata import fetch_page_metadata
from a11ycheck.features.scan.services.scanner.base import AccessibilityScanner, ScanOptions
from a11ycheck.features.scan.services.utils.issue_parser import count_by_severity, parse_issues
from a11ycheck.features.scan.services.utils.scoring import calculate_score
from a11ycheck.platform.config import settings
from a11ycheck.platform.exceptions import (
    ForbiddenError,
    NotFoundError,
    ScanError,
    ValidationError,
)
from a11ycheck.platform.logger import get_logger
from a11ycheck.platform.utils.url_validator import validate_url

logger = get_logger(__name__)

FAILED_PAGE_TITLE = "Scan Failed"


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; tag them so clients do not read local time."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def scan_to_summary(scan: Scan) -> ScanSummary:
    return ScanSummary(
        id=scan.id,
        url=scan.url,
        issues=scan.issue_count or 0,
        score=scan.score or 0,
        status=_status_value(scan.status),
        timestamp=as_utc(scan.timestamp),
        scan_duration=scan.scan_duration or 0,
        page_title=scan.page_title or "Unknown",
        page_description=scan.page_description or "",
    )


def scan_to_detail(scan: Scan) -> ScanDetail:
    summary = scan_to_summary(scan)
    issues = [IssueRecord.model_validate(issue) for issue in (scan.issue_details or [])]
    return ScanDetail(**summary.model_dump(), issue_details=issues)


def is_valid_scan_id(scan_id: str) -> bool:
    try:
        uuid.UUID(str(scan_id))
    except ValueError:
        return False
    return True


class ScanService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_scan(
        self, user_id: str, request: ScanCreateRequest, scanner: AccessibilityScanner
    ) -> ScanDetail:
        """
        Scan one URL and store the outcome.

        A failed attempt is still recorded (status=failed, no issues, score 0)
        before the error is raised to the caller.
        """
        is_valid, url, error_message = validate_url(request.url)
        if not is_valid:
            raise ValidationError(error_message)

        options = ScanOptions(
            scan_type=request.scan_type,
            device_type=request.device_type,
            standard=settings.SCANNER_STANDARD,
            include_warnings=settings.SCANNER_INCLUDE_WARNINGS,
            include_notices=settings.SCANNER_INCLUDE_NOTICES,
        )

        logger.info(
            f"Starting {options.scan_type.value} scan for {options.device_type.value} on: {url} (user={user_id})"
        )
        started = time.monotonic()

        try:
            result = await run_in_threadpool(scanner.run, url, options)
        except Exception as e:
            duration_ms = int((time.monotonic() - started) * 1000)
            logger.error(f"Scan failed for {url}: {e}")
            await self._record_failed_scan(user_id, url, duration_ms)
            if isinstance(e, ScanError):
                raise
            raise ScanError(detail=str(e)) from e

        duration_ms = int((time.monotonic() - started) * 1000)

        issues = parse_issues(result.issues)
        counts = count_by_severity(issues)
        score = calculate_score(counts["error"], counts["warning"], counts["notice"])
        logger.info(
            f"Issue breakdown for {url}: {counts['error']} errors, {counts['warning']} warnings, "
            f"{counts['notice']} notices -> {score}/100"
        )

        metadata = await fetch_page_metadata(url)

        scan = Scan(
            user_id=user_id,
            url=url,
            issue_count=len(issues),
            issue_details=[issue.model_dump(mode="json") for issue in issues],
            score=score,
            status=ScanStatus.completed,
            timestamp=datetime.utcnow(),
            scan_duration=duration_ms,
            page_title=(metadata.title or result.page_title or "Unknown")[:PAGE_TITLE_MAX_LENGTH],
            page_description=metadata.description or result.page_description or "",
        )
        self.db.add(scan)
        await self.db.commit()
        await self.db.refresh(scan)

        logger.info(f"Scan saved successfully with ID: {scan.id}")
        return scan_to_detail(scan)

    async def _record_failed_scan(self, user_id: str, url: str, duration_ms: int) -> Optional[Scan]:
        try:
            failed_scan = Scan(
                user_id=user_id,
                url=url,
                issue_count=0,
                issue_details=[],
                score=0,
                status=ScanStatus.failed,
                timestamp=datetime.utcnow(),
                scan_duration=duration_ms,
                page_title=FAILED_PAGE_TITLE,
                page_description="",
            )
            self.db.add(failed_scan)
            await self.db.commit()
            logger.info(f"Failed scan record saved for {url}")
            return failed_scan
        except Exception:
            logger.exception(f"Failed to save failed scan record for {url}")
            await self.db.rollback()
            return None

    async def get_scan(self, user_id: str, scan_id: str) -> ScanDetail:
        if not is_valid_scan_id(scan_id):
            raise ValidationError("Invalid scan ID format")

        result = await self.db.execute(select(Scan).where(Scan.id == scan_id))
        scan = result.scalar_one_or_none()

        if not scan:
            raise NotFoundError("Scan not found")

        if str(scan.user_id) != str(user_id):
            logger.warning(f"User {user_id} tried to read scan {scan_id} owned by another user")
            raise ForbiddenError("Access denied - not your scan")

        return scan_to_detail(scan)

    async def delete_scan(self, user_id: str, scan_id: str) -> bool:
        result = await self.db.execute(
            select(Scan).where(Scan.id == scan_id, Scan.user_id == user_id)
        )
        scan = result.scalar_one_or_none()

        if not scan:
            raise NotFoundError("Scan not found")

        await self.db.delete(scan)
        await self.db.commit()
        logger.info(f"Scan {scan_id} deleted by user {user_id}")
        return True

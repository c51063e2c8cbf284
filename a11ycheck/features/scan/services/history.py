import math
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from a11ycheck.features.scan.models.scan import Scan
from a11ycheck.features.scan.schemas.scan import (
    ActivityPoint,
    Pagination,
    ScanListResponse,
    ScanStats,
)
from a11ycheck.features.scan.services.scan_service import scan_to_summary
from a11ycheck.platform.logger import get_logger

logger = get_logger(__name__)


def lookback_start(days: int) -> datetime:
    return datetime.utcnow() - timedelta(days=days)


def _round_avg(value) -> float:
    return round(float(value), 1) if value is not None else 0


async def get_user_scan_history(
    db: AsyncSession, user_id: str, page: int = 1, page_size: int = 50, days: int = 30
) -> ScanListResponse:
    """Newest-first page of the user's scans, without issue details."""
    filters = (Scan.user_id == user_id, Scan.timestamp >= lookback_start(days))

    total = await db.scalar(select(func.count(Scan.id)).where(*filters)) or 0

    query = (
        select(Scan)
        .where(*filters)
        .options(defer(Scan.issue_details))
        .order_by(desc(Scan.timestamp))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    scans = [scan_to_summary(scan) for scan in result.scalars().all()]

    logger.info(f"Found {len(scans)} of {total} scans for user {user_id}")

    return ScanListResponse(
        scans=scans,
        pagination=Pagination(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
            count=len(scans),
        ),
    )


async def get_user_scan_stats(db: AsyncSession, user_id: str, days: int = 30) -> ScanStats:
    query = select(
        func.count(Scan.id),
        func.coalesce(func.sum(Scan.issue_count), 0),
        func.avg(Scan.score),
        func.count(func.distinct(Scan.url)),
    ).where(Scan.user_id == user_id, Scan.timestamp >= lookback_start(days))

    total_scans, total_issues, avg_score, unique_pages = (await db.execute(query)).one()

    return ScanStats(
        total_scans=total_scans or 0,
        total_issues=int(total_issues or 0),
        avg_score=_round_avg(avg_score),
        unique_pages=unique_pages or 0,
    )


async def get_user_scan_activity(db: AsyncSession, user_id: str, days: int = 30) -> List[ActivityPoint]:
    """Per calendar day (UTC) figures, oldest day first."""
    day = func.date(Scan.timestamp).label("day")
    query = (
        select(
            day,
            func.count(Scan.id),
            func.coalesce(func.sum(Scan.issue_count), 0),
            func.avg(Scan.score),
        )
        .where(Scan.user_id == user_id, Scan.timestamp >= lookback_start(days))
        .group_by(day)
        .order_by(day)
    )
    result = await db.execute(query)

    return [
        ActivityPoint(
            date=str(scan_day),
            scans=scans,
            issues=int(issues or 0),
            avg_score=_round_avg(avg_score),
        )
        for scan_day, scans, issues, avg_score in result.all()
    ]

import enum
from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text

from a11ycheck.platform.db.base import BaseModel

PAGE_TITLE_MAX_LENGTH = 512


class ScanStatus(enum.Enum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


class Scan(BaseModel):
    """
    One accessibility scan of one URL.

    The issue list is embedded as JSON: issues have no identity outside
    their scan and are always read or dropped together with it.
    """
    __tablename__ = "scans"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    url = Column(Text, nullable=False)

    # Denormalized, always len(issue_details)
    issue_count = Column(Integer, default=0, nullable=False)
    issue_details = Column(JSON, default=list, nullable=False)

    score = Column(Integer, default=0, nullable=False)
    status = Column(Enum(ScanStatus), default=ScanStatus.pending, nullable=False)

    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    scan_duration = Column(Integer, default=0, nullable=False)  # milliseconds

    page_title = Column(String(PAGE_TITLE_MAX_LENGTH), default="Unknown", nullable=False)
    page_description = Column(Text, default="", nullable=False)

    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 100", name="check_score_range"),
        Index("idx_scans_user_timestamp", "user_id", "timestamp"),
        Index("idx_scans_url", "url"),
        Index("idx_scans_status", "status"),
    )

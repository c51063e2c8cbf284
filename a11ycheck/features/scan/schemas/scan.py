"""
Scan Schemas

Request and response models for the scan API endpoints.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IssueSeverity(str, Enum):
    error = "error"
    warning = "warning"
    notice = "notice"


class ScanType(str, Enum):
    quick = "quick"
    full = "full"


class DeviceType(str, Enum):
    desktop = "desktop"
    mobile = "mobile"


class IssueRecord(BaseModel):
    """A single finding inside a scan. `id` is its 1-based position."""
    id: int
    type: str
    description: str
    severity: IssueSeverity
    selector: str = ""
    message: str = ""
    code: str = ""
    context: str = ""
    runner: str = ""


def _option_value(v) -> str:
    return str(getattr(v, "value", v) or "").strip().lower()


# ============================================================================
# Requests
# ============================================================================

class ScanCreateRequest(BaseModel):
    url: Optional[str] = None
    scan_type: ScanType = Field(ScanType.full, alias="scanType")
    device_type: DeviceType = Field(DeviceType.desktop, alias="deviceType")

    @field_validator("scan_type", mode="before")
    @classmethod
    def lenient_scan_type(cls, v):
        """Anything other than "quick" (any case) runs a full scan."""
        return ScanType.quick if _option_value(v) == ScanType.quick.value else ScanType.full

    @field_validator("device_type", mode="before")
    @classmethod
    def lenient_device_type(cls, v):
        """Anything other than "mobile" (any case) scans as desktop."""
        return DeviceType.mobile if _option_value(v) == DeviceType.mobile.value else DeviceType.desktop

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://example.com",
                "scan_type": "full",
                "device_type": "desktop",
            }
        },
    )


# ============================================================================
# Responses
# ============================================================================

class ScanSummary(BaseModel):
    """Scan as listed in history: everything except the issue list."""
    id: str
    url: str
    issues: int
    score: int
    status: str
    timestamp: datetime
    scan_duration: int
    page_title: str
    page_description: str


class ScanDetail(ScanSummary):
    issue_details: List[IssueRecord] = []


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    count: int


class ScanListResponse(BaseModel):
    scans: List[ScanSummary]
    pagination: Pagination


class ScanStats(BaseModel):
    total_scans: int = 0
    total_issues: int = 0
    avg_score: float = 0
    unique_pages: int = 0


class ActivityPoint(BaseModel):
    date: str
    scans: int
    issues: int
    avg_score: float

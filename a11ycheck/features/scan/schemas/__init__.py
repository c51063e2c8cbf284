from a11ycheck.features.scan.schemas.scan import (
    ActivityPoint,
    DeviceType,
    IssueRecord,
    IssueSeverity,
    Pagination,
    ScanCreateRequest,
    ScanDetail,
    ScanListResponse,
    ScanStats,
    ScanSummary,
    ScanType,
)

__all__ = [
    "ActivityPoint",
    "DeviceType",
    "IssueRecord",
    "IssueSeverity",
    "Pagination",
    "ScanCreateRequest",
    "ScanDetail",
    "ScanListResponse",
    "ScanStats",
    "ScanSummary",
    "ScanType",
]

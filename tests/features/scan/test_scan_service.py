from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from a11ycheck.features.scan.models.scan import PAGE_TITLE_MAX_LENGTH, Scan, ScanStatus
from a11ycheck.features.scan.schemas.scan import DeviceType, ScanCreateRequest, ScanType
from a11ycheck.features.scan.services.page_metadata import PageMetadata
from a11ycheck.features.scan.services.scan_service import (
    ScanService,
    is_valid_scan_id,
    scan_to_detail,
)
from a11ycheck.features.scan.services.scanner.base import ScannerResult
from a11ycheck.platform.exceptions import (
    ForbiddenError,
    NotFoundError,
    ScanError,
    ScanTimeoutError,
    ValidationError,
)


class StubScanner:
    def __init__(self, result=None, error=None):
        self.result = result or ScannerResult()
        self.error = error

    def run(self, url, options):
        if self.error:
            raise self.error
        return self.result


def _mock_db():
    db = AsyncMock()
    db.add = MagicMock()

    async def refresh(obj):
        obj.id = obj.id or str(uuid4())

    db.refresh.side_effect = refresh
    return db


def _stored_scan(user_id="user-1", **overrides):
    values = dict(
        id=str(uuid4()),
        user_id=user_id,
        url="https://example.com",
        issue_count=1,
        issue_details=[
            {"id": 1, "type": "Missing Image Alt Text", "description": "Images must have alternate text",
             "severity": "error", "selector": "img", "message": "Images must have alternate text",
             "code": "image-alt", "context": "<img>", "runner": "axe"}
        ],
        score=95,
        status=ScanStatus.completed,
        timestamp=datetime(2026, 10, 1, 12, 0, 0),
        scan_duration=1200,
        page_title="Example",
        page_description="",
    )
    values.update(overrides)
    return Scan(**values)


def _result_returning(scan):
    result = MagicMock()
    result.scalar_one_or_none.return_value = scan
    return result


@pytest.fixture
def offline_metadata():
    with patch(
        "a11ycheck.features.scan.services.scan_service.fetch_page_metadata",
        new=AsyncMock(return_value=PageMetadata(title="Fetched title")),
    ) as mocked:
        yield mocked


@pytest.mark.asyncio
async def test_create_scan_scores_and_persists(offline_metadata):
    db = _mock_db()
    scanner = StubScanner(
        ScannerResult(
            issues=[
                {"code": "image-alt", "type": "error", "message": "alt"},
                {"code": "region", "type": "warning", "message": "landmarks"},
            ],
            page_description="From the browser",
        )
    )

    detail = await ScanService(db).create_scan(
        "user-1", ScanCreateRequest(url=" https://example.com "), scanner
    )

    # 10 + 5 weighted -> 7.5 penalty -> 92.5 -> 93
    assert detail.score == 93
    assert detail.issues == 2
    assert detail.status == "completed"
    assert detail.url == "https://example.com"
    assert detail.page_title == "Fetched title"
    assert detail.page_description == "From the browser"
    assert [issue.id for issue in detail.issue_details] == [1, 2]

    stored = db.add.call_args[0][0]
    assert stored.user_id == "user-1"
    assert stored.issue_count == len(stored.issue_details) == 2
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_scan_rejects_bad_url(offline_metadata):
    db = _mock_db()

    with pytest.raises(ValidationError) as exc:
        await ScanService(db).create_scan("user-1", ScanCreateRequest(url="example.com"), StubScanner())

    assert "http://" in exc.value.message
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_create_scan_records_failure_and_reraises(offline_metadata):
    db = _mock_db()
    scanner = StubScanner(error=ScanTimeoutError())

    with pytest.raises(ScanTimeoutError):
        await ScanService(db).create_scan("user-1", ScanCreateRequest(url="https://slow.example.com"), scanner)

    failed = db.add.call_args[0][0]
    assert failed.status == ScanStatus.failed
    assert failed.score == 0
    assert failed.issue_count == 0
    assert failed.issue_details == []
    assert failed.page_title == "Scan Failed"
    offline_metadata.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_scan_wraps_unexpected_errors(offline_metadata):
    db = _mock_db()
    scanner = StubScanner(error=RuntimeError("chrome exploded"))

    with pytest.raises(ScanError) as exc:
        await ScanService(db).create_scan("user-1", ScanCreateRequest(url="https://example.com"), scanner)

    assert exc.value.message == "Scan failed - please try again"
    assert exc.value.detail == "chrome exploded"


@pytest.mark.asyncio
async def test_failed_record_save_error_does_not_mask_scan_error(offline_metadata):
    db = _mock_db()
    db.commit.side_effect = RuntimeError("db down")
    scanner = StubScanner(error=ScanTimeoutError())

    with pytest.raises(ScanTimeoutError):
        await ScanService(db).create_scan("user-1", ScanCreateRequest(url="https://example.com"), scanner)

    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_scan_owner():
    db = AsyncMock()
    scan = _stored_scan()
    db.execute.return_value = _result_returning(scan)

    detail = await ScanService(db).get_scan("user-1", scan.id)

    assert detail.id == scan.id
    assert detail.issue_details[0].code == "image-alt"


@pytest.mark.asyncio
async def test_get_scan_other_user_forbidden():
    db = AsyncMock()
    scan = _stored_scan(user_id="owner")
    db.execute.return_value = _result_returning(scan)

    with pytest.raises(ForbiddenError) as exc:
        await ScanService(db).get_scan("intruder", scan.id)

    assert exc.value.message == "Access denied - not your scan"


@pytest.mark.asyncio
async def test_get_scan_invalid_id():
    db = AsyncMock()

    with pytest.raises(ValidationError) as exc:
        await ScanService(db).get_scan("user-1", "not-a-uuid")

    assert exc.value.message == "Invalid scan ID format"
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_scan_missing():
    db = AsyncMock()
    db.execute.return_value = _result_returning(None)

    with pytest.raises(NotFoundError):
        await ScanService(db).get_scan("user-1", str(uuid4()))


@pytest.mark.asyncio
async def test_delete_scan_success():
    db = AsyncMock()
    scan = _stored_scan()
    db.execute.return_value = _result_returning(scan)

    assert await ScanService(db).delete_scan("user-1", scan.id) is True
    db.delete.assert_awaited_once_with(scan)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_scan_not_owned_is_not_found():
    db = AsyncMock()
    db.execute.return_value = _result_returning(None)

    with pytest.raises(NotFoundError):
        await ScanService(db).delete_scan("intruder", str(uuid4()))

    db.delete.assert_not_awaited()


def test_is_valid_scan_id():
    assert is_valid_scan_id(str(uuid4()))
    assert not is_valid_scan_id("123")
    assert not is_valid_scan_id("")


@pytest.mark.asyncio
async def test_create_scan_truncates_long_page_title(offline_metadata):
    offline_metadata.return_value = PageMetadata(title="T" * 600)
    db = _mock_db()

    detail = await ScanService(db).create_scan(
        "user-1", ScanCreateRequest(url="https://example.com"), StubScanner()
    )

    stored = db.add.call_args[0][0]
    assert len(stored.page_title) == PAGE_TITLE_MAX_LENGTH
    assert detail.page_title == "T" * PAGE_TITLE_MAX_LENGTH
    assert stored.status == ScanStatus.completed


def test_summary_timestamp_is_utc():
    detail = scan_to_detail(_stored_scan())
    assert detail.timestamp.tzinfo == timezone.utc
    assert detail.timestamp.replace(tzinfo=None) == datetime(2026, 10, 1, 12, 0, 0)


def test_create_request_options_are_lenient():
    request = ScanCreateRequest.model_validate({"url": "https://example.com", "scanType": "Quick", "deviceType": "MOBILE"})
    assert request.scan_type == ScanType.quick
    assert request.device_type == DeviceType.mobile

    request = ScanCreateRequest.model_validate({"url": "https://example.com", "scanType": "deep", "deviceType": "tablet"})
    assert request.scan_type == ScanType.full
    assert request.device_type == DeviceType.desktop

    request = ScanCreateRequest(url="https://example.com", scan_type=ScanType.quick)
    assert request.scan_type == ScanType.quick

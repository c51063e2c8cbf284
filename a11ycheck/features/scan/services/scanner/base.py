from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from a11ycheck.features.scan.schemas.scan import DeviceType, ScanType

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_7_1 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.1.2 Mobile/15E148 Safari/604.1"
)


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int
    device_scale_factor: float = 1.0
    is_mobile: bool = False


DESKTOP_VIEWPORT = Viewport(width=1280, height=1024)
MOBILE_VIEWPORT = Viewport(width=375, height=667, device_scale_factor=2.0, is_mobile=True)


@dataclass(frozen=True)
class ScanOptions:
    """How the scanner should load and audit a page."""
    scan_type: ScanType = ScanType.full
    device_type: DeviceType = DeviceType.desktop
    standard: str = "WCAG2AA"
    include_warnings: bool = True
    include_notices: bool = False

    @property
    def timeout_seconds(self) -> int:
        return 15 if self.scan_type == ScanType.quick else 30

    @property
    def wait_seconds(self) -> float:
        return 0.5 if self.scan_type == ScanType.quick else 1.0

    @property
    def viewport(self) -> Viewport:
        return MOBILE_VIEWPORT if self.device_type == DeviceType.mobile else DESKTOP_VIEWPORT

    @property
    def user_agent(self) -> Optional[str]:
        return MOBILE_USER_AGENT if self.device_type == DeviceType.mobile else None


@dataclass
class ScannerResult:
    # Raw, unvalidated findings: dicts with code/type/message/selector/context/runner
    issues: List[Dict[str, Any]] = field(default_factory=list)
    page_title: Optional[str] = None
    page_description: Optional[str] = None


class AccessibilityScanner(Protocol):
    def run(self, url: str, options: ScanOptions) -> ScannerResult:
        """Load ``url`` and return its findings.

        Raises ScanTimeoutError, ScanUnresolvedHostError or ScanError.
        """
        ...

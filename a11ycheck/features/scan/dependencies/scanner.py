from fastapi import Request

from a11ycheck.features.scan.services.scanner import AccessibilityScanner, AxeScanner
from a11ycheck.platform.config import Settings


def build_scanner(settings: Settings) -> AccessibilityScanner:
    return AxeScanner(settings)


def get_scanner(request: Request) -> AccessibilityScanner:
    """The scanner built at startup; overridden in tests."""
    return request.app.state.scanner

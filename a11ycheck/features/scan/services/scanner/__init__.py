from a11ycheck.features.scan.services.scanner.axe_scanner import AxeScanner
from a11ycheck.features.scan.services.scanner.base import (
    AccessibilityScanner,
    ScannerResult,
    ScanOptions,
    Viewport,
)

__all__ = ["AccessibilityScanner", "AxeScanner", "ScannerResult", "ScanOptions", "Viewport"]

"""
Scan models package.
"""
from a11ycheck.features.scan.models.scan import Scan, ScanStatus

__all__ = ["Scan", "ScanStatus"]

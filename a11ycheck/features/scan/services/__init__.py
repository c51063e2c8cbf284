from a11ycheck.features.scan.services.scan_service import ScanService

__all__ = ["ScanService"]

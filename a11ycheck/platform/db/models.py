"""Import every model so Base.metadata knows all tables."""
from a11ycheck.features.auth.models.user import User
from a11ycheck.features.scan.models.scan import Scan

__all__ = ["User", "Scan"]

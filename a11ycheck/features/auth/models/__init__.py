from a11ycheck.features.auth.models.user import User

__all__ = ["User"]

from a11ycheck.features.auth.services.auth_service import AuthService

__all__ = ["AuthService"]

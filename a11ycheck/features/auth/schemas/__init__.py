from a11ycheck.features.auth.schemas.auth import (
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)

__all__ = [
    "LoginRequest",
    "SignupRequest",
    "TokenResponse",
    "UpdateProfileRequest",
    "UserResponse",
]

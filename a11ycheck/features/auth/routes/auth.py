from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from a11ycheck.features.auth.schemas.auth import (
    LoginRequest,
    SignupRequest,
    UpdateProfileRequest,
    UserResponse,
)
from a11ycheck.features.auth.services.auth_service import AuthService
from a11ycheck.features.auth.utils.security import decode_access_token
from a11ycheck.platform.db.session import get_db
from a11ycheck.platform.exceptions import ForbiddenError, UnauthorizedError
from a11ycheck.platform.response import api_response

router = APIRouter(prefix="/api/auth", tags=["Authentication"])
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Request gate for protected routes. Returns the user id carried by the
    bearer token: 401 when no token is sent, 403 when it does not verify.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError as e:
        raise ForbiddenError("Invalid token", detail=str(e))

    user_id = payload.get("sub")
    if not user_id:
        raise ForbiddenError("Invalid token", detail="Token has no subject")

    return str(user_id)


@router.post(
    "/signup",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create a new user account with username, name, email and password",
)
async def signup(request: SignupRequest, db: AsyncSession = Depends(get_db)):
    auth_service = AuthService(db)
    user = await auth_service.register_user(request)

    return api_response(
        data=UserResponse.model_validate(user).model_dump(),
        message="User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post(
    "/login",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Login user",
    description="Authenticate with username and password and receive a 24 hour bearer token",
)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    auth_service = AuthService(db)
    token_response = await auth_service.login_user(request)

    return api_response(
        data=token_response,
        message="Login successful",
        status_code=status.HTTP_200_OK,
    )


@router.get(
    "/me",
    response_model=dict,
    summary="Get current user profile",
)
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    user = await AuthService(db).get_profile(user_id)
    return api_response(
        message="User profile retrieved successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.put(
    "/update-profile",
    response_model=dict,
    summary="Update current user profile",
    description="Update name, bio and profile photo for the current user",
)
async def update_my_profile(
    profile_data: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    user = await AuthService(db).update_profile(user_id, profile_data)
    return api_response(
        message="Profile updated successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )

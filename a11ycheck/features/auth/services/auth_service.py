from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from a11ycheck.features.auth.models.user import User
from a11ycheck.features.auth.schemas.auth import (
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UpdateProfileRequest,
)
from a11ycheck.features.auth.utils.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from a11ycheck.platform.exceptions import (
    ConflictError,
    CredentialError,
    NotFoundError,
    ValidationError,
)
from a11ycheck.platform.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_user(self, request: SignupRequest) -> User:
        username = request.username.lower()
        email = request.email.lower()

        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        for existing in result.scalars().all():
            if existing.username == username:
                raise ConflictError("Username already exists")
            raise ConflictError("Email already exists")

        new_user = User(
            username=username,
            name=request.name,
            email=email,
            password_hash=hash_password(request.password),
            bio="",
            profile_photo=None,
        )

        try:
            self.db.add(new_user)
            await self.db.commit()
            await self.db.refresh(new_user)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Username or email already exists")

        logger.info(f"Registered user {new_user.id} ({username})")
        return new_user

    async def login_user(self, request: LoginRequest) -> TokenResponse:
        result = await self.db.execute(
            select(User).where(User.username == request.username.lower())
        )
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundError("User not found")

        if not verify_password(request.password, user.password_hash):
            logger.warning(f"Failed login attempt for user {user.id}")
            raise CredentialError("Invalid credentials")

        return TokenResponse(token=create_access_token(user.id))

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_profile(self, user_id: str) -> User:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user_id: str, request: UpdateProfileRequest) -> User:
        """Update name, bio and profile photo; only fields sent by the client are touched."""
        changes = request.model_dump(exclude_unset=True)
        if changes.get("name", "") is None:
            changes.pop("name")

        if not changes:
            raise ValidationError("No fields to update")

        user = await self.get_profile(user_id)

        if "name" in changes:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("Name cannot be empty")
            user.name = name
        if "bio" in changes:
            user.bio = changes["bio"] or ""
        if "profile_photo" in changes:
            user.profile_photo = changes["profile_photo"] or None
        user.updated_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(user)
        return user

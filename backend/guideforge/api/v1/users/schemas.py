"""API schemas for authentication and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer

from guideforge.models.user import User
from guideforge.utils.datetime_utils import serialize_api_datetime
from guideforge.utils.url_helpers import blob_path_to_url

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# =============================================================================
# Request Schemas
# =============================================================================


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=72)  # bcrypt input limit


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdateRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8, max_length=72)


# =============================================================================
# Response Schemas
# =============================================================================


class UserResponse(BaseModel):
    """User response schema. Never includes the password hash."""

    id: int
    username: str
    email: str
    profile_image_url: str | None
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        return serialize_api_datetime(dt)

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        """Create response from User model."""
        return cls(
            id=user.id,  # type: ignore[arg-type]
            username=user.username,
            email=user.email,
            profile_image_url=blob_path_to_url(user.profile_image),
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    """Access token issued on register/login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class StatusResponse(BaseModel):
    """Generic status response."""

    status: str
    message: str

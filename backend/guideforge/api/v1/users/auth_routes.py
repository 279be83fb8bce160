"""Registration and login endpoints."""

import structlog
from fastapi import APIRouter, status

from guideforge.api.v1.dependencies import AuthServiceDep
from guideforge.api.v1.users.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from guideforge.auth.tokens import create_access_token

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="register",
)
async def register(body: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """Create an account and return an access token for it."""
    user = await service.register(username=body.username, email=body.email, password=body.password)
    assert user.id is not None
    return AuthResponse(access_token=create_access_token(user.id), user=UserResponse.from_model(user))


@router.post("/login", response_model=AuthResponse, operation_id="login")
async def login(body: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    user = await service.login(email=body.email, password=body.password)
    assert user.id is not None
    return AuthResponse(access_token=create_access_token(user.id), user=UserResponse.from_model(user))

"""Endpoints for the authenticated user's own account."""

import structlog
from fastapi import APIRouter, File, Response, UploadFile, status

from guideforge.api.v1.dependencies import AuthServiceDep, CurrentUserId, UserServiceDep
from guideforge.api.v1.uploads import read_upload
from guideforge.api.v1.users.schemas import (
    PasswordChangeRequest,
    ProfileUpdateRequest,
    StatusResponse,
    UserResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, operation_id="getCurrentUser")
async def get_current_user(user_id: CurrentUserId, service: UserServiceDep) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.from_model(user)


@router.put("/me", response_model=UserResponse, operation_id="updateCurrentUser")
async def update_current_user(
    body: ProfileUpdateRequest,
    user_id: CurrentUserId,
    service: UserServiceDep,
) -> UserResponse:
    user = await service.update_profile(user_id, username=body.username, email=body.email)
    return UserResponse.from_model(user)


@router.put("/me/password", response_model=StatusResponse, operation_id="changePassword")
async def change_password(
    body: PasswordChangeRequest,
    user_id: CurrentUserId,
    service: AuthServiceDep,
) -> StatusResponse:
    await service.change_password(
        user_id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return StatusResponse(status="ok", message="Password changed")


@router.post("/me/profile-image", response_model=UserResponse, operation_id="uploadProfileImage")
async def upload_profile_image(
    user_id: CurrentUserId,
    service: UserServiceDep,
    file: UploadFile = File(...),
) -> UserResponse:
    """Upload a profile picture (multipart field "file"), replacing any previous one."""
    data = await read_upload(file, service.max_upload_size)
    user = await service.update_profile_image(
        user_id,
        filename=file.filename or "",
        data=data,
        size=len(data),
        mime_type=file.content_type or "application/octet-stream",
    )
    return UserResponse.from_model(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, operation_id="deleteCurrentUser")
async def delete_current_user(user_id: CurrentUserId, service: UserServiceDep) -> Response:
    """Delete the account with all owned manuals, steps and images."""
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

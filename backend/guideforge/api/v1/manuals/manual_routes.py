"""Manual CRUD API endpoints."""

import structlog
from fastapi import APIRouter, Response, status

from guideforge.api.v1.dependencies import CurrentUserId, ManualServiceDep, OptionalUserId
from guideforge.api.v1.manuals.schemas import (
    ManualDetailResponse,
    ManualListResponse,
    ManualRequest,
    ManualResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["manuals"])


@router.get("/manuals", response_model=ManualListResponse, operation_id="listMyManuals")
async def list_my_manuals(
    user_id: CurrentUserId,
    service: ManualServiceDep,
    page: int = 1,
    limit: int = 10,
) -> ManualListResponse:
    """List the caller's manuals, most recently updated first."""
    result = await service.list_user_manuals(user_id, page=page, limit=limit)
    return ManualListResponse.from_page(result)


# Declared before /manuals/{manual_id} so "public" is not taken for an id
@router.get("/manuals/public", response_model=ManualListResponse, operation_id="listPublicManuals")
async def list_public_manuals(
    service: ManualServiceDep,
    page: int = 1,
    limit: int = 10,
) -> ManualListResponse:
    """List public manuals of all users."""
    result = await service.list_public_manuals(page=page, limit=limit)
    return ManualListResponse.from_page(result)


@router.post(
    "/manuals",
    response_model=ManualResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createManual",
)
async def create_manual(
    body: ManualRequest,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> ManualResponse:
    manual = await service.create_manual(
        user_id,
        title=body.title,
        description=body.description,
        category=body.category,
        is_public=body.is_public,
    )
    return ManualResponse.from_model(manual)


@router.get("/manuals/{manual_id}", response_model=ManualDetailResponse, operation_id="getManual")
async def get_manual(
    manual_id: int,
    user_id: OptionalUserId,
    service: ManualServiceDep,
) -> ManualDetailResponse:
    """Get a manual with its steps and images.

    Public manuals are readable anonymously; private ones only by the owner.
    """
    manual = await service.get_manual(manual_id, user_id)
    return ManualDetailResponse.from_model(manual)


@router.put("/manuals/{manual_id}", response_model=ManualResponse, operation_id="updateManual")
async def update_manual(
    manual_id: int,
    body: ManualRequest,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> ManualResponse:
    manual = await service.update_manual(
        manual_id,
        user_id,
        title=body.title,
        description=body.description,
        category=body.category,
        is_public=body.is_public,
    )
    return ManualResponse.from_model(manual)


@router.delete("/manuals/{manual_id}", status_code=status.HTTP_204_NO_CONTENT, operation_id="deleteManual")
async def delete_manual(
    manual_id: int,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> Response:
    """Delete a manual with all its steps and images."""
    await service.delete_manual(manual_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Step image API endpoints."""

import structlog
from fastapi import APIRouter, File, Response, UploadFile, status

from guideforge.api.v1.dependencies import CurrentUserId, ManualServiceDep
from guideforge.api.v1.manuals.schemas import ImageResponse
from guideforge.api.v1.uploads import read_upload

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["images"])


@router.post(
    "/steps/{step_id}/images",
    response_model=ImageResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="uploadStepImage",
)
async def upload_step_image(
    step_id: int,
    user_id: CurrentUserId,
    service: ManualServiceDep,
    file: UploadFile = File(...),
) -> ImageResponse:
    """Upload an image for a step (multipart field "file")."""
    data = await read_upload(file, service.max_upload_size)
    image = await service.upload_image(
        step_id,
        user_id,
        filename=file.filename or "",
        data=data,
        size=len(data),
        mime_type=file.content_type or "application/octet-stream",
    )
    return ImageResponse.from_model(image)


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT, operation_id="deleteImage")
async def delete_image(
    image_id: int,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> Response:
    await service.delete_image(image_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Step API endpoints."""

import structlog
from fastapi import APIRouter, Response, status

from guideforge.api.v1.dependencies import CurrentUserId, ManualServiceDep, OptionalUserId
from guideforge.api.v1.manuals.schemas import (
    StepCreateRequest,
    StepReorderRequest,
    StepResponse,
    StepUpdateRequest,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["steps"])


@router.get("/manuals/{manual_id}/steps", response_model=list[StepResponse], operation_id="listSteps")
async def list_steps(
    manual_id: int,
    user_id: OptionalUserId,
    service: ManualServiceDep,
) -> list[StepResponse]:
    """List the steps of a manual in order."""
    steps = await service.list_steps(manual_id, user_id)
    return [StepResponse.from_model(step) for step in steps]


@router.post(
    "/manuals/{manual_id}/steps",
    response_model=StepResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createStep",
)
async def create_step(
    manual_id: int,
    body: StepCreateRequest,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> StepResponse:
    """Add a step, appended at the end unless order_number is given."""
    step = await service.create_step(
        manual_id,
        user_id,
        title=body.title,
        content=body.content,
        order_number=body.order_number,
    )
    return StepResponse.from_model(step)


@router.put("/manuals/{manual_id}/steps/order", response_model=list[StepResponse], operation_id="reorderSteps")
async def reorder_steps(
    manual_id: int,
    body: StepReorderRequest,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> list[StepResponse]:
    """Move several steps at once.

    Either every listed step gets its new position or nothing changes.
    """
    steps = await service.reorder_steps(manual_id, user_id, body.to_orders())
    return [StepResponse.from_model(step) for step in steps]


@router.put("/steps/{step_id}", response_model=StepResponse, operation_id="updateStep")
async def update_step(
    step_id: int,
    body: StepUpdateRequest,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> StepResponse:
    step = await service.update_step(step_id, user_id, title=body.title, content=body.content)
    return StepResponse.from_model(step)


@router.delete("/steps/{step_id}", status_code=status.HTTP_204_NO_CONTENT, operation_id="deleteStep")
async def delete_step(
    step_id: int,
    user_id: CurrentUserId,
    service: ManualServiceDep,
) -> Response:
    """Delete a step and its images; later steps move up by one."""
    await service.delete_step(step_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Ownership guard for manuals and everything nested under them.

Ownership is never cached: a step or image is resolved to its manual through
one lookup per level (Image -> Step -> Manual) and the manual's user_id is
compared with the principal on every call.
"""

from guideforge.models.manual import Image, Manual, Step
from guideforge.repositories.manual_repository import ManualRepository
from guideforge.repositories.step_repository import StepRepository
from guideforge.services.manuals.exceptions import (
    ManualNotFound,
    NotOwnerError,
    PrivateManualError,
    StepNotFound,
)


def check_owner(principal_id: int, manual: Manual) -> None:
    """Raise NotOwnerError unless the principal owns the manual."""
    if manual.user_id != principal_id:
        raise NotOwnerError(f"Manual {manual.id} is not owned by user {principal_id}")


def check_can_read(principal_id: int | None, manual: Manual) -> None:
    """Public manuals are readable by anyone, private ones only by the owner."""
    if manual.is_public:
        return
    if principal_id is None or manual.user_id != principal_id:
        raise PrivateManualError(f"Manual {manual.id} is private")


class OwnershipGuard:
    """Resolves resources to their owning manual and checks the principal."""

    def __init__(self, manuals: ManualRepository, steps: StepRepository):
        self.manuals = manuals
        self.steps = steps

    async def manual_of_step(self, step: Step) -> Manual:
        manual = await self.manuals.get(step.manual_id)
        if manual is None:
            raise ManualNotFound()
        return manual

    async def step_of_image(self, image: Image) -> Step:
        step = await self.steps.get(image.step_id)
        if step is None:
            raise StepNotFound()
        return step

    async def authorize_step(self, principal_id: int, step: Step) -> Manual:
        """Check the principal owns the step's manual. Returns the manual."""
        manual = await self.manual_of_step(step)
        check_owner(principal_id, manual)
        return manual

    async def authorize_image(self, principal_id: int, image: Image) -> tuple[Step, Manual]:
        """Check the principal owns the image's manual. Returns (step, manual)."""
        step = await self.step_of_image(image)
        manual = await self.authorize_step(principal_id, step)
        return step, manual

    async def authorize(self, principal_id: int, resource: Manual | Step | Image) -> Manual:
        """Check the principal owns the resource. Returns the owning manual."""
        if isinstance(resource, Manual):
            check_owner(principal_id, resource)
            return resource
        if isinstance(resource, Step):
            return await self.authorize_step(principal_id, resource)
        if isinstance(resource, Image):
            _, manual = await self.authorize_image(principal_id, resource)
            return manual
        raise TypeError(f"Unsupported resource type: {type(resource).__name__}")

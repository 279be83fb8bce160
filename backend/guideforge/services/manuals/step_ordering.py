"""Step ordering engine.

Keeps the order_number values of a manual's steps equal to 0..count-1, each
exactly once, across insert, delete and bulk reorder.

Every method expects to run inside the caller's atomic() block with the
parent manual row already locked (ManualRepository.lock), so the read of the
current ordering and the writes that follow see no concurrent changes.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from guideforge.models.base import utc_now
from guideforge.models.manual import Step
from guideforge.repositories.step_repository import StepRepository
from guideforge.services.manuals.exceptions import InvalidStepOrder, StepNotFound, StepNotInManual

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StepOrder:
    """Requested position of one step in a bulk reorder."""

    step_id: int
    order_number: int


class StepOrderingEngine:
    """Assigns and maintains contiguous order numbers within one manual."""

    def __init__(self, steps: StepRepository):
        self.steps = steps

    async def insert(self, step: Step, position: int | None = None) -> Step:
        """Persist a new step at the given position, or append it.

        Appending assigns max(order_number) + 1 (0 for an empty manual).
        An explicit position must be within 0..count; steps at or after it
        move down by one to make room.

        Raises:
            InvalidStepOrder: If position is outside 0..count
        """
        manual_id = step.manual_id
        if position is None:
            max_order = await self.steps.max_order_number(manual_id)
            step.order_number = 0 if max_order is None else max_order + 1
        else:
            count = await self.steps.count(manual_id)
            if position < 0 or position > count:
                raise InvalidStepOrder(f"order_number must be between 0 and {count}, got {position}")
            shifted = await self.steps.shift_from(manual_id, position, 1)
            step.order_number = position
            logger.debug("Made room for step", manual_id=manual_id, position=position, shifted=shifted)

        return await self.steps.add(step)

    async def remove(self, step: Step) -> None:
        """Delete the step and close the gap it leaves.

        Raises:
            StepNotFound: If the row no longer exists
        """
        assert step.id is not None
        deleted = await self.steps.delete(step.id)
        if not deleted:
            raise StepNotFound()

        compacted = await self.steps.shift_from(step.manual_id, step.order_number + 1, -1)
        logger.debug(
            "Compacted step order",
            manual_id=step.manual_id,
            removed_order=step.order_number,
            compacted=compacted,
        )

    async def reorder(self, manual_id: int, orders: Sequence[StepOrder]) -> list[Step]:
        """Apply a set of new positions to the manual's steps.

        Nothing is written unless every step id belongs to the manual and the
        resulting ordering of all the manual's steps is exactly 0..count-1.

        Raises:
            StepNotInManual: If a step id does not belong to the manual
            InvalidStepOrder: If step ids repeat or the result is not contiguous
        """
        steps = await self.steps.list_by_manual(manual_id)
        by_id = {step.id: step for step in steps}

        seen: set[int] = set()
        for item in orders:
            if item.step_id not in by_id:
                raise StepNotInManual(item.step_id, manual_id)
            if item.step_id in seen:
                raise InvalidStepOrder(f"Step {item.step_id} appears more than once")
            seen.add(item.step_id)

        resulting = {step.id: step.order_number for step in steps}
        resulting.update({item.step_id: item.order_number for item in orders})
        if sorted(resulting.values()) != list(range(len(steps))):
            raise InvalidStepOrder(f"Step order numbers must be exactly 0..{len(steps) - 1} without duplicates")

        now = utc_now()
        for item in orders:
            step = by_id[item.step_id]
            if step.order_number != item.order_number:
                step.order_number = item.order_number
                step.updated_at = now
                await self.steps.save(step)

        return sorted(steps, key=lambda s: (s.order_number, s.id))

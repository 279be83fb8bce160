"""Step data access."""

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from guideforge.db.transaction import storage_errors
from guideforge.models.manual import Image, Step


class StepRepository:
    """Queries and mutations for the steps table.

    Does not commit; callers wrap mutations in atomic().
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, step_id: int) -> Step | None:
        with storage_errors("step", "load"):
            result = await self.session.execute(
                select(Step).where(Step.id == step_id).execution_options(populate_existing=True)
            )
            return result.scalars().first()

    async def get_with_images(self, step_id: int) -> Step | None:
        statement = (
            select(Step)
            .options(selectinload(Step.images))  # type: ignore[arg-type]
            .where(Step.id == step_id)
            .execution_options(populate_existing=True)
        )
        with storage_errors("step", "load"):
            result = await self.session.execute(statement)
            return result.scalars().first()

    async def list_by_manual(self, manual_id: int, *, with_images: bool = False) -> list[Step]:
        """List steps of a manual ordered by order_number (id breaks ties)."""
        statement = (
            select(Step)
            .where(Step.manual_id == manual_id)
            .order_by(Step.order_number, Step.id)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        if with_images:
            statement = statement.options(selectinload(Step.images))  # type: ignore[arg-type]
        with storage_errors("step", "list"):
            result = await self.session.execute(statement)
            return list(result.scalars().all())

    async def max_order_number(self, manual_id: int) -> int | None:
        """Highest order_number in the manual, or None when it has no steps."""
        with storage_errors("step", "load"):
            result = await self.session.execute(
                select(func.max(Step.order_number)).where(Step.manual_id == manual_id)
            )
            return result.scalar()

    async def count(self, manual_id: int) -> int:
        with storage_errors("step", "count"):
            result = await self.session.execute(
                select(func.count()).select_from(Step).where(Step.manual_id == manual_id)
            )
            return result.scalar() or 0

    async def add(self, step: Step) -> Step:
        with storage_errors("step", "insert"):
            self.session.add(step)
            await self.session.flush()
        return step

    async def save(self, step: Step) -> Step:
        """Flush pending attribute changes of a loaded step."""
        with storage_errors("step", "update"):
            self.session.add(step)
            await self.session.flush()
        return step

    async def delete(self, step_id: int) -> int:
        """Delete a step row and its image rows. Returns deleted step rows."""
        with storage_errors("step", "delete"):
            await self.session.execute(
                delete(Image).where(Image.step_id == step_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
            result = await self.session.execute(
                delete(Step).where(Step.id == step_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def shift_from(self, manual_id: int, start: int, delta: int) -> int:
        """Add delta to order_number of every step at or after start. Returns affected rows."""
        statement = (
            update(Step)
            .where(Step.manual_id == manual_id, Step.order_number >= start)  # type: ignore[arg-type]
            .values(order_number=Step.order_number + delta)
            .execution_options(synchronize_session="fetch")
        )
        with storage_errors("step", "reorder"):
            result = await self.session.execute(statement)
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

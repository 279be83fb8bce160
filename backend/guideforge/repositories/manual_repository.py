"""Manual data access."""

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import select

from guideforge.db.transaction import storage_errors
from guideforge.models.manual import Image, Manual, Step


class ManualRepository:
    """Queries and mutations for the manuals table.

    Does not commit; callers wrap mutations in atomic().
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, manual_id: int) -> Manual | None:
        """Get manual without relationships."""
        with storage_errors("manual", "load"):
            result = await self.session.execute(select(Manual).where(Manual.id == manual_id))
            return result.scalars().first()

    async def get_with_steps(self, manual_id: int) -> Manual | None:
        """Get manual with steps (ordered) and their images eagerly loaded."""
        statement = (
            select(Manual)
            .options(selectinload(Manual.steps).selectinload(Step.images))  # type: ignore[arg-type]
            .where(Manual.id == manual_id)
            .execution_options(populate_existing=True)
        )
        with storage_errors("manual", "load"):
            result = await self.session.execute(statement)
            return result.scalars().first()

    async def lock(self, manual_id: int) -> Manual | None:
        """Load manual with a row lock held until the transaction ends.

        Serializes concurrent step mutations on the same manual.
        """
        statement = (
            select(Manual)
            .where(Manual.id == manual_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        with storage_errors("manual", "lock"):
            result = await self.session.execute(statement)
            return result.scalars().first()

    async def list_by_user(self, user_id: int, *, offset: int, limit: int) -> tuple[list[Manual], int]:
        """List a user's manuals, most recently updated first. Returns (manuals, total_count)."""
        return await self._list_page(Manual.user_id == user_id, offset=offset, limit=limit)

    async def list_public(self, *, offset: int, limit: int) -> tuple[list[Manual], int]:
        """List public manuals, most recently updated first. Returns (manuals, total_count)."""
        return await self._list_page(Manual.is_public == True, offset=offset, limit=limit)  # noqa: E712

    async def list_ids_by_user(self, user_id: int) -> list[int]:
        with storage_errors("manual", "list"):
            result = await self.session.execute(select(Manual.id).where(Manual.user_id == user_id))
            return [row[0] for row in result.fetchall()]

    async def add(self, manual: Manual) -> Manual:
        with storage_errors("manual", "insert"):
            self.session.add(manual)
            await self.session.flush()
        return manual

    async def save(self, manual: Manual) -> Manual:
        """Flush pending attribute changes of a loaded manual."""
        with storage_errors("manual", "update"):
            self.session.add(manual)
            await self.session.flush()
        return manual

    async def delete(self, manual_id: int) -> int:
        """Delete manual together with its steps and images. Returns deleted manual rows."""
        step_ids = select(Step.id).where(Step.manual_id == manual_id)
        with storage_errors("manual", "delete"):
            await self.session.execute(
                delete(Image).where(Image.step_id.in_(step_ids)).execution_options(synchronize_session="fetch")  # type: ignore[attr-defined]
            )
            await self.session.execute(
                delete(Step).where(Step.manual_id == manual_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
            result = await self.session.execute(
                delete(Manual).where(Manual.id == manual_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def _list_page(self, condition: ColumnElement[bool], *, offset: int, limit: int) -> tuple[list[Manual], int]:
        statement = (
            select(Manual)
            .where(condition)
            .order_by(Manual.updated_at.desc(), Manual.id.desc())  # type: ignore[attr-defined, union-attr]
            .offset(offset)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(Manual).where(condition)
        with storage_errors("manual", "list"):
            result = await self.session.execute(statement)
            manuals = list(result.scalars().all())

            count_result = await self.session.execute(count_statement)
            total = count_result.scalar() or 0

        return manuals, total

"""Image data access."""

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from guideforge.db.transaction import storage_errors
from guideforge.models.manual import Image


class ImageRepository:
    """Queries and mutations for the images table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, image_id: int) -> Image | None:
        with storage_errors("image", "load"):
            result = await self.session.execute(select(Image).where(Image.id == image_id))
            return result.scalars().first()

    async def get_by_path(self, path: str) -> Image | None:
        with storage_errors("image", "load"):
            result = await self.session.execute(select(Image).where(Image.file_path == path))
            return result.scalars().first()

    async def list_by_step(self, step_id: int) -> list[Image]:
        with storage_errors("image", "list"):
            result = await self.session.execute(
                select(Image).where(Image.step_id == step_id).order_by(Image.id)  # type: ignore[arg-type]
            )
            return list(result.scalars().all())

    async def add(self, image: Image) -> Image:
        with storage_errors("image", "insert"):
            self.session.add(image)
            await self.session.flush()
        return image

    async def delete(self, image_id: int) -> int:
        with storage_errors("image", "delete"):
            result = await self.session.execute(
                delete(Image).where(Image.id == image_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

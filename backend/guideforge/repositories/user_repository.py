"""User data access."""

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from guideforge.db.transaction import storage_errors
from guideforge.models.user import User


class UserRepository:
    """Queries and mutations for the users table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> User | None:
        with storage_errors("user", "load"):
            result = await self.session.execute(select(User).where(User.id == user_id))
            return result.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        with storage_errors("user", "load"):
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalars().first()

    async def add(self, user: User) -> User:
        with storage_errors("user", "insert"):
            self.session.add(user)
            await self.session.flush()
        return user

    async def save(self, user: User) -> User:
        with storage_errors("user", "update"):
            self.session.add(user)
            await self.session.flush()
        return user

    async def delete(self, user_id: int) -> int:
        with storage_errors("user", "delete"):
            result = await self.session.execute(
                delete(User).where(User.id == user_id).execution_options(synchronize_session="fetch")  # type: ignore[arg-type]
            )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

"""Registration, login and password changes."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from guideforge.auth.passwords import hash_password, verify_password
from guideforge.db.transaction import atomic
from guideforge.models.base import utc_now
from guideforge.models.user import User
from guideforge.repositories.user_repository import UserRepository
from guideforge.services.users.exceptions import (
    EmailAlreadyRegistered,
    IncorrectPassword,
    InvalidCredentials,
    UserNotFound,
)

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for account credentials."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def register(self, *, username: str, email: str, password: str) -> User:
        """Create a new account.

        Raises:
            EmailAlreadyRegistered: If the email is taken
        """
        email = email.strip().lower()
        if await self.users.get_by_email(email) is not None:
            raise EmailAlreadyRegistered(f"Email {email} is already registered")

        user = User(username=username, email=email, password_hash=hash_password(password))
        async with atomic(self.session, entity="user", operation="insert"):
            await self.users.add(user)

        logger.info("Registered user", user_id=user.id)
        return user

    async def login(self, *, email: str, password: str) -> User:
        """Check credentials and return the user.

        Unknown email and wrong password raise the same error.
        """
        user = await self.users.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials("Invalid email or password")

        logger.info("User logged in", user_id=user.id)
        return user

    async def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFound()
        if not verify_password(current_password, user.password_hash):
            raise IncorrectPassword("Current password is incorrect")

        async with atomic(self.session, entity="user", operation="update"):
            user.password_hash = hash_password(new_password)
            user.updated_at = utc_now()
            await self.users.save(user)

        logger.info("Changed password", user_id=user_id)

"""User profile and account lifecycle."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from guideforge.config import settings
from guideforge.db.transaction import atomic
from guideforge.models.base import utc_now
from guideforge.models.user import User
from guideforge.repositories.manual_repository import ManualRepository
from guideforge.repositories.user_repository import UserRepository
from guideforge.services.manuals.exceptions import FileTooLarge, UnsupportedMediaType
from guideforge.services.manuals.manual_service import ManualService
from guideforge.services.storage.paths import profile_image_path
from guideforge.services.storage.storage_service import BlobStore, delete_quietly
from guideforge.services.users.exceptions import EmailAlreadyRegistered, UserNotFound

logger = structlog.get_logger(__name__)


class UserService:
    """Service for the authenticated user's own account."""

    def __init__(self, session: AsyncSession, storage: BlobStore, *, max_upload_size: int | None = None):
        self.session = session
        self.storage = storage
        self.max_upload_size = max_upload_size if max_upload_size is not None else settings.max_upload_size
        self.users = UserRepository(session)
        self.manuals = ManualRepository(session)

    async def get_user(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFound()
        return user

    async def update_profile(self, user_id: int, *, username: str, email: str) -> User:
        """Update username and email.

        Raises:
            UserNotFound: If the user does not exist
            EmailAlreadyRegistered: If another account uses the email
        """
        user = await self.get_user(user_id)
        email = email.strip().lower()
        if email != user.email:
            other = await self.users.get_by_email(email)
            if other is not None and other.id != user_id:
                raise EmailAlreadyRegistered(f"Email {email} is already registered")

        async with atomic(self.session, entity="user", operation="update"):
            user.username = username
            user.email = email
            user.updated_at = utc_now()
            await self.users.save(user)

        logger.info("Updated profile", user_id=user_id)
        return user

    async def update_profile_image(
        self,
        user_id: int,
        *,
        filename: str,
        data: bytes,
        size: int,
        mime_type: str,
    ) -> User:
        """Store a new profile picture and point the user at it.

        The previous picture is removed best-effort when it lived at a
        different path.
        """
        if size > self.max_upload_size:
            raise FileTooLarge(f"File too large (max {self.max_upload_size} bytes)")
        if not mime_type.startswith("image/"):
            raise UnsupportedMediaType(f"Unsupported media type: {mime_type}")

        user = await self.get_user(user_id)
        path = profile_image_path(user_id, filename)
        previous = user.profile_image

        await self.storage.put(path, data, mime_type)
        try:
            async with atomic(self.session, entity="user", operation="update"):
                user.profile_image = path
                user.updated_at = utc_now()
                await self.users.save(user)
        except Exception:
            if path != previous:
                await delete_quietly(self.storage, path, user_id=user_id)
            raise

        if previous and previous != path:
            await delete_quietly(self.storage, previous, user_id=user_id)

        logger.info("Updated profile image", user_id=user_id, path=path, size=size)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete the account and everything it owns.

        Each owned manual goes through the regular manual deletion so that
        image blobs are purged; the profile picture follows, then the user row.
        """
        user = await self.get_user(user_id)

        manual_service = ManualService(self.session, self.storage, max_upload_size=self.max_upload_size)
        manual_ids = await self.manuals.list_ids_by_user(user_id)
        for manual_id in manual_ids:
            await manual_service.delete_manual(manual_id, user_id)

        if user.profile_image:
            await delete_quietly(self.storage, user.profile_image, user_id=user_id)

        async with atomic(self.session, entity="user", operation="delete"):
            if not await self.users.delete(user_id):
                raise UserNotFound()

        logger.info("Deleted user", user_id=user_id, manual_count=len(manual_ids))

"""Manual, step and image lifecycle service.

Every mutation follows the same sequence: load the target, resolve it to its
manual and check ownership, then mutate inside atomic(). Blob-store side
effects are ordered around the row changes:
- uploads reserve the blob path with an uncommitted image row (file_path is
  unique), write the blob, then commit; any failure after the reservation
  deletes the blob again
- cascading deletes (manual, step) purge blobs best-effort before the rows go
- a single image delete removes the blob first and keeps the row when the
  blob store fails for any reason other than a missing object
"""

from collections.abc import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from guideforge.config import settings
from guideforge.db.transaction import atomic
from guideforge.models.base import utc_now
from guideforge.models.manual import Image, Manual, Step
from guideforge.repositories.image_repository import ImageRepository
from guideforge.repositories.manual_repository import ManualRepository
from guideforge.repositories.step_repository import StepRepository
from guideforge.services.exceptions import ConflictError
from guideforge.services.manuals.exceptions import (
    FileTooLarge,
    ImageAlreadyExists,
    ImageNotFound,
    ManualNotFound,
    StepNotFound,
    UnsupportedMediaType,
)
from guideforge.services.manuals.ownership import OwnershipGuard, check_can_read, check_owner
from guideforge.services.manuals.step_ordering import StepOrder, StepOrderingEngine
from guideforge.services.pagination import Page, normalize, offset_for
from guideforge.services.storage.paths import ManualStoragePaths
from guideforge.services.storage.storage_service import BlobNotFoundError, BlobStore, delete_quietly

logger = structlog.get_logger(__name__)


class ManualService:
    """Service for manual, step and image management."""

    def __init__(
        self,
        session: AsyncSession,
        storage: BlobStore,
        *,
        max_upload_size: int | None = None,
    ):
        self.session = session
        self.storage = storage
        self.max_upload_size = max_upload_size if max_upload_size is not None else settings.max_upload_size
        self.manuals = ManualRepository(session)
        self.steps = StepRepository(session)
        self.images = ImageRepository(session)
        self.guard = OwnershipGuard(self.manuals, self.steps)
        self.ordering = StepOrderingEngine(self.steps)

    # -- Manuals ------------------------------------------------------------

    async def create_manual(
        self,
        owner_id: int,
        *,
        title: str,
        description: str | None = None,
        category: str | None = None,
        is_public: bool = False,
    ) -> Manual:
        manual = Manual(
            user_id=owner_id,
            title=title,
            description=description,
            category=category,
            is_public=is_public,
        )
        async with atomic(self.session, entity="manual", operation="insert"):
            await self.manuals.add(manual)

        logger.info("Created manual", manual_id=manual.id, user_id=owner_id)
        return manual

    async def get_manual(self, manual_id: int, requester_id: int | None) -> Manual:
        """Get manual with ordered steps and their images.

        Raises:
            ManualNotFound: If the manual does not exist
            PrivateManualError: If it is private and requester is not the owner
        """
        manual = await self.manuals.get_with_steps(manual_id)
        if manual is None:
            raise ManualNotFound()
        check_can_read(requester_id, manual)
        return manual

    async def list_user_manuals(self, user_id: int, *, page: int = 1, limit: int = 10) -> Page[Manual]:
        page, limit = normalize(page, limit)
        manuals, total = await self.manuals.list_by_user(user_id, offset=offset_for(page, limit), limit=limit)
        return Page(items=manuals, total=total, page=page, limit=limit)

    async def list_public_manuals(self, *, page: int = 1, limit: int = 10) -> Page[Manual]:
        page, limit = normalize(page, limit)
        manuals, total = await self.manuals.list_public(offset=offset_for(page, limit), limit=limit)
        return Page(items=manuals, total=total, page=page, limit=limit)

    async def update_manual(
        self,
        manual_id: int,
        requester_id: int,
        *,
        title: str,
        description: str | None = None,
        category: str | None = None,
        is_public: bool = False,
    ) -> Manual:
        """Overwrite the mutable fields of a manual. Owner only, regardless of is_public."""
        manual = await self.manuals.get(manual_id)
        if manual is None:
            raise ManualNotFound()
        check_owner(requester_id, manual)

        async with atomic(self.session, entity="manual", operation="update"):
            manual.title = title
            manual.description = description
            manual.category = category
            manual.is_public = is_public
            manual.updated_at = utc_now()
            await self.manuals.save(manual)

        logger.info("Updated manual", manual_id=manual_id)
        return manual

    async def delete_manual(self, manual_id: int, requester_id: int) -> None:
        """Delete manual, its steps and images.

        Image blobs are removed best-effort first; failures are logged and
        do not block the row deletion.
        """
        manual = await self.manuals.get_with_steps(manual_id)
        if manual is None:
            raise ManualNotFound()
        check_owner(requester_id, manual)

        for step in manual.steps:
            for image in step.images:
                await delete_quietly(self.storage, image.file_path, manual_id=manual_id, image_id=image.id)

        async with atomic(self.session, entity="manual", operation="delete"):
            if not await self.manuals.delete(manual_id):
                raise ManualNotFound()

        logger.info("Deleted manual", manual_id=manual_id, step_count=len(manual.steps))

    # -- Steps --------------------------------------------------------------

    async def list_steps(self, manual_id: int, requester_id: int | None) -> list[Step]:
        manual = await self.manuals.get(manual_id)
        if manual is None:
            raise ManualNotFound()
        check_can_read(requester_id, manual)
        return await self.steps.list_by_manual(manual_id, with_images=True)

    async def create_step(
        self,
        manual_id: int,
        requester_id: int,
        *,
        title: str,
        content: str | None = None,
        order_number: int | None = None,
    ) -> Step:
        """Add a step to a manual, appended unless order_number is given.

        Raises:
            ManualNotFound: If the manual does not exist
            NotOwnerError: If requester does not own the manual
            InvalidStepOrder: If order_number is outside 0..step_count
        """
        async with atomic(self.session, entity="step", operation="insert"):
            manual = await self.manuals.lock(manual_id)
            if manual is None:
                raise ManualNotFound()
            check_owner(requester_id, manual)

            step = Step(manual_id=manual_id, title=title, content=content)
            await self.ordering.insert(step, order_number)

        logger.info("Created step", manual_id=manual_id, step_id=step.id, order_number=step.order_number)
        return await self._load_step(step.id)

    async def update_step(
        self,
        step_id: int,
        requester_id: int,
        *,
        title: str,
        content: str | None = None,
    ) -> Step:
        """Update step text. Position changes go through reorder_steps."""
        step = await self.steps.get(step_id)
        if step is None:
            raise StepNotFound()
        await self.guard.authorize(requester_id, step)

        async with atomic(self.session, entity="step", operation="update"):
            step.title = title
            step.content = content
            step.updated_at = utc_now()
            await self.steps.save(step)

        logger.info("Updated step", step_id=step_id)
        return await self._load_step(step_id)

    async def delete_step(self, step_id: int, requester_id: int) -> None:
        """Delete a step, purge its image blobs and close the ordering gap."""
        step = await self.steps.get_with_images(step_id)
        if step is None:
            raise StepNotFound()
        manual = await self.guard.authorize_step(requester_id, step)

        for image in step.images:
            await delete_quietly(self.storage, image.file_path, step_id=step_id, image_id=image.id)

        async with atomic(self.session, entity="step", operation="delete"):
            if await self.manuals.lock(manual.id) is None:  # type: ignore[arg-type]
                raise ManualNotFound()
            # Re-read under the lock so the compaction uses the current position
            current = await self.steps.get(step_id)
            if current is None:
                raise StepNotFound()
            await self.ordering.remove(current)

        logger.info("Deleted step", manual_id=manual.id, step_id=step_id)

    async def reorder_steps(self, manual_id: int, requester_id: int, orders: Sequence[StepOrder]) -> list[Step]:
        """Apply new positions to several steps of a manual in one transaction.

        Raises:
            ManualNotFound: If the manual does not exist
            NotOwnerError: If requester does not own the manual
            StepNotInManual: If any step id belongs elsewhere (nothing is changed)
            InvalidStepOrder: If the resulting ordering is not 0..count-1
        """
        async with atomic(self.session, entity="step", operation="reorder"):
            manual = await self.manuals.lock(manual_id)
            if manual is None:
                raise ManualNotFound()
            check_owner(requester_id, manual)
            await self.ordering.reorder(manual_id, orders)

        logger.info("Reordered steps", manual_id=manual_id, changed=len(orders))
        return await self.steps.list_by_manual(manual_id, with_images=True)

    # -- Images -------------------------------------------------------------

    async def upload_image(
        self,
        step_id: int,
        requester_id: int,
        *,
        filename: str,
        data: bytes,
        size: int,
        mime_type: str,
    ) -> Image:
        """Store an image blob for a step and record it.

        Raises:
            FileTooLarge / UnsupportedMediaType / InvalidFilename: On bad input
            StepNotFound: If the step does not exist
            NotOwnerError: If requester does not own the step's manual
            ImageAlreadyExists: If another image already uses the computed path
            StorageError: If the blob or the row cannot be written
        """
        if size > self.max_upload_size:
            raise FileTooLarge(f"File too large (max {self.max_upload_size} bytes)")
        if not mime_type.startswith("image/"):
            raise UnsupportedMediaType(f"Unsupported media type: {mime_type}")

        step = await self.steps.get(step_id)
        if step is None:
            raise StepNotFound()
        manual = await self.guard.authorize_step(requester_id, step)

        path = ManualStoragePaths(manual.id).step_image(step_id, filename)  # type: ignore[arg-type]
        if await self.images.get_by_path(path) is not None:
            raise ImageAlreadyExists(f"Image {filename!r} already exists for step {step_id}")

        image = Image(
            step_id=step_id,
            file_path=path,
            file_name=filename,
            file_size=size,
            mime_type=mime_type,
        )
        # A blob at path without a committed row is an orphan and is overwritten
        reserved = False
        try:
            async with atomic(self.session, entity="image", operation="insert"):
                await self.images.add(image)
                reserved = True
                await self.storage.put(path, data, mime_type)
        except ConflictError as e:
            if reserved:
                await delete_quietly(self.storage, path, step_id=step_id)
                raise
            raise ImageAlreadyExists(f"Image {filename!r} already exists for step {step_id}") from e
        except Exception:
            if reserved:
                logger.warning("Image upload failed, removing blob", step_id=step_id, path=path)
                await delete_quietly(self.storage, path, step_id=step_id)
            raise

        logger.info("Uploaded step image", step_id=step_id, image_id=image.id, path=path, size=size)
        return image

    async def delete_image(self, image_id: int, requester_id: int) -> None:
        """Delete an image blob and its row.

        A missing blob is ignored; any other blob-store failure aborts before
        the row is touched.
        """
        image = await self.images.get(image_id)
        if image is None:
            raise ImageNotFound()
        await self.guard.authorize(requester_id, image)

        try:
            await self.storage.delete(image.file_path)
        except BlobNotFoundError:
            logger.info("Image blob already absent", image_id=image_id, path=image.file_path)

        async with atomic(self.session, entity="image", operation="delete"):
            if not await self.images.delete(image_id):
                raise ImageNotFound()

        logger.info("Deleted image", image_id=image_id)

    async def _load_step(self, step_id: int | None) -> Step:
        assert step_id is not None
        step = await self.steps.get_with_images(step_id)
        if step is None:
            raise StepNotFound()
        return step

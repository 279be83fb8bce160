"""
Tests for ownership checks on manuals, steps and images.
"""

import pytest

from guideforge.services.exceptions import UnauthorizedError
from guideforge.services.manuals.exceptions import (
    ImageNotFound,
    ManualNotFound,
    NotOwnerError,
    PrivateManualError,
    StepNotFound,
)
from guideforge.services.manuals.step_ordering import StepOrder


@pytest.fixture
async def populated(manual_service, manual, owner, other_user, png_bytes):
    """A manual with one step and one image, plus the ids the tests need."""
    step = await manual_service.create_step(manual.id, owner.id, title="Drill holes")
    image = await manual_service.upload_image(
        step.id, owner.id, filename="holes.png", data=png_bytes, size=len(png_bytes), mime_type="image/png"
    )
    return {
        "manual_id": manual.id,
        "step_id": step.id,
        "image_id": image.id,
        "image_path": image.file_path,
        "owner_id": owner.id,
        "other_id": other_user.id,
    }


class TestMutationsRequireOwner:
    """Every mutation by a non-owner fails with an authorization error and changes nothing."""

    async def test_update_manual(self, manual_service, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.update_manual(populated["manual_id"], populated["other_id"], title="Hijacked")

        manual = await manual_service.manuals.get(populated["manual_id"])
        assert manual.title == "Assemble the shelf"

    async def test_delete_manual(self, manual_service, storage, populated):
        with pytest.raises(UnauthorizedError):
            await manual_service.delete_manual(populated["manual_id"], populated["other_id"])

        assert await manual_service.manuals.get(populated["manual_id"]) is not None
        assert await storage.exists(populated["image_path"])

    async def test_create_step(self, manual_service, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.create_step(populated["manual_id"], populated["other_id"], title="Sneaky")

        assert await manual_service.steps.count(populated["manual_id"]) == 1

    async def test_update_step(self, manual_service, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.update_step(populated["step_id"], populated["other_id"], title="Sneaky")

    async def test_delete_step(self, manual_service, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.delete_step(populated["step_id"], populated["other_id"])

        assert await manual_service.steps.get(populated["step_id"]) is not None

    async def test_reorder_steps(self, manual_service, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.reorder_steps(
                populated["manual_id"],
                populated["other_id"],
                [StepOrder(step_id=populated["step_id"], order_number=0)],
            )

    async def test_upload_image(self, manual_service, populated, png_bytes):
        with pytest.raises(NotOwnerError):
            await manual_service.upload_image(
                populated["step_id"],
                populated["other_id"],
                filename="evil.png",
                data=png_bytes,
                size=len(png_bytes),
                mime_type="image/png",
            )

    async def test_delete_image(self, manual_service, storage, populated):
        with pytest.raises(NotOwnerError):
            await manual_service.delete_image(populated["image_id"], populated["other_id"])

        assert await manual_service.images.get(populated["image_id"]) is not None
        assert await storage.exists(populated["image_path"])


class TestReadAccess:
    """Reads honour the is_public flag."""

    async def test_private_manual_hidden_from_others(self, manual_service, populated):
        with pytest.raises(PrivateManualError):
            await manual_service.get_manual(populated["manual_id"], populated["other_id"])

    async def test_private_manual_hidden_from_anonymous(self, manual_service, populated):
        with pytest.raises(PrivateManualError):
            await manual_service.list_steps(populated["manual_id"], None)

    async def test_owner_reads_private_manual(self, manual_service, populated):
        manual = await manual_service.get_manual(populated["manual_id"], populated["owner_id"])

        assert [step.id for step in manual.steps] == [populated["step_id"]]
        assert [image.id for image in manual.steps[0].images] == [populated["image_id"]]

    async def test_public_manual_readable_by_anyone(self, manual_service, populated):
        await manual_service.update_manual(
            populated["manual_id"], populated["owner_id"], title="Assemble the shelf", is_public=True
        )

        manual = await manual_service.get_manual(populated["manual_id"], None)
        steps = await manual_service.list_steps(populated["manual_id"], populated["other_id"])

        assert manual.is_public
        assert [step.id for step in steps] == [populated["step_id"]]

    async def test_public_manual_still_owner_only_for_mutation(self, manual_service, populated):
        await manual_service.update_manual(
            populated["manual_id"], populated["owner_id"], title="Assemble the shelf", is_public=True
        )

        with pytest.raises(NotOwnerError):
            await manual_service.update_manual(populated["manual_id"], populated["other_id"], title="Mine now")


class TestMissingResources:
    """Unknown ids surface as not-found errors."""

    async def test_unknown_manual(self, manual_service, owner):
        with pytest.raises(ManualNotFound):
            await manual_service.get_manual(999, owner.id)

    async def test_unknown_step(self, manual_service, owner):
        with pytest.raises(StepNotFound):
            await manual_service.update_step(999, owner.id, title="Nothing")

    async def test_unknown_image(self, manual_service, owner):
        with pytest.raises(ImageNotFound):
            await manual_service.delete_image(999, owner.id)


class TestGuardResolution:
    """The guard resolves nested resources to the owning manual."""

    async def test_authorize_resolves_each_level(self, manual_service, populated):
        manual = await manual_service.manuals.get(populated["manual_id"])
        step = await manual_service.steps.get(populated["step_id"])
        image = await manual_service.images.get(populated["image_id"])

        for resource in (manual, step, image):
            owning = await manual_service.guard.authorize(populated["owner_id"], resource)
            assert owning.id == populated["manual_id"]

    async def test_authorize_rejects_non_owner_at_each_level(self, manual_service, populated):
        manual = await manual_service.manuals.get(populated["manual_id"])
        step = await manual_service.steps.get(populated["step_id"])
        image = await manual_service.images.get(populated["image_id"])

        for resource in (manual, step, image):
            with pytest.raises(NotOwnerError):
                await manual_service.guard.authorize(populated["other_id"], resource)

"""Storage gateway: SQL repositories over an AsyncSession."""

from guideforge.repositories.image_repository import ImageRepository
from guideforge.repositories.manual_repository import ManualRepository
from guideforge.repositories.step_repository import StepRepository
from guideforge.repositories.user_repository import UserRepository

__all__ = [
    "ImageRepository",
    "ManualRepository",
    "StepRepository",
    "UserRepository",
]

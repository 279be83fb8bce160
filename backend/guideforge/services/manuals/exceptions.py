"""Manual domain exceptions."""

from guideforge.services.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)


class ManualNotFound(NotFoundError):
    """Manual not found."""

    pass


class StepNotFound(NotFoundError):
    """Step not found."""

    pass


class ImageNotFound(NotFoundError):
    """Image not found."""

    pass


class NotOwnerError(UnauthorizedError):
    """Principal does not own the manual the resource belongs to."""

    pass


class PrivateManualError(UnauthorizedError):
    """Manual is private and the requester is not its owner."""

    pass


class StepNotInManual(InvalidArgumentError):
    """Step referenced by a reorder request does not belong to the manual."""

    def __init__(self, step_id: int, manual_id: int):
        self.step_id = step_id
        self.manual_id = manual_id
        super().__init__(f"Step {step_id} not found in manual {manual_id}")


class InvalidStepOrder(InvalidArgumentError):
    """Requested order numbers would break the contiguous step ordering."""

    pass


class InvalidFilename(InvalidArgumentError):
    """Uploaded filename cannot be turned into a storage path."""

    pass


class FileTooLarge(InvalidArgumentError):
    """Uploaded file exceeds the configured size limit."""

    pass


class UnsupportedMediaType(InvalidArgumentError):
    """Uploaded file is not an image."""

    pass


class ImageAlreadyExists(ConflictError):
    """An image with the same storage path already exists for the step."""

    pass

"""Blob storage path generation helpers.

All step image paths follow the pattern:
    steps/manual_{manual_id}/step_{step_id}/image_{filename}
Profile pictures live under:
    profiles/user_{user_id}{ext}
"""

from pathlib import PurePosixPath, PureWindowsPath

from guideforge.services.manuals.exceptions import InvalidFilename


def safe_basename(filename: str) -> str:
    """Strip any directory components from a client-supplied filename.

    Raises:
        InvalidFilename: If nothing usable remains
    """
    name = PureWindowsPath(PurePosixPath(filename).name).name.strip()
    if not name or name in (".", ".."):
        raise InvalidFilename(f"Invalid filename: {filename!r}")
    return name


class ManualStoragePaths:
    """Helper class to generate blob paths based on manual structure."""

    def __init__(self, manual_id: int) -> None:
        self.manual_id = manual_id

    def _manual_path(self) -> str:
        """Base path for manual: steps/manual_{manual_id}"""
        return f"steps/manual_{self.manual_id}"

    def _step_path(self, step_id: int) -> str:
        """Path to step: steps/manual_{manual_id}/step_{step_id}"""
        return f"{self._manual_path()}/step_{step_id}"

    def step_image(self, step_id: int, filename: str) -> str:
        """Generate path for a step image.

        Deterministic for a given manual, step and filename.

        Args:
            step_id: Step the image is attached to
            filename: Original upload filename (directories are stripped)

        Returns:
            Blob path for the image
        """
        return f"{self._step_path(step_id)}/image_{safe_basename(filename)}"


def profile_image_path(user_id: int, filename: str) -> str:
    """Generate path for a user's profile picture, keeping the upload's extension."""
    ext = PurePosixPath(safe_basename(filename)).suffix.lower()
    return f"profiles/user_{user_id}{ext}"

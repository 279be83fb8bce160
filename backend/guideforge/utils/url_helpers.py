"""URL generation helpers for API responses."""

from guideforge.config import settings


def blob_path_to_url(path: str | None) -> str | None:
    """
    Convert a blob-store path to the public URL it is served from.

    Args:
        path: Relative blob path (e.g., "steps/manual_4/step_9/image_wiring.png")

    Returns:
        Public URL (e.g., "/uploads/steps/manual_4/step_9/image_wiring.png")
        or None if path is None
    """
    if not path:
        return None
    return f"{settings.static_url.rstrip('/')}/{path.lstrip('/')}"

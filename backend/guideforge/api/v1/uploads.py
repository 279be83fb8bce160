"""Bounded reading of multipart uploads."""

from fastapi import UploadFile

from guideforge.services.manuals.exceptions import FileTooLarge


async def read_upload(file: UploadFile, limit: int) -> bytes:
    """Read at most limit + 1 bytes of an upload.

    A declared size over the limit is rejected without reading. Otherwise the
    extra byte lets the service see that an undeclared body is too large.
    """
    if file.size is not None and file.size > limit:
        raise FileTooLarge(f"File too large (max {limit} bytes)")
    return await file.read(limit + 1)

"""Database models."""

# ruff: noqa: I001 - Import order matters for SQLAlchemy relationship resolution
from sqlmodel import SQLModel

from guideforge.models.user import User
from guideforge.models.manual import Image, Manual, Step

__all__ = [
    "SQLModel",
    "User",
    "Manual",
    "Step",
    "Image",
]

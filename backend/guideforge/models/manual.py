"""Manual, Step, and Image database models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlmodel import Field, Relationship, SQLModel

from guideforge.models.base import utc_now


class Manual(SQLModel, table=True):
    """User-authored multi-step guide."""

    __tablename__ = "manuals"

    id: int | None = Field(default=None, primary_key=True)
    # Owner, immutable after creation
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id"), index=True, nullable=False),
    )
    title: str = Field(max_length=255)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    category: str | None = Field(default=None, max_length=100)
    is_public: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    steps: list["Step"] = Relationship(
        back_populates="manual",
        sa_relationship_kwargs={
            "order_by": "[Step.order_number, Step.id]",
            "passive_deletes": True,
        },
    )


class Step(SQLModel, table=True):
    """One ordered instruction within a manual.

    order_number is zero-based and contiguous per manual. It is maintained by
    StepOrderingEngine, never assigned directly by callers.
    """

    __tablename__ = "steps"

    id: int | None = Field(default=None, primary_key=True)
    manual_id: int = Field(
        sa_column=Column(Integer, ForeignKey("manuals.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    order_number: int = 0
    title: str = Field(max_length=255)
    content: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    manual: Manual = Relationship(back_populates="steps")
    images: list["Image"] = Relationship(
        back_populates="step",
        sa_relationship_kwargs={
            "order_by": "Image.id",
            "passive_deletes": True,
        },
    )


class Image(SQLModel, table=True):
    """Binary attachment of a step, stored in the blob store."""

    __tablename__ = "images"

    id: int | None = Field(default=None, primary_key=True)
    step_id: int = Field(
        sa_column=Column(Integer, ForeignKey("steps.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    file_path: str = Field(unique=True, index=True)  # Blob-store path, e.g. steps/manual_1/step_2/image_photo.png
    file_name: str  # Original upload filename
    file_size: int
    mime_type: str

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Relationships
    step: Step = Relationship(back_populates="images")

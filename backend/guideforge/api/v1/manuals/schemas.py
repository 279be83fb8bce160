"""API schemas for manual, step and image endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer

from guideforge.models.manual import Image, Manual, Step
from guideforge.services.manuals.step_ordering import StepOrder
from guideforge.services.pagination import Page
from guideforge.utils.datetime_utils import serialize_api_datetime
from guideforge.utils.url_helpers import blob_path_to_url

# =============================================================================
# Request Schemas
# =============================================================================


class ManualRequest(BaseModel):
    """Request body for creating or updating a manual."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    is_public: bool = False


class StepCreateRequest(BaseModel):
    """Request body for creating a step.

    Without order_number the step is appended at the end.
    """

    title: str = Field(min_length=1, max_length=255)
    content: str | None = None
    order_number: int | None = None


class StepUpdateRequest(BaseModel):
    """Request body for updating step text."""

    title: str = Field(min_length=1, max_length=255)
    content: str | None = None


class StepOrderItem(BaseModel):
    """New position for one step."""

    step_id: int
    order_number: int


class StepReorderRequest(BaseModel):
    """Request body for bulk reordering steps of a manual."""

    steps: list[StepOrderItem] = Field(min_length=1)

    def to_orders(self) -> list[StepOrder]:
        return [StepOrder(step_id=item.step_id, order_number=item.order_number) for item in self.steps]


# =============================================================================
# Response Schemas
# =============================================================================


class ImageResponse(BaseModel):
    """Step image response schema."""

    id: int
    step_id: int
    file_name: str
    file_size: int
    mime_type: str
    url: str | None
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        return serialize_api_datetime(dt)

    @classmethod
    def from_model(cls, image: Image) -> "ImageResponse":
        """Create response from Image model."""
        return cls(
            id=image.id,  # type: ignore[arg-type]
            step_id=image.step_id,
            file_name=image.file_name,
            file_size=image.file_size,
            mime_type=image.mime_type,
            url=blob_path_to_url(image.file_path),
            created_at=image.created_at,
        )


class StepResponse(BaseModel):
    """Step response schema including its images."""

    id: int
    manual_id: int
    order_number: int
    title: str
    content: str | None
    images: list[ImageResponse]
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        return serialize_api_datetime(dt)

    @classmethod
    def from_model(cls, step: Step) -> "StepResponse":
        """Create response from Step model (images must be loaded)."""
        return cls(
            id=step.id,  # type: ignore[arg-type]
            manual_id=step.manual_id,
            order_number=step.order_number,
            title=step.title,
            content=step.content,
            images=[ImageResponse.from_model(image) for image in step.images],
            created_at=step.created_at,
            updated_at=step.updated_at,
        )


class ManualResponse(BaseModel):
    """Manual response schema for list view."""

    id: int
    user_id: int
    title: str
    description: str | None
    category: str | None
    is_public: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        return serialize_api_datetime(dt)

    @classmethod
    def from_model(cls, manual: Manual) -> "ManualResponse":
        """Create response from Manual model."""
        return cls(
            id=manual.id,  # type: ignore[arg-type]
            user_id=manual.user_id,
            title=manual.title,
            description=manual.description,
            category=manual.category,
            is_public=manual.is_public,
            created_at=manual.created_at,
            updated_at=manual.updated_at,
        )


class ManualDetailResponse(ManualResponse):
    """Manual with its ordered steps and their images."""

    steps: list[StepResponse]

    @classmethod
    def from_model(cls, manual: Manual) -> "ManualDetailResponse":
        """Create response from Manual model (steps and images must be loaded)."""
        return cls(
            id=manual.id,  # type: ignore[arg-type]
            user_id=manual.user_id,
            title=manual.title,
            description=manual.description,
            category=manual.category,
            is_public=manual.is_public,
            created_at=manual.created_at,
            updated_at=manual.updated_at,
            steps=[StepResponse.from_model(step) for step in manual.steps],
        )


class ManualListResponse(BaseModel):
    """Paginated manual list."""

    manuals: list[ManualResponse]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[Manual]) -> "ManualListResponse":
        return cls(
            manuals=[ManualResponse.from_model(manual) for manual in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )

from datetime import date

from pydantic import BaseModel
from pydantic import Field


class MessageRequest(BaseModel):
    """Message submitted for validation or preview."""

    message: str = Field(max_length=200)


class PreviewEvent(BaseModel):
    """Single dated event derived from a non-empty grid cell."""

    date: date
    intensity: int


class PreviewResponse(BaseModel):
    """Rendered grid plus the schedule it implies."""

    message: str
    width: int
    fully_rendered: bool
    grid: list[list[int]]
    total_intensity: int
    events: list[PreviewEvent]

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Annotated, Literal, Optional, Union


# Authenticated identity supplied by the external identity provider
class Principal(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class Frame(BaseModel):
    timestamp: float
    image_url: str = Field(alias="imageUrl")
    score: float

    class Config:
        populate_by_name = True


# Fields every record carries, whatever its analysis state
class VideoBase(BaseModel):
    id: int
    user_id: str
    title: str
    category: str
    description: str = ""
    file_url: str
    tone_requested: bool
    created_at: datetime
    thumbnail_url: Optional[str] = None

    class Config:
        from_attributes = True


class PendingVideo(VideoBase):
    status: Literal["pending"] = "pending"


class AnalyzedVideo(VideoBase):
    status: Literal["analyzed"] = "analyzed"
    # Any of these may be missing; tone extraction only runs when requested
    transcript: Optional[str] = None
    tone_rating: Optional[float] = None
    frames: list[Frame] = []
    gpt_notes: Optional[str] = None

    @field_validator("frames", mode="before")
    @classmethod
    def null_frames_as_empty(cls, value):
        return [] if value is None else value


class FailedVideo(VideoBase):
    status: Literal["failed"] = "failed"


VideoRecord = Union[PendingVideo, AnalyzedVideo, FailedVideo]

# Response-model form, dispatched on the status tag
VideoRecordOut = Annotated[VideoRecord, Field(discriminator="status")]

_VARIANTS = {
    "pending": PendingVideo,
    "analyzed": AnalyzedVideo,
    "failed": FailedVideo,
}


def to_video_record(row) -> VideoRecord:
    """Builds the variant matching the row's status tag."""
    try:
        variant = _VARIANTS[row.status]
    except KeyError:
        raise ValueError(f"Unknown video status: {row.status!r}")
    return variant.model_validate(row)


class UploadOut(BaseModel):
    message: str
    video: VideoRecordOut
    recent: list[VideoRecordOut]

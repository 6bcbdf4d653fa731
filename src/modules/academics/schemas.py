"""Schemas for the academic hierarchy."""

from pydantic import BaseModel, Field, field_validator

from src.shared.schemas import BaseSchema


class _NamedCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class LevelCreate(_NamedCreate):
    """Schema for creating a level."""


class TrackCreate(_NamedCreate):
    """Schema for creating a track under a level."""

    level_id: int


class SubjectCreate(_NamedCreate):
    """Schema for creating a subject under a track."""

    track_id: int


class SubjectResponse(BaseSchema):
    id: int
    track_id: int
    name: str


class TrackResponse(BaseSchema):
    id: int
    level_id: int
    name: str


class TrackDetailResponse(TrackResponse):
    subjects: list[SubjectResponse] = []


class LevelResponse(BaseSchema):
    id: int
    name: str


class LevelDetailResponse(LevelResponse):
    """Level with its tracks and subjects."""

    tracks: list[TrackDetailResponse] = []

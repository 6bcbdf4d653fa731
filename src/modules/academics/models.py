"""Academic hierarchy: Level -> Track -> Subject."""

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel


class Level(BaseModel):
    """Top of the hierarchy, e.g. "Secondary"."""

    __tablename__ = "levels"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Relationships
    tracks: Mapped[list["Track"]] = relationship(
        "Track", back_populates="level", cascade="all, delete-orphan", order_by="Track.name"
    )


class Track(BaseModel):
    """Track within a level, e.g. "Scientific"."""

    __tablename__ = "tracks"

    level_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("levels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    level: Mapped["Level"] = relationship("Level", back_populates="tracks")
    subjects: Mapped[list["Subject"]] = relationship(
        "Subject", back_populates="track", cascade="all, delete-orphan", order_by="Subject.name"
    )

    __table_args__ = (
        UniqueConstraint("level_id", "name", name="uq_track_level_name"),
    )


class Subject(BaseModel):
    """Subject within a track, e.g. "Physics". Classes point at subjects."""

    __tablename__ = "subjects"

    track_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tracks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    track: Mapped["Track"] = relationship("Track", back_populates="subjects")

    __table_args__ = (
        UniqueConstraint("track_id", "name", name="uq_subject_track_name"),
    )

    @property
    def level_name(self) -> str | None:
        """Level name reached through the track; relationships must be loaded."""
        if self.track and self.track.level:
            return self.track.level.name
        return None

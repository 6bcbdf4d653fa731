"""Service for the academic hierarchy (levels, tracks, subjects)."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import DuplicateError, InUseError, NotFoundError
from src.modules.academics.models import Level, Subject, Track
from src.modules.academics.schemas import LevelCreate, SubjectCreate, TrackCreate
from src.modules.classes.models import Class

logger = logging.getLogger(__name__)


class AcademicsService:
    """Create, list and delete hierarchy nodes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # --- Levels ---

    async def list_levels(self) -> list[Level]:
        """All levels by name, with tracks and subjects loaded."""
        stmt = (
            select(Level)
            .options(selectinload(Level.tracks).selectinload(Track.subjects))
            .order_by(Level.name)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_level(self, level_id: int) -> Level:
        level = await self.session.get(Level, level_id)
        if not level:
            raise NotFoundError("Level", level_id)
        return level

    async def create_level(self, data: LevelCreate) -> Level:
        existing = await self.session.execute(select(Level.id).where(Level.name == data.name))
        if existing.scalar_one_or_none() is not None:
            raise DuplicateError("Level", "name", data.name)

        level = Level(name=data.name)
        self.session.add(level)
        await self.session.flush()
        logger.info("Created level %s (%s)", level.id, level.name)
        return level

    async def delete_level(self, level_id: int) -> None:
        """Delete a level unless a class sits under any of its subjects."""
        level = await self.get_level(level_id)
        count = await self._count_classes(
            Class.subject.has(Subject.track.has(Track.level_id == level_id))
        )
        if count:
            raise InUseError("Level", count)
        await self.session.delete(level)
        await self.session.flush()
        logger.info("Deleted level %s", level_id)

    # --- Tracks ---

    async def get_track(self, track_id: int) -> Track:
        track = await self.session.get(Track, track_id)
        if not track:
            raise NotFoundError("Track", track_id)
        return track

    async def create_track(self, data: TrackCreate) -> Track:
        await self.get_level(data.level_id)
        existing = await self.session.execute(
            select(Track.id).where(Track.level_id == data.level_id, Track.name == data.name)
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateError("Track", "name", data.name)

        track = Track(level_id=data.level_id, name=data.name)
        self.session.add(track)
        await self.session.flush()
        logger.info("Created track %s (%s) under level %s", track.id, track.name, data.level_id)
        return track

    async def delete_track(self, track_id: int) -> None:
        """Delete a track unless a class uses one of its subjects."""
        track = await self.get_track(track_id)
        count = await self._count_classes(Class.subject.has(Subject.track_id == track_id))
        if count:
            raise InUseError("Track", count)
        await self.session.delete(track)
        await self.session.flush()
        logger.info("Deleted track %s", track_id)

    # --- Subjects ---

    async def get_subject(self, subject_id: int, with_hierarchy: bool = False) -> Subject:
        stmt = select(Subject).where(Subject.id == subject_id)
        if with_hierarchy:
            stmt = stmt.options(selectinload(Subject.track).selectinload(Track.level))
        result = await self.session.execute(stmt)
        subject = result.scalar_one_or_none()
        if not subject:
            raise NotFoundError("Subject", subject_id)
        return subject

    async def create_subject(self, data: SubjectCreate) -> Subject:
        await self.get_track(data.track_id)
        existing = await self.session.execute(
            select(Subject.id).where(Subject.track_id == data.track_id, Subject.name == data.name)
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateError("Subject", "name", data.name)

        subject = Subject(track_id=data.track_id, name=data.name)
        self.session.add(subject)
        await self.session.flush()
        logger.info("Created subject %s (%s) under track %s", subject.id, subject.name, data.track_id)
        return subject

    async def delete_subject(self, subject_id: int) -> None:
        """Delete a subject unless a class references it."""
        subject = await self.get_subject(subject_id)
        count = await self._count_classes(Class.subject_id == subject_id)
        if count:
            raise InUseError("Subject", count)
        await self.session.delete(subject)
        await self.session.flush()
        logger.info("Deleted subject %s", subject_id)

    async def _count_classes(self, condition) -> int:
        result = await self.session.execute(select(func.count(Class.id)).where(condition))
        return int(result.scalar() or 0)

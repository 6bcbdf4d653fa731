"""Expansion of weekly class times into dated sessions.

Class times are stored as recurring weekly slots (day of week + minute of
day, UTC). Reporting needs concrete sessions, so slots are materialised over
a short rolling horizon. Calendar exceptions (holidays, cancellations) are
not applied here.
"""

from datetime import date, datetime, timedelta, timezone

from src.shared.schemas.base import ReadModel
from src.shared.utils.dates import as_utc, day_of_week

DEFAULT_HORIZON_DAYS = 7


class RecurringTimeSlot(ReadModel):
    """Weekly meeting window of a class (0 = Sunday, minutes since midnight UTC)."""

    id: int
    class_id: int
    class_name: str
    teacher_name: str | None = None
    day_of_week: int
    start_minutes: int
    end_minutes: int


class SessionInstance(ReadModel):
    """One dated occurrence of a recurring slot."""

    id: str
    slot_id: int
    class_id: int
    class_name: str
    teacher_name: str | None = None
    start: datetime
    end: datetime
    day_of_week: int


def session_id(slot_id: int, day: date) -> str:
    """Stable id of the session of `slot_id` on `day`."""
    return f"{slot_id}-{day.isoformat()}"


def _at_minutes(day: date, minutes: int) -> datetime:
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return midnight + timedelta(minutes=minutes)


def expand(
    slots: list[RecurringTimeSlot],
    reference: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> list[SessionInstance]:
    """
    Materialise sessions for the `horizon_days` UTC dates starting at the
    date of `reference`, sorted by start (ties by slot id).

    A slot whose end is not after its start still yields a session with
    end <= start; bad rows are surfaced, never raised.
    """
    if horizon_days <= 0:
        return []

    first_day = as_utc(reference).date()
    first_weekday = day_of_week(first_day)

    sessions: list[SessionInstance] = []
    for slot in slots:
        if not 0 <= slot.day_of_week <= 6:
            # No calendar date falls on it.
            continue
        # Only every 7th offset can match the slot's weekday.
        first_offset = (slot.day_of_week - first_weekday) % 7
        for offset in range(first_offset, horizon_days, 7):
            day = first_day + timedelta(days=offset)
            sessions.append(
                SessionInstance(
                    id=session_id(slot.id, day),
                    slot_id=slot.id,
                    class_id=slot.class_id,
                    class_name=slot.class_name,
                    teacher_name=slot.teacher_name,
                    start=_at_minutes(day, slot.start_minutes),
                    end=_at_minutes(day, slot.end_minutes),
                    day_of_week=slot.day_of_week,
                )
            )

    sessions.sort(key=lambda s: (s.start, s.slot_id))
    return sessions

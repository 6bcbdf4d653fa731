from datetime import datetime, timedelta, timezone

import pytest

from src.modules.classes.schedule import RecurringTimeSlot, expand, session_id
from src.shared.utils.dates import day_of_week

# Wednesday
REFERENCE = datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc)


def _slot(slot_id: int, day: int, start: int = 600, end: int = 660, class_id: int = 1):
    return RecurringTimeSlot(
        id=slot_id,
        class_id=class_id,
        class_name=f"Class {class_id}",
        teacher_name="Amina Diallo",
        day_of_week=day,
        start_minutes=start,
        end_minutes=end,
    )


class TestExpand:
    """Tests for expanding weekly slots into sessions."""

    def test_one_session_per_slot_in_a_week(self):
        slots = [_slot(1, 1), _slot(2, 3), _slot(3, 6)]
        sessions = expand(slots, REFERENCE, 7)
        assert len(sessions) == 3

    def test_session_fields(self):
        sessions = expand([_slot(10, 1, start=540, end=630)], REFERENCE, 7)

        assert len(sessions) == 1
        session = sessions[0]
        # Next Monday after Wednesday 2025-03-05
        assert session.id == "10-2025-03-10"
        assert session.slot_id == 10
        assert session.class_id == 1
        assert session.teacher_name == "Amina Diallo"
        assert session.start == datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
        assert session.end == datetime(2025, 3, 10, 10, 30, tzinfo=timezone.utc)
        assert session.day_of_week == 1

    def test_reference_day_is_included(self):
        """A slot on the reference weekday is emitted even if its time has passed."""
        sessions = expand([_slot(1, 3, start=480, end=540)], REFERENCE, 7)
        assert [s.id for s in sessions] == ["1-2025-03-05"]

    @pytest.mark.parametrize("horizon", [1, 7, 10, 30])
    def test_weekday_always_matches_slot(self, horizon):
        slots = [_slot(i, i) for i in range(7)]
        for session in expand(slots, REFERENCE, horizon):
            assert day_of_week(session.start.date()) == session.day_of_week
            assert session.id.startswith(f"{session.slot_id}-")

    @pytest.mark.parametrize("horizon", [0, -3])
    def test_non_positive_horizon_is_empty(self, horizon):
        assert expand([_slot(1, 3)], REFERENCE, horizon) == []

    def test_horizon_of_two_weeks_repeats(self):
        sessions = expand([_slot(4, 5)], REFERENCE, 14)
        assert [s.id for s in sessions] == ["4-2025-03-07", "4-2025-03-14"]

    def test_sorted_by_start(self):
        slots = [_slot(1, 6, start=900), _slot(2, 4, start=1000), _slot(3, 4, start=480), _slot(4, 0)]
        sessions = expand(slots, REFERENCE, 21)
        starts = [s.start for s in sessions]
        assert starts == sorted(starts)

    def test_ties_broken_by_slot_id(self):
        slots = [_slot(9, 2, class_id=2), _slot(3, 2, class_id=1)]
        sessions = expand(slots, REFERENCE, 7)
        assert [s.slot_id for s in sessions] == [3, 9]

    def test_degenerate_slot_passes_through(self):
        """end <= start is emitted as is, never rejected."""
        sessions = expand([_slot(7, 4, start=700, end=650)], REFERENCE, 7)
        assert len(sessions) == 1
        assert sessions[0].end < sessions[0].start

    def test_unknown_weekday_yields_nothing(self):
        assert expand([_slot(1, 7)], REFERENCE, 30) == []

    def test_ids_stable_across_overlapping_windows(self):
        slot = _slot(5, 5)
        first = expand([slot], REFERENCE, 7)
        later = expand([slot], datetime(2025, 3, 7, 0, 0, tzinfo=timezone.utc), 7)
        assert first[0].id == later[0].id == session_id(5, first[0].start.date())

    def test_reference_in_other_offset_uses_utc_date(self):
        # 2025-03-05 23:30 at UTC-2 is already Thursday 2025-03-06 in UTC
        reference = datetime(2025, 3, 5, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
        sessions = expand([_slot(1, 3)], reference, 1)
        assert sessions == []
        sessions = expand([_slot(1, 4)], reference, 1)
        assert [s.id for s in sessions] == ["1-2025-03-06"]

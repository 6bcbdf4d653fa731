from datetime import date, datetime, timedelta, timezone

from src.shared.utils.dates import as_utc, day_of_week, first_of_month, shift_months


class TestDayOfWeek:
    """Sunday is 0 and Saturday is 6."""

    def test_sunday_and_saturday(self):
        assert day_of_week(date(2025, 3, 2)) == 0  # Sunday
        assert day_of_week(date(2025, 3, 8)) == 6  # Saturday

    def test_monday(self):
        assert day_of_week(date(2025, 3, 3)) == 1


class TestMonths:
    def test_first_of_month(self):
        assert first_of_month(date(2025, 3, 17)) == date(2025, 3, 1)

    def test_shift_months_across_years(self):
        assert shift_months(date(2025, 1, 31), -1) == date(2024, 12, 1)
        assert shift_months(date(2025, 12, 5), 1) == date(2026, 1, 1)
        assert shift_months(date(2025, 3, 15), -14) == date(2024, 1, 1)

    def test_shift_zero_months(self):
        assert shift_months(date(2025, 3, 15), 0) == date(2025, 3, 1)


class TestAsUtc:
    def test_naive_taken_as_utc(self):
        result = as_utc(datetime(2025, 3, 1, 10, 0))
        assert result == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_other_offset_converted(self):
        plus_two = timezone(timedelta(hours=2))
        result = as_utc(datetime(2025, 3, 1, 1, 0, tzinfo=plus_two))
        assert result == datetime(2025, 2, 28, 23, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

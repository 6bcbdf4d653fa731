from datetime import date, datetime, timezone


def as_utc(value: datetime) -> datetime:
    """
    Return an aware UTC datetime.

    Naive values (SQLite drops tzinfo) are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_of_week(value: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return value.isoweekday() % 7


def first_of_month(value: date) -> date:
    return date(value.year, value.month, 1)


def shift_months(value: date, months: int) -> date:
    """First day of the month `months` away from the month of `value`."""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)

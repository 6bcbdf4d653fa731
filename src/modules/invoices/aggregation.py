"""Month-bucketed invoice figures for reporting.

Line items are attributed to their billed month, independent of when the
invoice was issued or paid and of the invoice status.
"""

from collections.abc import Iterable
from datetime import date, datetime

from src.modules.invoices.models import InvoiceStatus
from src.shared.schemas.base import ReadModel
from src.shared.utils.dates import as_utc, first_of_month, shift_months
from src.shared.utils.money import Cents, cents_or_zero, payment_rate


class BilledItem(ReadModel):
    """Invoice line item as seen by reporting."""

    billed_month: date
    line_total_cents: int
    paid_cents: int | None = None


class BilledInvoice(ReadModel):
    """Invoice with its line items as seen by reporting."""

    id: int
    status: str
    items: list[BilledItem] = []

    @property
    def subtotal_cents(self) -> Cents:
        return sum(item.line_total_cents for item in self.items)

    @property
    def paid_cents(self) -> Cents:
        return sum(cents_or_zero(item.paid_cents) for item in self.items)


class MonthBucket(ReadModel):
    month: str  # YYYY-MM
    invoiced_cents: int = 0
    paid_cents: int = 0


class RangeSummary(ReadModel):
    invoiced_cents: int = 0
    paid_cents: int = 0
    remaining_cents: int = 0  # may be negative when overpaid
    payment_rate: float = 0.0  # 0..1, 0 when nothing invoiced


class OverdueSummary(ReadModel):
    invoices: int = 0
    amount_cents: int = 0


def month_key(value: date) -> str:
    """YYYY-MM key of a billed month."""
    return f"{value.year}-{value.month:02d}"


def _to_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return as_utc(value).date()
    return value


def month_range(anchor: date | datetime) -> tuple[date, date]:
    """[first day of the anchor month, first day of the next month)."""
    day = _to_date(anchor)
    return first_of_month(day), shift_months(day, 1)


def aggregate_by_month(
    items: Iterable[BilledItem],
    months_back: int,
    anchor: date | datetime,
) -> list[MonthBucket]:
    """
    Invoiced/paid totals for the `months_back` months ending with the anchor
    month, oldest first. Months without items get zero buckets; items outside
    the window are ignored.
    """
    if months_back <= 0:
        return []

    anchor_day = _to_date(anchor)
    keys = [
        month_key(shift_months(anchor_day, -offset))
        for offset in range(months_back - 1, -1, -1)
    ]
    totals: dict[str, list[int]] = {key: [0, 0] for key in keys}

    for item in items:
        bucket = totals.get(month_key(item.billed_month))
        if bucket is None:
            continue
        bucket[0] += item.line_total_cents
        bucket[1] += cents_or_zero(item.paid_cents)

    return [
        MonthBucket(month=key, invoiced_cents=totals[key][0], paid_cents=totals[key][1])
        for key in keys
    ]


def summarize_range(items: Iterable[BilledItem], start: date, end: date) -> RangeSummary:
    """Totals over items billed in [start, end)."""
    invoiced = 0
    paid = 0
    for item in items:
        if start <= item.billed_month < end:
            invoiced += item.line_total_cents
            paid += cents_or_zero(item.paid_cents)

    return RangeSummary(
        invoiced_cents=invoiced,
        paid_cents=paid,
        remaining_cents=invoiced - paid,
        payment_rate=payment_rate(paid, invoiced),
    )


def overdue_totals(invoices: Iterable[BilledInvoice]) -> OverdueSummary:
    """
    Count and outstanding amount of overdue invoices.

    The outstanding amount per invoice is clamped at zero: a fully paid
    invoice whose status has not moved yet owes nothing.
    """
    count = 0
    amount = 0
    for invoice in invoices:
        if invoice.status != InvoiceStatus.OVERDUE:
            continue
        count += 1
        amount += max(0, invoice.subtotal_cents - invoice.paid_cents)
    return OverdueSummary(invoices=count, amount_cents=amount)

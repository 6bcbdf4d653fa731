from datetime import date, datetime, timezone

from src.modules.invoices.aggregation import (
    BilledInvoice,
    BilledItem,
    aggregate_by_month,
    month_key,
    month_range,
    overdue_totals,
    summarize_range,
)
from src.modules.invoices.models import InvoiceStatus


def _item(month: date, total: int, paid: int | None = None) -> BilledItem:
    return BilledItem(billed_month=month, line_total_cents=total, paid_cents=paid)


class TestMonthHelpers:
    def test_month_key(self):
        assert month_key(date(2025, 3, 1)) == "2025-03"
        assert month_key(date(2024, 12, 31)) == "2024-12"

    def test_month_range(self):
        assert month_range(date(2025, 3, 17)) == (date(2025, 3, 1), date(2025, 4, 1))
        assert month_range(date(2025, 12, 2)) == (date(2025, 12, 1), date(2026, 1, 1))

    def test_month_range_from_datetime(self):
        anchor = datetime(2025, 3, 31, 23, 0, tzinfo=timezone.utc)
        assert month_range(anchor) == (date(2025, 3, 1), date(2025, 4, 1))


class TestAggregateByMonth:
    """Tests for aggregate_by_month."""

    def test_empty_items_zero_filled(self):
        buckets = aggregate_by_month([], 6, date(2025, 3, 15))

        assert [b.month for b in buckets] == [
            "2024-10",
            "2024-11",
            "2024-12",
            "2025-01",
            "2025-02",
            "2025-03",
        ]
        assert all(b.invoiced_cents == 0 and b.paid_cents == 0 for b in buckets)

    def test_non_positive_months_back(self):
        assert aggregate_by_month([_item(date(2025, 3, 1), 100)], 0, date(2025, 3, 1)) == []
        assert aggregate_by_month([], -2, date(2025, 3, 1)) == []

    def test_items_summed_in_their_month(self):
        items = [
            _item(date(2025, 3, 1), 1000, 400),
            _item(date(2025, 3, 1), 500, 500),
            _item(date(2025, 2, 1), 700),
        ]
        buckets = aggregate_by_month(items, 3, date(2025, 3, 20))

        by_month = {b.month: b for b in buckets}
        assert by_month["2025-03"].invoiced_cents == 1500
        assert by_month["2025-03"].paid_cents == 900
        assert by_month["2025-02"].invoiced_cents == 700
        assert by_month["2025-02"].paid_cents == 0
        assert by_month["2025-01"].invoiced_cents == 0

    def test_items_outside_window_ignored(self):
        items = [
            _item(date(2024, 9, 1), 9999, 9999),
            _item(date(2025, 4, 1), 8888),
            _item(date(2025, 1, 1), 100, 50),
        ]
        buckets = aggregate_by_month(items, 6, date(2025, 3, 1))

        assert sum(b.invoiced_cents for b in buckets) == 100
        assert sum(b.paid_cents for b in buckets) == 50

    def test_window_crosses_year(self):
        buckets = aggregate_by_month([], 3, datetime(2025, 1, 10, tzinfo=timezone.utc))
        assert [b.month for b in buckets] == ["2024-11", "2024-12", "2025-01"]


class TestSummarizeRange:
    """Tests for summarize_range."""

    def test_march_example(self):
        items = [_item(date(2025, 3, 1), 1000, 400), _item(date(2025, 3, 1), 500, 500)]
        summary = summarize_range(items, date(2025, 3, 1), date(2025, 4, 1))

        assert summary.invoiced_cents == 1500
        assert summary.paid_cents == 900
        assert summary.remaining_cents == 600
        assert summary.payment_rate == 0.6

    def test_nothing_invoiced_rate_is_zero(self):
        summary = summarize_range([], date(2025, 3, 1), date(2025, 4, 1))
        assert summary.invoiced_cents == 0
        assert summary.payment_rate == 0.0

    def test_end_is_exclusive(self):
        items = [_item(date(2025, 3, 1), 1000), _item(date(2025, 4, 1), 2000)]
        summary = summarize_range(items, date(2025, 3, 1), date(2025, 4, 1))
        assert summary.invoiced_cents == 1000

    def test_overpaid_remaining_is_negative(self):
        items = [_item(date(2025, 3, 1), 1000, 1200)]
        summary = summarize_range(items, date(2025, 3, 1), date(2025, 4, 1))
        assert summary.remaining_cents == -200
        assert summary.payment_rate == 1.2


class TestOverdueTotals:
    """Tests for overdue_totals."""

    def test_only_overdue_invoices_counted(self):
        invoices = [
            BilledInvoice(
                id=1,
                status=InvoiceStatus.OVERDUE,
                items=[_item(date(2025, 2, 1), 3000, 1000)],
            ),
            BilledInvoice(
                id=2,
                status=InvoiceStatus.PENDING,
                items=[_item(date(2025, 2, 1), 5000)],
            ),
            BilledInvoice(
                id=3,
                status=InvoiceStatus.OVERDUE,
                items=[_item(date(2025, 1, 1), 1000), _item(date(2025, 1, 1), 500, 200)],
            ),
        ]
        summary = overdue_totals(invoices)

        assert summary.invoices == 2
        assert summary.amount_cents == 2000 + 1300

    def test_overpaid_overdue_invoice_clamped(self):
        invoices = [
            BilledInvoice(
                id=1,
                status=InvoiceStatus.OVERDUE,
                items=[_item(date(2025, 2, 1), 1000, 1500)],
            ),
        ]
        summary = overdue_totals(invoices)
        assert summary.invoices == 1
        assert summary.amount_cents == 0

    def test_no_invoices(self):
        summary = overdue_totals([])
        assert summary.invoices == 0
        assert summary.amount_cents == 0

from datetime import date, datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scripts.seed_demo_data import run_seed
from src.modules.dashboard.service import DashboardService
from src.modules.invoices.models import Invoice

TODAY = date(2025, 3, 5)
NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


class TestSeedDemoData:
    """The demo seed produces a coherent dashboard."""

    async def test_seed_feeds_overview(self, db_session: AsyncSession):
        await run_seed(db_session, dry_run=False, today=TODAY)

        report = await DashboardService(db_session).get_overview(NOW)

        assert report.counts.total_students == 8
        assert report.counts.total_teachers == 3
        assert report.counts.total_classes == 4
        assert report.counts.total_subjects == 5
        assert report.academics.students_by_level == {"Primary": 4, "Secondary": 4}
        assert report.academics.top_classes[0].name == "Primary General Maths"
        assert report.academics.top_classes[0].estimated_revenue_cents == 100000
        assert report.payments.overdue.invoices == 2
        assert [b.month for b in report.payments.monthly_revenue][-3:] == [
            "2025-01",
            "2025-02",
            "2025-03",
        ]
        assert len(report.schedule.upcoming_sessions) == 6
        assert report.schedule.upcoming_sessions[0].start == datetime(
            2025, 3, 5, 16, 0, tzinfo=timezone.utc
        )

    async def test_second_run_is_skipped(self, db_session: AsyncSession):
        await run_seed(db_session, dry_run=False, today=TODAY)
        first = (await db_session.execute(select(func.count(Invoice.id)))).scalar()

        await run_seed(db_session, dry_run=False, today=TODAY)

        assert (await db_session.execute(select(func.count(Invoice.id)))).scalar() == first

    async def test_dry_run_writes_nothing(self, db_session: AsyncSession):
        await run_seed(db_session, dry_run=True, today=TODAY)

        assert (await db_session.execute(select(func.count(Invoice.id)))).scalar() == 0

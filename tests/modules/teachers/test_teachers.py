from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.academics.schemas import LevelCreate, SubjectCreate, TrackCreate
from src.modules.academics.service import AcademicsService
from src.modules.classes.models import Class, ClassTime, StudentPriceOverride
from src.modules.classes.pricing import PricingMode
from src.modules.teachers.service import TeacherService


class TestTeacherList:
    """Tests for listing and searching teachers."""

    async def test_list_ordered_by_name(self, client: AsyncClient, make_teacher):
        await make_teacher(first_name="Zaid", last_name="Bakri")
        await make_teacher(first_name="Amina", last_name="Aziz")

        response = await client.get("/api/v1/teachers")

        assert response.status_code == 200
        assert [t["last_name"] for t in response.json()["data"]] == ["Aziz", "Bakri"]

    async def test_search(self, db_session: AsyncSession, make_teacher):
        await make_teacher(
            first_name="Zaid", last_name="Bakri", email="zaid@school.test", speciality="Chemistry"
        )
        await make_teacher(
            first_name="Amina", last_name="Aziz", email="amina@school.test", phone="+212600000000"
        )
        service = TeacherService(db_session)

        assert [t.user.last_name for t in await service.list_teachers("chem")] == ["Bakri"]
        assert [t.user.last_name for t in await service.list_teachers("2126")] == ["Aziz"]
        assert [t.user.last_name for t in await service.list_teachers("AMINA")] == ["Aziz"]
        assert await service.list_teachers("nobody") == []

    async def test_get_missing_teacher(self, client: AsyncClient):
        response = await client.get("/api/v1/teachers/999")
        assert response.status_code == 404


class TestTeacherClasses:
    """Tests for GET /teachers/{id}/classes."""

    async def test_revenue_and_grouping(
        self, client: AsyncClient, db_session: AsyncSession, make_teacher, make_student
    ):
        teacher = await make_teacher()
        academics = AcademicsService(db_session)
        level = await academics.create_level(LevelCreate(name="Secondary"))
        track = await academics.create_track(TrackCreate(level_id=level.id, name="Scientific"))
        subject = await academics.create_subject(SubjectCreate(track_id=track.id, name="Physics"))

        students = [await make_student() for _ in range(3)]
        per_student = Class(
            name="Physics A",
            teacher_id=teacher.id,
            subject_id=subject.id,
            pricing_mode=PricingMode.PER_STUDENT.value,
            monthly_price_cents=5000,
            students=students,
            class_times=[ClassTime(day_of_week=2, start_minutes=600, end_minutes=660)],
        )
        fixed = Class(
            name="Coaching",
            teacher_id=teacher.id,
            pricing_mode=PricingMode.FIXED_TOTAL.value,
            fixed_monthly_price_cents=20000,
            students=students[:2],
        )
        db_session.add_all([per_student, fixed])
        await db_session.flush()
        db_session.add(
            StudentPriceOverride(
                student_id=students[0].id, class_id=per_student.id, price_override_cents=4000
            )
        )
        await db_session.flush()

        response = await client.get(f"/api/v1/teachers/{teacher.id}/classes")

        assert response.status_code == 200
        data = response.json()["data"]
        by_name = {c["name"]: c for c in data["classes"]}
        assert [c["name"] for c in data["classes"]] == ["Coaching", "Physics A"]

        physics = by_name["Physics A"]
        assert physics["level"] == "Secondary"
        assert physics["student_count"] == 3
        assert physics["total_monthly_revenue_cents"] == 15000
        assert physics["effective_price_per_student_cents"] == 5000
        assert physics["overrides_count"] == 1
        assert len(physics["class_times"]) == 1

        coaching = by_name["Coaching"]
        assert coaching["level"] == "Uncategorized"
        assert coaching["total_monthly_revenue_cents"] == 20000
        # The whole fixed total is shown per student
        assert coaching["effective_price_per_student_cents"] == 20000

        assert set(data["by_level"]) == {"Secondary", "Uncategorized"}
        assert [c["name"] for c in data["by_level"]["Secondary"]] == ["Physics A"]

    async def test_teacher_without_classes(self, client: AsyncClient, make_teacher):
        teacher = await make_teacher()
        response = await client.get(f"/api/v1/teachers/{teacher.id}/classes")

        assert response.status_code == 200
        assert response.json()["data"] == {"classes": [], "by_level": {}}


class TestTeacherUpdate:
    """Tests for PATCH /teachers/{id}."""

    async def test_updates_only_sent_fields(self, client: AsyncClient, make_teacher):
        teacher = await make_teacher(
            first_name="Amina",
            last_name="Diallo",
            email="amina@tutoring.ma",
            phone="+212600000001",
            speciality="Mathematics",
        )

        response = await client.patch(
            f"/api/v1/teachers/{teacher.id}",
            json={
                "last_name": "Diallo-Sow",
                "email": "amina.sow@tutoring.ma",
                "address": "12 Rue des Écoles",
                "hiring_date": "2024-09-01",
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["first_name"] == "Amina"
        assert data["last_name"] == "Diallo-Sow"
        assert data["email"] == "amina.sow@tutoring.ma"
        assert data["phone"] == "+212600000001"
        assert data["speciality"] == "Mathematics"
        assert data["address"] == "12 Rue des Écoles"
        assert data["hiring_date"] == "2024-09-01"
        assert data["birth_date"] is None

        response = await client.get(f"/api/v1/teachers/{teacher.id}")
        assert response.json()["data"]["email"] == "amina.sow@tutoring.ma"

    async def test_explicit_null_clears_profile_field(self, client: AsyncClient, make_teacher):
        teacher = await make_teacher(speciality="Physics", email="karim@tutoring.ma")

        response = await client.patch(
            f"/api/v1/teachers/{teacher.id}", json={"speciality": None, "email": None}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["speciality"] is None
        assert data["email"] == "karim@tutoring.ma"

    async def test_duplicate_email(self, client: AsyncClient, make_teacher):
        await make_teacher(email="taken@tutoring.ma")
        teacher = await make_teacher(email="free@tutoring.ma")

        response = await client.patch(
            f"/api/v1/teachers/{teacher.id}", json={"email": "taken@tutoring.ma"}
        )

        assert response.status_code == 409
        assert response.json()["success"] is False

    async def test_same_email_is_not_a_duplicate(self, client: AsyncClient, make_teacher):
        teacher = await make_teacher(email="same@tutoring.ma")

        response = await client.patch(
            f"/api/v1/teachers/{teacher.id}",
            json={"email": "same@tutoring.ma", "phone": "+212600000009"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["phone"] == "+212600000009"

    async def test_invalid_email(self, client: AsyncClient, make_teacher):
        teacher = await make_teacher()

        response = await client.patch(f"/api/v1/teachers/{teacher.id}", json={"email": "nope"})

        assert response.status_code == 422

    async def test_missing_teacher(self, client: AsyncClient):
        response = await client.patch("/api/v1/teachers/999", json={"phone": "+212600000000"})
        assert response.status_code == 404

"""
Alert Repository Tests
Deduplicated inserts, dashboard listing and read tracking.
"""
import pytest
import datetime as dt

from src.models.alert import Alert, AlertFilters, AlertType
from src.repositories.alerts import AlertRepository


@pytest.fixture
def alert_repo(mongo_db) -> AlertRepository:
    return AlertRepository(mongo_db)


def make_alert(call_id: str = "call-1", alert_type: AlertType = AlertType.LOW_SCORE, **overrides) -> Alert:
    data = {
        "company_id": "company-1",
        "call_id": call_id,
        "agent_id": "agent-1",
        "type": alert_type,
        "message": "Chamada com pontuação baixa: 3.0/10. Necessita revisão.",
    }
    data.update(overrides)
    return Alert(**data)


async def seed_alerts(mongo_db, count: int, company_id: str = "company-1", **fields):
    """Insert raw alert documents with strictly increasing created_at."""
    base = dt.datetime(2024, 5, 1, 12, 0, 0)
    docs = [
        {
            "company_id": company_id,
            "call_id": f"seed-{i}",
            "agent_id": fields.get("agent_id", "agent-1"),
            "type": fields.get("type", "low_score"),
            "message": f"alert {i}",
            "is_read": fields.get("is_read", False),
            "created_at": base + dt.timedelta(minutes=i),
            "updated_at": base + dt.timedelta(minutes=i),
        }
        for i in range(count)
    ]
    await mongo_db.alerts.insert_many(docs)


class TestInsertIfAbsent:
    """Storage-level deduplication on (call_id, type)."""

    async def test_first_insert_returns_alert(self, alert_repo: AlertRepository):
        """Should persist and return the alert with an id and timestamps."""
        created = await alert_repo.insert_if_absent(make_alert())

        assert created is not None
        assert created.id is not None
        assert created.type == AlertType.LOW_SCORE
        assert created.is_read is False
        assert created.created_at is not None

    async def test_duplicate_returns_none(self, alert_repo: AlertRepository, mongo_db):
        """Second insert for the same call and type is a no-op."""
        await alert_repo.insert_if_absent(make_alert())

        duplicate = await alert_repo.insert_if_absent(make_alert(message="different text"))

        assert duplicate is None
        assert await mongo_db.alerts.count_documents({}) == 1

    async def test_same_call_different_type_allowed(self, alert_repo: AlertRepository):
        await alert_repo.insert_if_absent(make_alert())

        other = await alert_repo.insert_if_absent(make_alert(alert_type=AlertType.RISK_WORDS))

        assert other is not None

    async def test_same_type_different_call_allowed(self, alert_repo: AlertRepository):
        await alert_repo.insert_if_absent(make_alert())

        other = await alert_repo.insert_if_absent(make_alert(call_id="call-2"))

        assert other is not None

    async def test_input_model_not_mutated(self, alert_repo: AlertRepository):
        alert = make_alert()

        await alert_repo.insert_if_absent(alert)

        assert alert.id is None


class TestExists:

    async def test_exists(self, alert_repo: AlertRepository):
        await alert_repo.insert_if_absent(make_alert())

        assert await alert_repo.exists("call-1", AlertType.LOW_SCORE) is True
        assert await alert_repo.exists("call-1", AlertType.NO_NEXT_STEP) is False
        assert await alert_repo.exists("call-2", AlertType.LOW_SCORE) is False


class TestListForCompany:
    """Dashboard listing with filters and pagination."""

    async def test_newest_first(self, alert_repo: AlertRepository, mongo_db):
        await seed_alerts(mongo_db, 3)

        page = await alert_repo.list_for_company("company-1")

        assert [a.call_id for a in page.data] == ["seed-2", "seed-1", "seed-0"]
        assert page.total == 3

    async def test_pagination(self, alert_repo: AlertRepository, mongo_db):
        await seed_alerts(mongo_db, 25)

        page = await alert_repo.list_for_company("company-1", AlertFilters(page=2, limit=10))

        assert len(page.data) == 10
        assert page.total == 25
        assert page.total_pages == 3
        assert page.data[0].call_id == "seed-14"

    async def test_last_page_is_partial(self, alert_repo: AlertRepository, mongo_db):
        await seed_alerts(mongo_db, 25)

        page = await alert_repo.list_for_company("company-1", AlertFilters(page=3, limit=10))

        assert len(page.data) == 5

    async def test_unread_only(self, alert_repo: AlertRepository, mongo_db):
        await seed_alerts(mongo_db, 2)
        await mongo_db.alerts.insert_one({
            "company_id": "company-1", "call_id": "read-1", "type": "risk_words",
            "message": "read", "is_read": True,
            "created_at": dt.datetime(2024, 5, 2), "updated_at": dt.datetime(2024, 5, 2),
        })

        page = await alert_repo.list_for_company("company-1", AlertFilters(unread_only=True))

        assert page.total == 2
        assert all(a.is_read is False for a in page.data)

    async def test_filters_by_agent_and_type(self, alert_repo: AlertRepository):
        await alert_repo.insert_if_absent(make_alert(call_id="c1", agent_id="agent-1"))
        await alert_repo.insert_if_absent(make_alert(call_id="c2", agent_id="agent-2"))
        await alert_repo.insert_if_absent(
            make_alert(call_id="c3", agent_id="agent-2", alert_type=AlertType.RISK_WORDS)
        )

        page = await alert_repo.list_for_company(
            "company-1", AlertFilters(agent_id="agent-2", type=AlertType.RISK_WORDS)
        )

        assert [a.call_id for a in page.data] == ["c3"]

    async def test_other_companies_excluded(self, alert_repo: AlertRepository, mongo_db):
        await seed_alerts(mongo_db, 2, company_id="company-2")

        page = await alert_repo.list_for_company("company-1")

        assert page.total == 0
        assert page.data == []
        assert page.total_pages == 0


class TestReadTracking:
    """mark_read and count_unread."""

    async def test_mark_read(self, alert_repo: AlertRepository):
        created = await alert_repo.insert_if_absent(make_alert())

        assert await alert_repo.mark_read(created.id) is True

        stored = await alert_repo.find_by_id(created.id)
        assert stored.is_read is True

    async def test_mark_read_twice_still_true(self, alert_repo: AlertRepository):
        created = await alert_repo.insert_if_absent(make_alert())
        await alert_repo.mark_read(created.id)

        assert await alert_repo.mark_read(created.id) is True

    async def test_mark_read_invalid_id(self, alert_repo: AlertRepository):
        assert await alert_repo.mark_read("not-an-object-id") is False

    async def test_mark_read_unknown_id(self, alert_repo: AlertRepository):
        assert await alert_repo.mark_read("507f1f77bcf86cd799439011") is False

    async def test_mark_read_wrong_company(self, alert_repo: AlertRepository):
        created = await alert_repo.insert_if_absent(make_alert())

        assert await alert_repo.mark_read(created.id, company_id="company-2") is False

    async def test_count_unread(self, alert_repo: AlertRepository):
        first = await alert_repo.insert_if_absent(make_alert(call_id="c1"))
        await alert_repo.insert_if_absent(make_alert(call_id="c2", agent_id="agent-2"))
        await alert_repo.insert_if_absent(make_alert(call_id="c3"))
        await alert_repo.mark_read(first.id)

        assert await alert_repo.count_unread("company-1") == 2
        assert await alert_repo.count_unread("company-1", agent_id="agent-2") == 1
        assert await alert_repo.count_unread("company-2") == 0

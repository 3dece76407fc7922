"""
Тесты хранилища: нормализация данных, upsert снимка, идемпотентное открытие достижений
"""
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from quithero.core.exceptions import DataUnavailable, NotFoundError
from quithero.core.schemas.progress import ProgressCalculation, normalize_choice_list
from quithero.models import Craving, ProgressStats, User, UserAchievement, UserProfile, UserSession
from quithero.models.enums import CravingType, SessionStatus
from quithero.repositories.craving_repository import CravingRepository
from quithero.repositories.profile_repository import ProfileRepository
from quithero.repositories.record_store import SQLAlchemyRecordStore
from quithero.repositories.session_repository import SessionRepository

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


async def create_user(session, email="store@example.com", **profile_fields) -> User:
    user = User(email=email, password_hash="x", role="user")
    session.add(user)
    await session.flush()
    session.add(UserProfile(user_id=user.id, **profile_fields))
    await session.commit()
    return user


class TestNormalizeChoiceList:
    @pytest.mark.parametrize("raw", [
        ["stress", "habit"],
        "stress, habit",
        '["stress", "habit"]',
        {"values": ["stress", "habit"]},
        {"options": {"values": ["stress", "habit"]}},
        '{"options": {"values": ["Stress", "HABIT"]}}',
        ["stress", "habit", "stress"],
        [{"value": "stress"}, {"value": "habit"}],
    ])
    def test_wire_shapes(self, raw):
        assert normalize_choice_list(raw) == ["stress", "habit"]

    @pytest.mark.parametrize("raw", [None, "", [], {}, {"options": None}])
    def test_empty_shapes(self, raw):
        assert normalize_choice_list(raw) == []


class TestSQLAlchemyRecordStore:
    async def test_get_profile_normalizes_stored_shapes(self, session):
        user = await create_user(
            session,
            quit_date=date(2026, 3, 1),
            daily_consumption=None,
            smoking_triggers={"values": ["Boredom"]},
            emotional_states="lonely,sad",
        )
        profile = await SQLAlchemyRecordStore(session).get_profile(user.id)

        assert profile.quit_date == date(2026, 3, 1)
        assert profile.daily_consumption == 0.0
        assert profile.smoking_triggers == ["boredom"]
        assert profile.emotional_states == ["lonely", "sad"]

    async def test_get_profile_missing(self, session):
        assert await SQLAlchemyRecordStore(session).get_profile(999) is None

    async def test_count_events_by_type(self, session):
        user = await create_user(session)
        repo = CravingRepository(session)
        for _ in range(3):
            await repo.create(user.id, CravingType.CRAVING.value)
        await repo.create(user.id, CravingType.SLIP.value)

        store = SQLAlchemyRecordStore(session)
        assert await store.count_events(user.id, CravingType.CRAVING) == 3
        assert await store.count_events(user.id, CravingType.SLIP) == 1
        assert await store.count_events(user.id + 1, CravingType.SLIP) == 0

    async def test_upsert_stats_keeps_single_row(self, session):
        user = await create_user(session)
        store = SQLAlchemyRecordStore(session)

        await store.upsert_stats(user.id, ProgressCalculation(days_smoke_free=1, cigarettes_not_smoked=10))
        saved = await store.upsert_stats(user.id, ProgressCalculation(days_smoke_free=2, cigarettes_not_smoked=20))

        rows = await session.execute(select(func.count()).select_from(ProgressStats))
        assert rows.scalar() == 1
        assert saved.days_smoke_free == 2
        assert saved.cigarettes_not_smoked == 20
        assert saved.last_calculated is not None
        assert (await store.get_stats(user.id)).as_calculation() == ProgressCalculation(
            days_smoke_free=2, cigarettes_not_smoked=20
        )

    async def test_catalog_sorted_by_threshold(self, seeded_session):
        catalog = await SQLAlchemyRecordStore(seeded_session).list_achievement_catalog()
        values = [a.requirement_value for a in catalog]
        assert values == sorted(values)
        assert {a.key for a in catalog} >= {"first_day", "week_warrior", "month_master"}

    async def test_unlock_is_idempotent(self, seeded_session):
        user = await create_user(seeded_session)
        store = SQLAlchemyRecordStore(seeded_session)

        first = await store.unlock_achievement(user.id, "first_day", NOW)
        second = await store.unlock_achievement(user.id, "first_day", NOW)

        assert first is not None
        assert first.achievement.key == "first_day"
        assert second is None
        assert await store.list_unlocked_keys(user.id) == {"first_day"}
        rows = await seeded_session.execute(select(func.count()).select_from(UserAchievement))
        assert rows.scalar() == 1

    async def test_unlock_unknown_key(self, seeded_session):
        user = await create_user(seeded_session)
        with pytest.raises(NotFoundError):
            await SQLAlchemyRecordStore(seeded_session).unlock_achievement(user.id, "no_such_key", NOW)

    async def test_database_error_becomes_data_unavailable(self, session, monkeypatch):
        store = SQLAlchemyRecordStore(session)

        async def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        monkeypatch.setattr(store.cravings, "count_by_type", broken)
        with pytest.raises(DataUnavailable) as exc_info:
            await store.count_events(1, CravingType.SLIP)
        assert exc_info.value.source == "count_events"
        assert exc_info.value.status_code == 503


class TestCravingRepository:
    async def test_trigger_breakdown(self, session):
        user = await create_user(session)
        repo = CravingRepository(session)
        for trigger in ["stress", "stress", "habit", "other"]:
            await repo.create(user.id, CravingType.CRAVING.value, trigger=trigger)
        session.add(Craving(user_id=user.id, type=CravingType.SLIP.value, trigger=None))
        await session.commit()

        breakdown = await repo.trigger_breakdown(user.id)
        assert breakdown == [("other", 2), ("stress", 2), ("habit", 1)]


class TestProfileRepository:
    async def test_upsert_creates_then_updates(self, session):
        user = User(email="profile@example.com", password_hash="x", role="user")
        session.add(user)
        await session.commit()
        repo = ProfileRepository(session)

        created = await repo.upsert(user.id, {"daily_consumption": 12.0})
        updated = await repo.upsert(user.id, {"daily_consumption": 5.0, "age": 30})

        assert created.id == updated.id
        assert updated.daily_consumption == 5.0
        assert updated.age == 30

    async def test_concurrent_insert_updates_existing_row(self, session, session_factory, monkeypatch):
        user = User(email="race@example.com", password_hash="x", role="user")
        session.add(user)
        await session.commit()
        user_id = user.id

        # Другой запрос успел создать анкету между проверкой и вставкой
        async with session_factory() as other:
            other.add(UserProfile(user_id=user_id, daily_consumption=20.0, age=40))
            await other.commit()

        original = ProfileRepository.get_by_user_id
        calls = []

        async def stale_first_read(self, user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return await original(self, user_id)

        monkeypatch.setattr(ProfileRepository, "get_by_user_id", stale_first_read)
        profile = await ProfileRepository(session).upsert(user_id, {"daily_consumption": 7.5})

        assert profile.daily_consumption == 7.5
        assert profile.age == 40
        assert len(calls) == 2
        rows = await session.scalar(select(func.count()).select_from(UserProfile).where(UserProfile.user_id == user_id))
        assert rows == 1


class TestSessionRepository:
    async def test_start_then_complete(self, session):
        user = await create_user(session)
        repo = SessionRepository(session)

        started = await repo.start(user.id, 1)
        assert started.status == SessionStatus.IN_PROGRESS.value
        assert started.started_at is not None

        completed = await repo.complete(user.id, 1, time_spent_minutes=15)
        assert completed.id == started.id
        assert completed.status == SessionStatus.COMPLETED.value
        assert completed.completed_at is not None
        assert completed.time_spent_minutes == 15

    async def test_start_does_not_reopen_completed_day(self, session):
        user = await create_user(session)
        repo = SessionRepository(session)
        await repo.complete(user.id, 2)

        again = await repo.start(user.id, 2)
        assert again.status == SessionStatus.COMPLETED.value

    async def test_repeat_completion_keeps_first_date(self, session):
        user = await create_user(session)
        repo = SessionRepository(session)
        first = await repo.complete(user.id, 1, time_spent_minutes=10)
        first_completed_at = first.completed_at

        second = await repo.complete(user.id, 1, time_spent_minutes=25)
        assert second.completed_at == first_completed_at
        assert second.time_spent_minutes == 25
        rows = await session.scalar(select(func.count()).select_from(UserSession).where(UserSession.user_id == user.id))
        assert rows == 1

    async def test_count_completed_and_list_order(self, session):
        user = await create_user(session)
        other = await create_user(session, email="other@example.com")
        repo = SessionRepository(session)
        await repo.complete(user.id, 3)
        await repo.complete(user.id, 1)
        await repo.start(user.id, 2)
        await repo.complete(other.id, 1)

        assert await repo.count_completed(user.id) == 2
        assert [s.day_number for s in await repo.list_by_user(user.id)] == [1, 2, 3]
        assert await SQLAlchemyRecordStore(session).count_completed_sessions(user.id) == 2

    async def test_count_failure_becomes_data_unavailable(self, session, monkeypatch):
        store = SQLAlchemyRecordStore(session)

        async def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        monkeypatch.setattr(store.sessions, "count_completed", broken)
        with pytest.raises(DataUnavailable) as exc_info:
            await store.count_completed_sessions(1)
        assert exc_info.value.source == "count_completed_sessions"

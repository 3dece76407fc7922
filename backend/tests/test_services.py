"""
Тесты сервисов прогресса и достижений на хранилище в памяти.

InMemoryRecordStore позволяет «ломать» отдельные операции и проверять,
что сбой хранилища не пробрасывается наружу.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Set

import pytest

from quithero.core.exceptions import DataUnavailable
from quithero.core.result import Result
from quithero.core.schemas.achievements import AchievementDefinition, UnlockedAchievement
from quithero.core.schemas.progress import ProfileData, ProgressCalculation, ProgressRates, StatsData
from quithero.models.enums import CravingType
from quithero.repositories.record_store import RecordStore
from quithero.services.achievement_service import AchievementService
from quithero.services.progress_service import ProgressService, refresh_progress_and_achievements
from quithero.services.session_service import get_program_summary, summarize_program

TODAY = date(2026, 3, 15)
RATES = ProgressRates(price_per_unit=8, minutes_per_unit=11, nicotine_mg_per_unit=0.8)


class InMemoryRecordStore(RecordStore):
    def __init__(self, profile: Optional[ProfileData] = None, catalog=None, cravings: int = 0, slips: int = 0, sessions_completed: int = 0):
        self.profiles: Dict[int, ProfileData] = {profile.user_id: profile} if profile else {}
        self.events = {CravingType.CRAVING: cravings, CravingType.SLIP: slips}
        self.stats: Dict[int, StatsData] = {}
        self.catalog: List[AchievementDefinition] = list(catalog or [])
        self.unlocked: Dict[int, Dict[str, datetime]] = {}
        self.broken: Set[str] = set()
        self.broken_unlock_keys: Set[str] = set()
        self.upsert_calls = 0
        self.sessions_completed = sessions_completed

    def _check(self, operation: str) -> None:
        if operation in self.broken:
            raise DataUnavailable(f"{operation} failed", source=operation)

    async def get_profile(self, user_id):
        self._check("get_profile")
        return self.profiles.get(user_id)

    async def count_events(self, user_id, type):
        self._check(f"count_{CravingType(type).value}")
        return self.events[CravingType(type)]

    async def get_stats(self, user_id):
        self._check("get_stats")
        return self.stats.get(user_id)

    async def upsert_stats(self, user_id, calculation):
        self._check("upsert_stats")
        self.upsert_calls += 1
        self.stats[user_id] = StatsData(user_id=user_id, last_calculated=datetime.now(timezone.utc), **calculation.model_dump())
        return self.stats[user_id]

    async def list_achievement_catalog(self):
        self._check("list_achievement_catalog")
        return list(self.catalog)

    async def list_unlocked_keys(self, user_id):
        self._check("list_unlocked_keys")
        return set(self.unlocked.get(user_id, {}))

    async def unlock_achievement(self, user_id, achievement_key, timestamp):
        if achievement_key in self.broken_unlock_keys:
            raise DataUnavailable(f"unlock {achievement_key} failed", source="unlock_achievement")
        user_unlocks = self.unlocked.setdefault(user_id, {})
        if achievement_key in user_unlocks:
            return None
        user_unlocks[achievement_key] = timestamp
        definition = next(a for a in self.catalog if a.key == achievement_key)
        return UnlockedAchievement(user_id=user_id, achievement=definition, unlocked_at=timestamp)

    async def count_completed_sessions(self, user_id):
        self._check("count_completed_sessions")
        return self.sessions_completed


def catalog_entry(key, requirement_type, requirement_value):
    return AchievementDefinition(key=key, title=key, requirement_type=requirement_type, requirement_value=requirement_value)


CATALOG = [
    catalog_entry("first_day", "days_streak", 1),
    catalog_entry("week_warrior", "days_streak", 7),
    catalog_entry("craving_crusher", "cravings_resisted", 10),
    catalog_entry("month_master", "days_streak", 30),
]


def profile(days_ago=10, daily_consumption=10.0):
    return ProfileData(user_id=1, quit_date=TODAY - timedelta(days=days_ago), daily_consumption=daily_consumption)


class TestResult:
    async def test_capture_success(self):
        async def ok():
            return 5
        result = await Result.capture(ok())
        assert result.ok
        assert result.unwrap_or(0) == 5

    async def test_capture_failure_keeps_error(self):
        async def failing():
            raise DataUnavailable("down")
        result = await Result.capture(failing(), source="slip_count")
        assert not result.ok
        assert result.unwrap_or(0) == 0
        assert result.error.source == "slip_count"

    async def test_capture_does_not_hide_other_errors(self):
        async def failing():
            raise KeyError("boom")
        with pytest.raises(KeyError):
            await Result.capture(failing())


class TestProgressService:
    async def test_calculate(self):
        store = InMemoryRecordStore(profile(), slips=15)
        outcome = await ProgressService(store, RATES).calculate(1, TODAY)

        assert not outcome.degraded
        assert outcome.calculation.cigarettes_not_smoked == 85
        assert outcome.calculation.money_saved == 680

    async def test_profile_unavailable_degrades_to_zero(self):
        store = InMemoryRecordStore(profile())
        store.broken.add("get_profile")
        outcome = await ProgressService(store, RATES).calculate(1, TODAY)

        assert outcome.degraded
        assert outcome.calculation == ProgressCalculation.zero()
        assert outcome.warnings

    async def test_slip_count_unavailable_assumes_no_slips(self):
        store = InMemoryRecordStore(profile(), slips=15)
        store.broken.add("count_slip")
        outcome = await ProgressService(store, RATES).calculate(1, TODAY)

        assert outcome.degraded
        assert outcome.calculation.cigarettes_not_smoked == 100

    async def test_refresh_persists_single_snapshot(self):
        store = InMemoryRecordStore(profile())
        service = ProgressService(store, RATES)

        await service.refresh(1, TODAY)
        refreshed = await service.refresh(1, TODAY + timedelta(days=1))

        assert refreshed.persisted
        assert store.upsert_calls == 2
        assert len(store.stats) == 1
        assert store.stats[1].days_smoke_free == 11

    async def test_refresh_skips_persist_when_degraded(self):
        store = InMemoryRecordStore(profile())
        store.broken.add("count_slip")
        refreshed = await ProgressService(store, RATES).refresh(1, TODAY)

        assert not refreshed.persisted
        assert store.upsert_calls == 0

    async def test_refresh_skips_persist_without_profile(self):
        store = InMemoryRecordStore()
        refreshed = await ProgressService(store, RATES).refresh(1, TODAY)

        assert not refreshed.has_profile
        assert not refreshed.persisted
        assert store.stats == {}

    async def test_refresh_survives_failed_upsert(self):
        store = InMemoryRecordStore(profile())
        store.broken.add("upsert_stats")
        refreshed = await ProgressService(store, RATES).refresh(1, TODAY)

        assert not refreshed.persisted
        assert refreshed.calculation.days_smoke_free == 10
        assert "Progress stats could not be saved" in refreshed.warnings

    async def test_snapshot_defaults_to_zero(self):
        store = InMemoryRecordStore(profile())
        store.broken.add("get_stats")
        snapshot = await ProgressService(store, RATES).get_snapshot(1)
        assert snapshot.days_smoke_free == 0
        assert snapshot.last_calculated is None


class TestAchievementService:
    async def test_unlocks_and_is_idempotent(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG)
        service = AchievementService(store)
        stats = ProgressCalculation(days_smoke_free=10)

        first = await service.check_and_unlock(1, stats=stats)
        second = await service.check_and_unlock(1, stats=stats)

        assert [a.key for a in first.unlocked] == ["first_day", "week_warrior"]
        assert second.unlocked == []
        assert await service.find_newly_qualified(1, stats=stats) == []

    async def test_uses_stored_stats_when_not_given(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG, cravings=12)
        store.stats[1] = StatsData(user_id=1, days_smoke_free=1)

        report = await AchievementService(store).check_and_unlock(1)
        assert [a.key for a in report.unlocked] == ["first_day", "craving_crusher"]

    async def test_catalog_unavailable_returns_empty(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG)
        store.broken.add("list_achievement_catalog")

        report = await AchievementService(store).check_and_unlock(1, stats=ProgressCalculation(days_smoke_free=40))
        assert report.unlocked == []
        assert report.warnings == ["Achievement catalog is unavailable"]

    async def test_craving_count_unavailable_uses_zero(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG, cravings=50)
        store.broken.add("count_craving")

        report = await AchievementService(store).check_and_unlock(1, stats=ProgressCalculation(days_smoke_free=1))
        assert [a.key for a in report.unlocked] == ["first_day"]
        assert report.warnings

    async def test_partial_failure_keeps_successful_unlocks(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG)
        store.broken_unlock_keys.add("first_day")

        report = await AchievementService(store).check_and_unlock(1, stats=ProgressCalculation(days_smoke_free=10))

        assert [a.key for a in report.unlocked] == ["week_warrior"]
        assert [f.key for f in report.failed] == ["first_day"]
        assert report.is_partial
        assert set(store.unlocked[1]) == {"week_warrior"}

    async def test_concurrent_duplicate_is_absorbed(self):
        store = InMemoryRecordStore(profile(), catalog=CATALOG)
        service = AchievementService(store)
        stats = ProgressCalculation(days_smoke_free=1)

        # Второй запрос уже видит список до того, как первый записал достижение
        qualified = await service.find_newly_qualified(1, stats=stats)
        await service.check_and_unlock(1, stats=stats)
        for achievement in qualified:
            assert await store.unlock_achievement(1, achievement.key, datetime.now(timezone.utc)) is None
        assert len(store.unlocked[1]) == 1


class TestRefreshProgressAndAchievements:
    async def test_full_pass(self):
        store = InMemoryRecordStore(profile(days_ago=10), catalog=CATALOG)
        response = await refresh_progress_and_achievements(store, 1, as_of=TODAY, rates=RATES)

        assert response.persisted
        assert not response.degraded
        assert response.calculation.days_smoke_free == 10
        assert [a.key for a in response.newly_unlocked] == ["first_day", "week_warrior"]

    async def test_degraded_pass_does_not_unlock_day_rules(self):
        store = InMemoryRecordStore(profile(days_ago=10), catalog=CATALOG, cravings=10)
        store.broken.add("get_profile")
        response = await refresh_progress_and_achievements(store, 1, as_of=TODAY, rates=RATES)

        assert response.degraded
        assert not response.persisted
        assert [a.key for a in response.newly_unlocked] == ["craving_crusher"]
        assert response.warnings


class TestProgramSummary:
    def test_fresh_user_starts_on_day_one(self):
        summary = summarize_program(0)
        assert summary.completed == 0
        assert summary.current_day == 1
        assert not summary.program_completed

    def test_current_day_follows_completed(self):
        summary = summarize_program(3)
        assert summary.current_day == 4
        assert summary.total_days == 10

    def test_finished_program_stays_on_last_day(self):
        summary = summarize_program(12)
        assert summary.completed == 10
        assert summary.current_day == 10
        assert summary.program_completed

    async def test_summary_from_store(self):
        store = InMemoryRecordStore(sessions_completed=4)
        summary = await get_program_summary(store, 1)
        assert summary.completed == 4
        assert summary.current_day == 5
        assert not summary.degraded

    async def test_session_count_unavailable_degrades(self):
        store = InMemoryRecordStore(sessions_completed=4)
        store.broken.add("count_completed_sessions")
        summary = await get_program_summary(store, 1)
        assert summary.degraded
        assert summary.completed == 0
        assert summary.current_day == 1

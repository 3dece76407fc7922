# quithero/services/progress_service.py
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Union
import logging

from quithero.core.config import settings
from quithero.core.exceptions import DataUnavailable
from quithero.core.result import Result
from quithero.core.schemas.achievements import ProgressRefreshResponse
from quithero.core.schemas.progress import (
    ProgressCalculation,
    ProgressRates,
    ProgressStatsResponse,
    StatsData,
)
from quithero.models.enums import CravingType
from quithero.repositories.record_store import RecordStore
from quithero.services.achievement_service import AchievementService
from quithero.services.progress_calculator import calculate_progress

logger = logging.getLogger(__name__)


@dataclass
class ProgressOutcome:
    calculation: ProgressCalculation
    # degraded: часть данных не получена и заменена значением по умолчанию
    degraded: bool = False
    # has_profile: False, если анкеты ещё нет (сохранять нечего)
    has_profile: bool = True
    warnings: List[str] = field(default_factory=list)


@dataclass
class ProgressRefresh(ProgressOutcome):
    stats: Optional[StatsData] = None

    @property
    def persisted(self) -> bool:
        return self.stats is not None


class ProgressService:
    def __init__(self, store: RecordStore, rates: Optional[ProgressRates] = None):
        self.store = store
        self.rates = rates or ProgressRates.from_config(settings.progress)

    async def calculate(self, user_id: int, as_of: Union[date, datetime, None] = None) -> ProgressOutcome:
        """Рассчитать прогресс. Ошибки хранилища не пробрасываются."""
        as_of = as_of or datetime.now(timezone.utc)

        profile_result = await Result.capture(self.store.get_profile(user_id), source="profile")
        if not profile_result.ok:
            return ProgressOutcome(
                calculation=ProgressCalculation.zero(),
                degraded=True,
                warnings=["Profile is unavailable, progress shown as zero"],
            )

        profile = profile_result.value
        if profile is None:
            logger.warning(f"User profile not found for user {user_id}")
            return ProgressOutcome(calculation=ProgressCalculation.zero(), has_profile=False)

        if profile.quit_date is None:
            logger.info(f"User {user_id} has no quit_date set, progress is zero")
            return ProgressOutcome(calculation=ProgressCalculation.zero())

        outcome = ProgressOutcome(calculation=ProgressCalculation.zero())
        slips = await Result.capture(self.store.count_events(user_id, CravingType.SLIP), source="slip_count")
        if not slips.ok:
            outcome.degraded = True
            outcome.warnings.append("Slip count is unavailable, assuming no slips")

        outcome.calculation = calculate_progress(profile, slips.unwrap_or(0), as_of, self.rates)
        logger.debug(f"Progress for user {user_id}: {outcome.calculation}")
        return outcome

    async def sync_stats(self, user_id: int, calculation: ProgressCalculation) -> StatsData:
        """Сохранить расчёт (upsert, одна строка на пользователя)"""
        return await self.store.upsert_stats(user_id, calculation)

    async def refresh(self, user_id: int, as_of: Union[date, datetime, None] = None) -> ProgressRefresh:
        """Пересчитать и сохранить прогресс.

        Снимок не перезаписывается, если расчёт сделан на неполных данных
        или анкеты ещё нет.
        """
        outcome = await self.calculate(user_id, as_of)
        refresh = ProgressRefresh(
            calculation=outcome.calculation,
            degraded=outcome.degraded,
            has_profile=outcome.has_profile,
            warnings=list(outcome.warnings),
        )
        if outcome.degraded or not outcome.has_profile:
            return refresh

        try:
            refresh.stats = await self.sync_stats(user_id, outcome.calculation)
        except DataUnavailable as e:
            logger.warning(f"Could not persist progress stats for user {user_id}: {e.detail}")
            refresh.warnings.append("Progress stats could not be saved")
        return refresh

    async def get_snapshot(self, user_id: int) -> ProgressStatsResponse:
        """Последний сохранённый прогресс или нули"""
        result = await Result.capture(self.store.get_stats(user_id), source="stats")
        stats = result.unwrap_or(None)
        if stats is None:
            return ProgressStatsResponse()
        return ProgressStatsResponse(**stats.model_dump(exclude={"user_id"}))


async def refresh_progress_and_achievements(
    store: RecordStore,
    user_id: int,
    as_of: Union[date, datetime, None] = None,
    rates: Optional[ProgressRates] = None,
) -> ProgressRefreshResponse:
    """Пересчёт прогресса, сохранение и проверка достижений за один проход"""
    progress = await ProgressService(store, rates).refresh(user_id, as_of)

    # Достижения проверяем по сохранённым данным; если сохранить не удалось,
    # используем только что рассчитанные значения, если они полные
    stats: Optional[ProgressCalculation] = progress.stats
    if stats is None and not progress.degraded and progress.has_profile:
        stats = progress.calculation

    report = await AchievementService(store).check_and_unlock(user_id, stats=stats)

    return ProgressRefreshResponse(
        calculation=progress.calculation,
        persisted=progress.persisted,
        degraded=progress.degraded,
        newly_unlocked=report.unlocked,
        failed_unlocks=report.failed,
        warnings=progress.warnings + report.warnings,
    )

# quithero/services/achievement_service.py
from datetime import datetime, timezone
from typing import List, Optional
import logging

from quithero.core.exceptions import AppException
from quithero.core.result import Result
from quithero.core.schemas.achievements import (
    AchievementDefinition,
    UnlockFailure,
    UnlockReport,
)
from quithero.core.schemas.progress import ProgressCalculation
from quithero.models.enums import CravingType
from quithero.repositories.record_store import RecordStore
from quithero.services.achievement_rules import evaluate_achievements

logger = logging.getLogger(__name__)


class AchievementService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def find_newly_qualified(
        self,
        user_id: int,
        stats: Optional[ProgressCalculation] = None,
        report: Optional[UnlockReport] = None,
    ) -> List[AchievementDefinition]:
        """Какие достижения пользователь заработал, но ещё не получил.

        Если каталог или список открытых недоступен, возвращается пустой список.
        """
        report = report if report is not None else UnlockReport()

        catalog = await Result.capture(self.store.list_achievement_catalog(), source="achievement_catalog")
        if not catalog.ok:
            report.warnings.append("Achievement catalog is unavailable")
            return []

        unlocked = await Result.capture(self.store.list_unlocked_keys(user_id), source="unlocked_keys")
        if not unlocked.ok:
            report.warnings.append("Unlocked achievements are unavailable")
            return []

        if stats is None:
            stored = await Result.capture(self.store.get_stats(user_id), source="stats")
            if not stored.ok:
                report.warnings.append("Progress stats are unavailable")
                return []
            stats = stored.value

        cravings = await Result.capture(self.store.count_events(user_id, CravingType.CRAVING), source="craving_count")
        if not cravings.ok:
            # Как и раньше: без счётчика тяги продолжаем с нулём
            report.warnings.append("Resisted cravings count is unavailable, using 0")

        return evaluate_achievements(catalog.value, unlocked.value, stats, cravings.unwrap_or(0))

    async def check_and_unlock(
        self,
        user_id: int,
        stats: Optional[ProgressCalculation] = None,
        now: Optional[datetime] = None,
    ) -> UnlockReport:
        """Проверить правила и открыть новые достижения.

        Каждое достижение записывается отдельно: ошибка на одном не мешает
        остальным, повторное открытие молча игнорируется.
        """
        report = UnlockReport()
        newly_qualified = await self.find_newly_qualified(user_id, stats, report)
        unlocked_at = now or datetime.now(timezone.utc)

        for achievement in newly_qualified:
            try:
                unlocked = await self.store.unlock_achievement(user_id, achievement.key, unlocked_at)
            except AppException as e:
                logger.error(f"Failed to unlock achievement {achievement.key} for user {user_id}: {e.detail}")
                report.failed.append(UnlockFailure(key=achievement.key, error=e.detail))
                continue

            if unlocked is None:
                report.duplicates.append(achievement.key)
            else:
                logger.info(f"🏆 User {user_id} unlocked achievement {achievement.key}")
                report.unlocked.append(achievement)

        if report.is_partial:
            logger.warning(
                f"Partial achievement unlock for user {user_id}: "
                f"{len(report.unlocked)} unlocked, {len(report.failed)} failed"
            )
        return report

# quithero/services/achievement_rules.py
from typing import Callable, Dict, Iterable, List, Optional

from quithero.core.schemas.achievements import AchievementDefinition
from quithero.core.schemas.progress import ProgressCalculation
from quithero.models.enums import RequirementType


def _days_smoke_free(stats: Optional[ProgressCalculation], cravings_resisted: int) -> Optional[int]:
    return stats.days_smoke_free if stats is not None else None


def _cravings_resisted(stats: Optional[ProgressCalculation], cravings_resisted: int) -> Optional[int]:
    return max(0, cravings_resisted)


# Метрика, с которой сравнивается requirement_value.
# sessions_completed пока считается по дням без курения, а не по реальным
# пройденным сессиям: так сохраняются сроки открытия у существующих пользователей.
REQUIREMENT_METRICS: Dict[str, Callable[[Optional[ProgressCalculation], int], Optional[int]]] = {
    RequirementType.DAYS_STREAK.value: _days_smoke_free,
    RequirementType.CRAVINGS_RESISTED.value: _cravings_resisted,
    RequirementType.SESSIONS_COMPLETED.value: _days_smoke_free,
}


def is_qualified(
    achievement: AchievementDefinition,
    stats: Optional[ProgressCalculation],
    cravings_resisted: int,
) -> bool:
    metric = REQUIREMENT_METRICS.get(achievement.requirement_type)
    if metric is None:
        return False
    current = metric(stats, cravings_resisted)
    if current is None:
        return False
    return current >= achievement.requirement_value


def evaluate_achievements(
    catalog: Iterable[AchievementDefinition],
    unlocked_keys: Iterable[str],
    stats: Optional[ProgressCalculation],
    cravings_resisted: int,
) -> List[AchievementDefinition]:
    """Новые достижения, которые пользователь заработал.

    Порядок совпадает с порядком каталога (по возрастанию порога), чтобы
    интерфейс стабильно показывал «первое новое» достижение.
    """
    already = set(unlocked_keys)
    newly_qualified = []
    for achievement in catalog:
        if achievement.key in already:
            continue
        if is_qualified(achievement, stats, cravings_resisted):
            newly_qualified.append(achievement)
            already.add(achievement.key)
    return newly_qualified

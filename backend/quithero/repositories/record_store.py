# quithero/repositories/record_store.py
"""
Контракт хранилища для расчёта прогресса и достижений.

Сервисы работают только с RecordStore и нормализованными pydantic-типами.
Любая ошибка хранилища превращается в DataUnavailable.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Set
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quithero.core.exceptions import DataUnavailable, NotFoundError
from quithero.core.schemas.achievements import AchievementDefinition, UnlockedAchievement
from quithero.core.schemas.progress import ProfileData, ProgressCalculation, StatsData
from quithero.models.enums import CravingType
from quithero.repositories.achievement_repository import AchievementRepository
from quithero.repositories.craving_repository import CravingRepository
from quithero.repositories.profile_repository import ProfileRepository
from quithero.repositories.progress_repository import ProgressStatsRepository
from quithero.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    @abstractmethod
    async def get_profile(self, user_id: int) -> Optional[ProfileData]:
        ...

    @abstractmethod
    async def count_events(self, user_id: int, type: CravingType) -> int:
        ...

    @abstractmethod
    async def count_completed_sessions(self, user_id: int) -> int:
        ...

    @abstractmethod
    async def get_stats(self, user_id: int) -> Optional[StatsData]:
        ...

    @abstractmethod
    async def upsert_stats(self, user_id: int, calculation: ProgressCalculation) -> StatsData:
        ...

    @abstractmethod
    async def list_achievement_catalog(self) -> List[AchievementDefinition]:
        ...

    @abstractmethod
    async def list_unlocked_keys(self, user_id: int) -> Set[str]:
        ...

    @abstractmethod
    async def unlock_achievement(self, user_id: int, achievement_key: str, timestamp: datetime) -> Optional[UnlockedAchievement]:
        """None, если достижение уже открыто"""
        ...


class SQLAlchemyRecordStore(RecordStore):
    """RecordStore поверх репозиториев SQLAlchemy"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.cravings = CravingRepository(session)
        self.stats = ProgressStatsRepository(session)
        self.achievements = AchievementRepository(session)
        self.sessions = SessionRepository(session)

    async def _fail(self, operation: str, error: SQLAlchemyError) -> DataUnavailable:
        logger.error(f"Record store operation '{operation}' failed: {error}")
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f"Rollback after '{operation}' failed: {rollback_error}")
        return DataUnavailable(f"Could not {operation}", source=operation)

    async def get_profile(self, user_id: int) -> Optional[ProfileData]:
        try:
            profile = await self.profiles.get_by_user_id(user_id)
        except SQLAlchemyError as e:
            raise await self._fail("get_profile", e)
        return ProfileData.model_validate(profile) if profile else None

    async def count_events(self, user_id: int, type: CravingType) -> int:
        try:
            return await self.cravings.count_by_type(user_id, CravingType(type).value)
        except SQLAlchemyError as e:
            raise await self._fail("count_events", e)

    async def count_completed_sessions(self, user_id: int) -> int:
        try:
            return await self.sessions.count_completed(user_id)
        except SQLAlchemyError as e:
            raise await self._fail("count_completed_sessions", e)

    async def get_stats(self, user_id: int) -> Optional[StatsData]:
        try:
            stats = await self.stats.get_by_user_id(user_id)
        except SQLAlchemyError as e:
            raise await self._fail("get_stats", e)
        return StatsData.model_validate(stats) if stats else None

    async def upsert_stats(self, user_id: int, calculation: ProgressCalculation) -> StatsData:
        try:
            stats = await self.stats.upsert(user_id, calculation)
        except SQLAlchemyError as e:
            raise await self._fail("upsert_stats", e)
        return StatsData.model_validate(stats)

    async def list_achievement_catalog(self) -> List[AchievementDefinition]:
        try:
            catalog = await self.achievements.list_catalog()
        except SQLAlchemyError as e:
            raise await self._fail("list_achievement_catalog", e)
        return [AchievementDefinition.model_validate(a) for a in catalog]

    async def list_unlocked_keys(self, user_id: int) -> Set[str]:
        try:
            return await self.achievements.list_unlocked_keys(user_id)
        except SQLAlchemyError as e:
            raise await self._fail("list_unlocked_keys", e)

    async def unlock_achievement(self, user_id: int, achievement_key: str, timestamp: datetime) -> Optional[UnlockedAchievement]:
        try:
            achievement = await self.achievements.get_by_key(achievement_key)
            if achievement is None:
                raise NotFoundError(f"Achievement '{achievement_key}' not found")
            definition = AchievementDefinition.model_validate(achievement)
            user_achievement = await self.achievements.unlock(user_id, definition.id, timestamp)
        except SQLAlchemyError as e:
            raise await self._fail("unlock_achievement", e)

        if user_achievement is None:
            return None
        return UnlockedAchievement(
            user_id=user_id,
            achievement=definition,
            unlocked_at=user_achievement.unlocked_at,
        )

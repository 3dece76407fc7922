# quithero/repositories/achievement_repository.py
from typing import List, Optional, Set
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.engagement import Achievement, UserAchievement
from quithero.models.enums import AchievementTier, RequirementType
import logging

logger = logging.getLogger(__name__)

# Каталог по умолчанию
DEFAULT_ACHIEVEMENTS = [
    {
        "key": "first_day",
        "title": "First Day",
        "description": "Completed your first smoke-free day",
        "tier": AchievementTier.BRONZE.value,
        "requirement_type": RequirementType.DAYS_STREAK.value,
        "requirement_value": 1,
    },
    {
        "key": "week_warrior",
        "title": "Week Warrior",
        "description": "7 days smoke-free",
        "tier": AchievementTier.SILVER.value,
        "requirement_type": RequirementType.DAYS_STREAK.value,
        "requirement_value": 7,
    },
    {
        "key": "month_master",
        "title": "Month Master",
        "description": "30 days smoke-free",
        "tier": AchievementTier.GOLD.value,
        "requirement_type": RequirementType.DAYS_STREAK.value,
        "requirement_value": 30,
    },
    {
        "key": "craving_crusher",
        "title": "Craving Crusher",
        "description": "Resisted 10 cravings",
        "tier": AchievementTier.GOLD.value,
        "requirement_type": RequirementType.CRAVINGS_RESISTED.value,
        "requirement_value": 10,
    },
    {
        "key": "perfect_ten",
        "title": "Perfect Ten",
        "description": "Completed all 10 days of the program",
        "tier": AchievementTier.PLATINUM.value,
        "requirement_type": RequirementType.SESSIONS_COMPLETED.value,
        "requirement_value": 10,
    },
]

class AchievementRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_catalog(self) -> List[Achievement]:
        """Все достижения по возрастанию порога"""
        stmt = select(Achievement).order_by(Achievement.requirement_value, Achievement.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_key(self, key: str) -> Optional[Achievement]:
        stmt = select(Achievement).where(Achievement.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_unlocked_keys(self, user_id: int) -> Set[str]:
        """Ключи уже открытых достижений пользователя"""
        stmt = (
            select(Achievement.key)
            .join(UserAchievement, UserAchievement.achievement_id == Achievement.id)
            .where(UserAchievement.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def list_user_achievements(self, user_id: int) -> List[UserAchievement]:
        """Открытые достижения, последние сверху"""
        stmt = (
            select(UserAchievement)
            .where(UserAchievement.user_id == user_id)
            .options(selectinload(UserAchievement.achievement))
            .order_by(UserAchievement.unlocked_at.desc(), UserAchievement.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def unlock(self, user_id: int, achievement_id: int, unlocked_at: datetime) -> Optional[UserAchievement]:
        """Открыть достижение. None, если оно уже открыто.

        Каждая запись коммитится отдельно, чтобы ошибка на одном
        достижении не откатывала уже открытые.
        """
        existing = await self.session.execute(
            select(UserAchievement).where(
                UserAchievement.user_id == user_id,
                UserAchievement.achievement_id == achievement_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            return None

        user_achievement = UserAchievement(
            user_id=user_id,
            achievement_id=achievement_id,
            unlocked_at=unlocked_at,
        )
        self.session.add(user_achievement)
        try:
            await self.session.commit()
        except IntegrityError:
            # Уникальность (user_id, achievement_id): параллельный запрос успел раньше
            await self.session.rollback()
            logger.info(f"Achievement {achievement_id} already unlocked for user {user_id}")
            return None

        await self.session.refresh(user_achievement, attribute_names=["achievement"])
        return user_achievement

    async def seed_defaults(self) -> int:
        """Добавить недостающие достижения каталога. Возвращает число вставленных."""
        inserted = 0
        for data in DEFAULT_ACHIEVEMENTS:
            if await self.get_by_key(data["key"]) is None:
                self.session.add(Achievement(**data))
                inserted += 1
        if inserted:
            await self.session.commit()
        return inserted

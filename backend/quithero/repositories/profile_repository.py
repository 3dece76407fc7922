# quithero/repositories/profile_repository.py
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.profile import UserProfile
import logging

logger = logging.getLogger(__name__)

class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int) -> Optional[UserProfile]:
        """Получить анкету пользователя"""
        stmt = select(UserProfile).where(UserProfile.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, data: Dict[str, Any]) -> UserProfile:
        """Создать или обновить анкету"""
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self._apply(profile, data)
            self.session.add(profile)
            try:
                await self.session.commit()
            except IntegrityError:
                # Параллельный запрос уже создал анкету (user_id уникален): обновляем её
                await self.session.rollback()
                logger.info(f"Concurrent profile insert for user {user_id}, updating existing row")
                profile = await self.get_by_user_id(user_id)
                if profile is None:
                    raise
                self._apply(profile, data)
                await self.session.commit()
        else:
            self._apply(profile, data)
            await self.session.commit()

        await self.session.refresh(profile)
        return profile

    async def set_archetype(self, user_id: int, archetype: str) -> Optional[UserProfile]:
        """Записать архетип в анкету (перезаписывает предыдущий)"""
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            return None
        profile.quit_archetype = archetype
        profile.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    @staticmethod
    def _apply(profile: UserProfile, data: Dict[str, Any]) -> None:
        for field, value in data.items():
            setattr(profile, field, value)
        profile.updated_at = datetime.now(timezone.utc)

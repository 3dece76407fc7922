# quithero/repositories/session_repository.py
from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.enums import SessionStatus
from quithero.models.session import UserSession
import logging

logger = logging.getLogger(__name__)

class SessionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int, day_number: int) -> Optional[UserSession]:
        stmt = select(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.day_number == day_number,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: int) -> List[UserSession]:
        """Сессии пользователя по порядку дней"""
        stmt = (
            select(UserSession)
            .where(UserSession.user_id == user_id)
            .order_by(UserSession.day_number)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_completed(self, user_id: int) -> int:
        """Количество завершённых дней программы"""
        stmt = select(func.count()).select_from(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.status == SessionStatus.COMPLETED.value,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_or_create(self, user_id: int, day_number: int) -> UserSession:
        """Найти сессию дня или создать её (not_started)"""
        user_session = await self.get(user_id, day_number)
        if user_session is not None:
            return user_session

        user_session = UserSession(
            user_id=user_id,
            day_number=day_number,
            status=SessionStatus.NOT_STARTED.value,
            time_spent_minutes=0,
        )
        self.session.add(user_session)
        try:
            await self.session.commit()
        except IntegrityError:
            # Уникальность (user_id, day_number): параллельный запрос создал строку раньше
            await self.session.rollback()
            logger.info(f"Concurrent session insert for user {user_id}, day {day_number}")
            user_session = await self.get(user_id, day_number)
            if user_session is None:
                raise
        return user_session

    async def start(self, user_id: int, day_number: int) -> UserSession:
        """Начать день. Уже начатый или завершённый день не меняется."""
        user_session = await self.get_or_create(user_id, day_number)
        if user_session.status == SessionStatus.NOT_STARTED.value:
            user_session.status = SessionStatus.IN_PROGRESS.value
            user_session.started_at = datetime.now(timezone.utc)
            await self.session.commit()
            await self.session.refresh(user_session)
        return user_session

    async def complete(self, user_id: int, day_number: int, time_spent_minutes: int = 0) -> UserSession:
        """Завершить день. Повторное завершение сохраняет первую дату."""
        user_session = await self.get_or_create(user_id, day_number)
        now = datetime.now(timezone.utc)
        if user_session.started_at is None:
            user_session.started_at = now
        if user_session.status != SessionStatus.COMPLETED.value:
            user_session.status = SessionStatus.COMPLETED.value
            user_session.completed_at = now
        user_session.time_spent_minutes = max(0, time_spent_minutes)
        await self.session.commit()
        await self.session.refresh(user_session)
        return user_session

# quithero/repositories/progress_repository.py
from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.engagement import ProgressStats
from quithero.core.schemas.progress import ProgressCalculation
import logging

logger = logging.getLogger(__name__)

class ProgressStatsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int) -> Optional[ProgressStats]:
        """Получить сохранённый снимок прогресса"""
        stmt = select(ProgressStats).where(ProgressStats.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, calculation: ProgressCalculation) -> ProgressStats:
        """Перезаписать снимок прогресса (одна строка на пользователя)"""
        values = calculation.model_dump()
        now = datetime.now(timezone.utc)

        stats = await self.get_by_user_id(user_id)
        if stats is None:
            stats = ProgressStats(user_id=user_id, last_calculated=now, **values)
            self.session.add(stats)
            try:
                await self.session.commit()
            except IntegrityError:
                # Параллельный пересчёт успел создать строку: обновляем её
                await self.session.rollback()
                logger.info(f"Concurrent stats insert for user {user_id}, updating existing row")
                stats = await self.get_by_user_id(user_id)
                if stats is None:
                    raise
                self._apply(stats, values, now)
                await self.session.commit()
        else:
            self._apply(stats, values, now)
            await self.session.commit()

        await self.session.refresh(stats)
        return stats

    @staticmethod
    def _apply(stats: ProgressStats, values: dict, now: datetime) -> None:
        for field, value in values.items():
            setattr(stats, field, value)
        stats.last_calculated = now

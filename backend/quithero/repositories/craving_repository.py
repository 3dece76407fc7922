# quithero/repositories/craving_repository.py
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.craving import Craving

class CravingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        user_id: int,
        type: str,
        trigger: str = "other",
        intensity: int = 3,
        notes: Optional[str] = None,
    ) -> Craving:
        """Записать тягу или срыв"""
        craving = Craving(
            user_id=user_id,
            type=type,
            trigger=trigger,
            intensity=intensity,
            notes=notes,
        )
        self.session.add(craving)
        await self.session.commit()
        await self.session.refresh(craving)
        return craving

    async def count_by_type(self, user_id: int, type: str) -> int:
        """Количество записей заданного типа (0, если записей нет)"""
        stmt = select(func.count()).select_from(Craving).where(
            Craving.user_id == user_id,
            Craving.type == type,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_by_user(self, user_id: int, limit: int = 50) -> List[Craving]:
        """Последние записи пользователя, новые сверху"""
        stmt = (
            select(Craving)
            .where(Craving.user_id == user_id)
            .order_by(Craving.created_at.desc(), Craving.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def trigger_breakdown(self, user_id: int) -> List[tuple[str, int]]:
        """Распределение записей по триггерам"""
        stmt = (
            select(Craving.trigger, func.count())
            .where(Craving.user_id == user_id)
            .group_by(Craving.trigger)
        )
        result = await self.session.execute(stmt)

        counts: dict[str, int] = {}
        for name, count in result.all():
            key = name or "other"
            counts[key] = counts.get(key, 0) + count
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

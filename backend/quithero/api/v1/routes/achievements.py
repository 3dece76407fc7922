# quithero/api/v1/routes/achievements.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.database import db_helper
from quithero.core.utils import get_current_user, get_record_store
from quithero.core.schemas.achievements import (
    AchievementDefinition,
    UnlockReport,
    UnlockedAchievement,
)
from quithero.models.user import User
from quithero.repositories.achievement_repository import AchievementRepository
from quithero.repositories.record_store import RecordStore
from quithero.services.achievement_service import AchievementService

router = APIRouter(prefix="/achievements", tags=["achievements"])

@router.get("", response_model=list[AchievementDefinition])
async def list_achievements(store: RecordStore = Depends(get_record_store)):
    """Каталог достижений по возрастанию порога"""
    return await store.list_achievement_catalog()

@router.get("/me", response_model=list[UnlockedAchievement])
async def list_my_achievements(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Открытые достижения пользователя, последние сверху"""
    unlocked = await AchievementRepository(session).list_user_achievements(current_user.id)
    return [
        UnlockedAchievement(
            user_id=ua.user_id,
            achievement=AchievementDefinition.model_validate(ua.achievement),
            unlocked_at=ua.unlocked_at,
        )
        for ua in unlocked
    ]

@router.post("/check", response_model=UnlockReport)
async def check_achievements(
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Проверить достижения по сохранённому прогрессу"""
    return await AchievementService(store).check_and_unlock(current_user.id)

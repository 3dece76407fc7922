# quithero/api/v1/routes/profile.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.database import db_helper
from quithero.core.utils import get_current_user
from quithero.core.schemas.profile import (
    ArchetypeInfo,
    ArchetypeResponse,
    ProfileResponse,
    ProfileUpdate,
)
from quithero.models.enums import QuitArchetype
from quithero.models.user import User
from quithero.repositories.profile_repository import ProfileRepository
from quithero.services.archetype_service import archetype_info
from quithero.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Анкета текущего пользователя"""
    return await ProfileService(ProfileRepository(session)).get_profile(current_user.id)

@router.put("", response_model=ProfileResponse)
async def update_profile(
    update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Обновление анкеты (шаги онбординга и правки пользователя)"""
    return await ProfileService(ProfileRepository(session)).update_profile(current_user.id, update)

@router.post("/archetype", response_model=ArchetypeResponse)
async def assign_archetype(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Определить архетип по триггерам и эмоциям из анкеты"""
    return await ProfileService(ProfileRepository(session)).assign_archetype(current_user.id)

@router.get("/archetype/{archetype}", response_model=ArchetypeInfo)
async def get_archetype_info(archetype: QuitArchetype):
    return archetype_info(archetype)

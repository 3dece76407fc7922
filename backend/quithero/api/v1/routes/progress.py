# quithero/api/v1/routes/progress.py
from fastapi import APIRouter, Depends, Request
from quithero.api.v1.routes.auth import limiter
from quithero.core.utils import get_current_user, get_record_store
from quithero.core.schemas.achievements import ProgressRefreshResponse
from quithero.core.schemas.progress import ProgressStatsResponse
from quithero.models.user import User
from quithero.repositories.record_store import RecordStore
from quithero.services.progress_service import ProgressService, refresh_progress_and_achievements
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])

@router.get("", response_model=ProgressStatsResponse)
async def get_progress(
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Последний сохранённый прогресс (нули, если расчёта ещё не было)"""
    return await ProgressService(store).get_snapshot(current_user.id)

@router.post("/refresh", response_model=ProgressRefreshResponse)
@limiter.limit("30/minute")
async def refresh_progress(
    request: Request,
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Пересчитать прогресс, сохранить его и проверить достижения"""
    result = await refresh_progress_and_achievements(store, current_user.id)
    if result.warnings:
        logger.warning(f"Progress refresh for user {current_user.id} degraded: {result.warnings}")
    return result

# quithero/api/v1/routes/cravings.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.database import db_helper
from quithero.core.utils import get_current_user
from quithero.core.schemas.cravings import (
    CravingCounts,
    CravingCreate,
    CravingResponse,
    TriggerBreakdownItem,
)
from quithero.models.enums import CravingType
from quithero.models.user import User
from quithero.repositories.craving_repository import CravingRepository
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cravings", tags=["cravings"])

@router.post("", response_model=CravingResponse, status_code=status.HTTP_201_CREATED)
async def log_craving(
    craving: CravingCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Записать тягу (craving) или срыв (slip)"""
    record = await CravingRepository(session).create(
        user_id=current_user.id,
        type=craving.type.value,
        trigger=craving.trigger.value,
        intensity=craving.intensity,
        notes=craving.notes,
    )
    logger.info(f"User {current_user.id} logged {record.type} (trigger: {record.trigger})")
    return record

@router.get("", response_model=list[CravingResponse])
async def list_cravings(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    return await CravingRepository(session).get_by_user(current_user.id, limit=limit)

@router.get("/counts", response_model=CravingCounts)
async def get_craving_counts(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    repo = CravingRepository(session)
    return CravingCounts(
        cravings=await repo.count_by_type(current_user.id, CravingType.CRAVING.value),
        slips=await repo.count_by_type(current_user.id, CravingType.SLIP.value),
    )

@router.get("/breakdown", response_model=list[TriggerBreakdownItem])
async def get_trigger_breakdown(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Распределение записей по триггерам (для графика)"""
    breakdown = await CravingRepository(session).trigger_breakdown(current_user.id)
    return [TriggerBreakdownItem(name=name, value=count) for name, count in breakdown]

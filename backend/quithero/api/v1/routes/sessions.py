# quithero/api/v1/routes/sessions.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.database import db_helper
from quithero.core.utils import get_current_user, get_record_store
from quithero.core.schemas.sessions import (
    PROGRAM_LENGTH_DAYS,
    SessionComplete,
    SessionResponse,
    SessionSummary,
)
from quithero.models.user import User
from quithero.repositories.record_store import RecordStore
from quithero.repositories.session_repository import SessionRepository
from quithero.services.session_service import get_program_summary
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    return await SessionRepository(session).list_by_user(current_user.id)

@router.get("/summary", response_model=SessionSummary)
async def get_summary(
    current_user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Сколько дней программы пройдено и какой день следующий"""
    return await get_program_summary(store, current_user.id)

@router.post("/{day_number}/start", response_model=SessionResponse)
async def start_session(
    day_number: int = Path(..., ge=1, le=PROGRAM_LENGTH_DAYS),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    return await SessionRepository(session).start(current_user.id, day_number)

@router.post("/{day_number}/complete", response_model=SessionResponse)
async def complete_session(
    body: SessionComplete,
    day_number: int = Path(..., ge=1, le=PROGRAM_LENGTH_DAYS),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    user_session = await SessionRepository(session).complete(current_user.id, day_number, body.time_spent_minutes)
    logger.info(f"User {current_user.id} completed program day {day_number}")
    return user_session

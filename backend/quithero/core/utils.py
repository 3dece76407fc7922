# quithero/core/utils.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.database import db_helper
from quithero.core.exceptions import AuthenticationError
from quithero.repositories.user_repository import UserRepository
from quithero.repositories.record_store import SQLAlchemyRecordStore
from quithero.services.auth_service import AuthService
from quithero.models.user import User
import logging

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(db_helper.session_getter)
) -> User:
    """Зависимость для получения текущего пользователя из токена"""
    try:
        user_repo = UserRepository(session)
        auth_service = AuthService(user_repo)
        return await auth_service.get_current_user(token)
    except AuthenticationError as e:
        logger.warning(f"Authentication failed: {e.detail}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_record_store(
    session: AsyncSession = Depends(db_helper.session_getter)
) -> SQLAlchemyRecordStore:
    """Хранилище для расчёта прогресса, привязанное к сессии запроса"""
    return SQLAlchemyRecordStore(session)

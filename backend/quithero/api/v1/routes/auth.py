# quithero/api/v1/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.core.config import settings
from quithero.core.database import db_helper
from quithero.core.utils import get_current_user
from quithero.repositories.user_repository import UserRepository
from quithero.services.auth_service import AuthService
from quithero.core.schemas.auth import (
    UserCreate,
    UserResponse,
    Token,
    RefreshTokenRequest,
)
from quithero.models.user import User
from quithero.core.exceptions import (
    AuthenticationError,
    ValidationError,
    RateLimitError
)
from slowapi import Limiter
from slowapi.util import get_remote_address
import logging

# Настройка логгера
logger = logging.getLogger(__name__)

# Rate limiter (можно использовать Redis в продакшене)
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

router = APIRouter(prefix="/auth", tags=["authentication"])

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")  # Максимум 5 регистраций в минуту с одного IP
async def register_user(
    request: Request,
    user_create: UserCreate,
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Регистрация нового пользователя"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Registration attempt from IP: {client_ip} for email: {user_create.email}")

    try:
        auth_service = AuthService(UserRepository(session))
        user, _ = await auth_service.register_user(user_create)
    except ValidationError as e:
        logger.warning(f"Validation error during registration: {e.detail}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)

    logger.info(f"Successful registration for user ID: {user.id}, email: {user.email}")
    return user

@router.post("/login", response_model=Token)
@limiter.limit("10/minute")  # Максимум 10 попыток входа в минуту с одного IP
async def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Логин пользователя и получение токенов"""
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Login attempt from IP: {client_ip} for email: {form_data.username}")

    try:
        auth_service = AuthService(UserRepository(session))
        _, token = await auth_service.authenticate_user(
            form_data.username,
            form_data.password,
            client_ip
        )
    except RateLimitError as e:
        logger.warning(f"Rate limit exceeded for login from IP: {client_ip}")
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except AuthenticationError as e:
        logger.warning(f"Authentication failed for email: {form_data.username} from IP: {client_ip}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"Successful login for email: {form_data.username}")
    return token

@router.post("/refresh", response_model=Token)
@limiter.limit("20/hour")  # Максимум 20 обновлений токена в час
async def refresh_access_token(
    request: Request,
    refresh_request: RefreshTokenRequest,
    session: AsyncSession = Depends(db_helper.session_getter)
):
    """Обновление access token с помощью refresh token"""
    try:
        auth_service = AuthService(UserRepository(session))
        return await auth_service.refresh_tokens(refresh_request.refresh_token)
    except AuthenticationError as e:
        logger.warning(f"Token refresh failed: {e.detail}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Получение информации о текущем пользователе"""
    return current_user

# quithero/services/auth_service.py
from typing import Tuple, Dict
from datetime import datetime, timedelta, timezone
from quithero.core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token
)
from quithero.repositories.user_repository import UserRepository
from quithero.core.schemas.auth import UserCreate, Token
from quithero.core.config import settings
from quithero.core.exceptions import (
    AuthenticationError,
    ValidationError,
    RateLimitError
)
from quithero.models.user import User

class RateLimiter:
    """Простой rate limiter для защиты от брутфорса"""
    def __init__(self, max_attempts: int = 5):
        self.attempts: Dict[str, list] = {}  # {ip_or_email: [timestamps]}
        self.max_attempts = max_attempts
        self.block_duration = timedelta(minutes=15)  # 15 минут блокировки
        self.window = timedelta(minutes=5)  # окно для подсчета попыток

    async def check_rate_limit(self, identifier: str) -> None:
        """Проверка лимита запросов"""
        now = datetime.now(timezone.utc)

        # Очистка старых записей
        if identifier in self.attempts:
            self.attempts[identifier] = [
                ts for ts in self.attempts[identifier]
                if ts > now - self.block_duration
            ]

        # Проверка на блокировку
        attempts = self.attempts.get(identifier, [])
        recent = [ts for ts in attempts if ts > now - self.window]
        if len(recent) >= self.max_attempts:
            first_attempt = min(recent)
            remaining = int((first_attempt + self.block_duration - now).total_seconds())
            raise RateLimitError(
                f"Too many attempts. Try again in {remaining} seconds"
            )

        self.attempts.setdefault(identifier, []).append(now)

    async def clear_attempts(self, identifier: str) -> None:
        """Очистка попыток после успешной аутентификации"""
        self.attempts.pop(identifier, None)


# Общий на процесс, иначе каждый запрос начинал бы счёт заново
login_rate_limiter = RateLimiter()

class AuthService:
    def __init__(self, user_repository: UserRepository, rate_limiter: RateLimiter = login_rate_limiter):
        self.user_repository = user_repository
        self.rate_limiter = rate_limiter

    async def register_user(self, user_create: UserCreate) -> Tuple[User, Token]:
        """Регистрация нового пользователя"""
        existing_user = await self.user_repository.get_by_email(user_create.email)
        if existing_user:
            raise ValidationError("User with this email already exists")

        password_hash = get_password_hash(user_create.password)
        user = await self.user_repository.create(user_create, password_hash)
        token = self._generate_tokens(user.id)
        return user, token

    async def authenticate_user(self, email: str, password: str, client_ip: str) -> Tuple[User, Token]:
        """Аутентификация пользователя с защитой от брутфорса"""
        email = email.lower()

        await self.rate_limiter.check_rate_limit(f"login_email_{email}")
        await self.rate_limiter.check_rate_limit(f"login_ip_{client_ip}")

        user = await self.user_repository.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        token = self._generate_tokens(user.id)

        await self.rate_limiter.clear_attempts(f"login_email_{email}")
        await self.rate_limiter.clear_attempts(f"login_ip_{client_ip}")
        return user, token

    async def refresh_tokens(self, refresh_token: str) -> Token:
        """Обновление access token с помощью refresh token"""
        user = await self._user_from_token(refresh_token, REFRESH_TOKEN)
        return self._generate_tokens(user.id)

    def _generate_tokens(self, user_id: int) -> Token:
        """Генерация пары access/refresh токенов"""
        access_token_expires = timedelta(
            minutes=settings.security.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )
        return Token(
            access_token=create_access_token(user_id, access_token_expires),
            refresh_token=create_refresh_token(user_id),
            expires_in=int(access_token_expires.total_seconds())
        )

    async def get_current_user(self, token: str) -> User:
        """Получение текущего пользователя из access token"""
        return await self._user_from_token(token, ACCESS_TOKEN)

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            user_id = decode_token(token, token_type)
        except ValueError as e:
            raise AuthenticationError(str(e))

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user

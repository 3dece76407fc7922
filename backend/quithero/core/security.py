# quithero/core/security.py
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError

from quithero.core.config import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def _encode(subject: str, token_type: str, lifetime: timedelta, **claims: Any) -> str:
    payload = {
        "sub": subject,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + lifetime,
        **claims,
    }
    return jwt.encode(
        payload,
        settings.security.JWT_SECRET_KEY.get_secret_value(),
        algorithm=settings.security.JWT_ALGORITHM,
    )


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.security.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(str(user_id), ACCESS_TOKEN, lifetime)


def create_refresh_token(user_id: int) -> str:
    """Refresh-токен с уникальным jti, чтобы два токена одной секунды не совпадали"""
    lifetime = timedelta(days=settings.security.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(str(user_id), REFRESH_TOKEN, lifetime, jti=secrets.token_urlsafe(16))


def decode_token(token: str, expected_type: str) -> int:
    """Проверить подпись, срок и тип токена. Возвращает id пользователя.

    Любая проблема с токеном превращается в ValueError с понятным текстом.
    """
    try:
        payload = jwt.decode(
            token,
            settings.security.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.security.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise ValueError("Token expired")
    except JWTError:
        raise ValueError("Invalid token")

    if payload.get("type") != expected_type:
        raise ValueError(f"Expected {expected_type} token")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("Invalid token payload")

# quithero/core/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


class PasswordComplexity:
    """Класс для проверки сложности пароля"""
    MIN_LENGTH = 8
    MAX_LENGTH = 64
    REQUIRE_LETTER = True
    REQUIRE_DIGIT = True

    @classmethod
    def validate(cls, password: str) -> None:
        """Проверка сложности пароля"""
        errors = []

        if len(password) < cls.MIN_LENGTH:
            errors.append(f"Password must be at least {cls.MIN_LENGTH} characters long")
        if len(password) > cls.MAX_LENGTH:
            errors.append(f"Password must be at most {cls.MAX_LENGTH} characters long")

        if cls.REQUIRE_LETTER and not any(c.isalpha() for c in password):
            errors.append("Password must contain at least one letter")
        if cls.REQUIRE_DIGIT and not any(c.isdigit() for c in password):
            errors.append("Password must contain at least one digit")

        # Проверка на распространенные слабые пароли
        weak_passwords = [
            "password", "password1", "12345678", "qwerty123", "abc12345",
            "iloveyou1", "1q2w3e4r", "welcome1",
        ]
        if password.lower() in weak_passwords:
            errors.append("Password is too common and easily guessable")

        if errors:
            raise ValueError("; ".join(errors))


class UserCreate(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        """Валидация сложности пароля"""
        PasswordComplexity.validate(v)
        return v

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiration time in seconds")


class UserResponse(BaseModel):
    id: int
    email: str
    role: str = "user"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token for getting new access token")

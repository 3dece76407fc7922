# quithero/repositories/user_repository.py
from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from quithero.models.user import User
from quithero.models.profile import UserProfile
from quithero.core.schemas.auth import UserCreate

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получить пользователя по email"""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, user_create: UserCreate, password_hash: str) -> User:
        """Создать нового пользователя вместе с пустой анкетой"""
        db_user = User(
            email=user_create.email.lower(),
            password_hash=password_hash,
            role="user",  # По умолчанию обычный пользователь
            created_at=datetime.now(timezone.utc),
            updated_at=datetime.now(timezone.utc)
        )

        self.session.add(db_user)
        await self.session.flush()  # Получаем ID без коммита

        # Анкета без даты отказа: прогресс будет нулевым до конца онбординга
        profile = UserProfile(
            user_id=db_user.id,
            daily_consumption=0.0,
            smoking_triggers=[],
            emotional_states=[],
            motivations=[],
        )
        self.session.add(profile)

        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

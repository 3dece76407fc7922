# quithero/models/__init__.py
from .base import Base
from .user import User, UserRole
from .profile import UserProfile
from .craving import Craving
from .session import UserSession
from .engagement import ProgressStats, Achievement, UserAchievement

# Этот список нужен, чтобы IDE и инструменты видели, что экспортируется
__all__ = [
    "Base",
    "User", "UserRole",
    "UserProfile",
    "Craving",
    "UserSession",
    "ProgressStats", "Achievement", "UserAchievement",
]

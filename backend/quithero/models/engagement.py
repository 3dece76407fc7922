# quithero/models/engagement.py
from sqlalchemy import Column, Integer, Float, String, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base

class ProgressStats(Base):
    """Последний рассчитанный прогресс. Одна строка на пользователя."""
    __tablename__ = "progress_stats"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    days_smoke_free = Column(Integer, default=0)
    cigarettes_smoked = Column(Integer, default=0)
    cigarettes_not_smoked = Column(Integer, default=0)
    money_saved = Column(Float, default=0.0)
    life_regained_hours = Column(Float, default=0.0)
    nicotine_not_consumed_mg = Column(Float, default=0.0)
    last_calculated = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="stats")

class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String)
    tier = Column(String, default="bronze")  # bronze / silver / gold / platinum
    requirement_type = Column(String, nullable=False)  # days_streak / cravings_resisted / sessions_completed
    requirement_value = Column(Integer, default=0)

class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_id_achievement_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    achievement_id = Column(Integer, ForeignKey("achievements.id"), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="achievements")
    achievement = relationship("Achievement")

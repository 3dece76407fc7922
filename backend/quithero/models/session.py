# quithero/models/session.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base

class UserSession(Base):
    """Прохождение одного дня программы. Одна строка на (пользователь, день)."""
    __tablename__ = "user_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "day_number", name="uq_user_sessions_user_id_day_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)  # 1..10
    status = Column(String, nullable=False, default="not_started")  # not_started / in_progress / completed
    time_spent_minutes = Column(Integer, default=0)

    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="sessions")

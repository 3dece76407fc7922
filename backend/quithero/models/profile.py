# quithero/models/profile.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Float, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from .base import Base

class UserProfile(Base):
    """Анкета пользователя (заполняется на онбординге)"""
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    age = Column(Integer, nullable=True)
    gender = Column(String, nullable=True)
    language = Column(String, default="en")

    quit_date = Column(Date, nullable=True)  # None, пока онбординг не завершён
    daily_consumption = Column(Float, default=0.0)
    consumption_unit = Column(String, default="cigarettes")  # cigarettes / ml / grams

    smoking_triggers = Column(JSON, default=list)  # ["stress", "habit", ...]
    emotional_states = Column(JSON, default=list)  # ["bored", "lonely", ...]
    motivations = Column(JSON, default=list)
    quit_archetype = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="profile")

# quithero/models/craving.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base

class Craving(Base):
    """Журнал тяги и срывов. Записи только добавляются."""
    __tablename__ = "cravings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False, index=True)  # craving / slip
    trigger = Column(String, default="other")  # stress, boredom, social, habit, other
    intensity = Column(Integer, default=3)  # 1-5
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="cravings")

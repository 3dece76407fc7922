from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# Длина программы отказа, дней
PROGRAM_LENGTH_DAYS = 10


class SessionComplete(BaseModel):
    time_spent_minutes: int = Field(0, ge=0, le=24 * 60)


class SessionResponse(BaseModel):
    id: int
    day_number: int
    status: str
    time_spent_minutes: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionSummary(BaseModel):
    """Где пользователь находится в программе"""
    completed: int = 0
    total_days: int = PROGRAM_LENGTH_DAYS
    current_day: int = 1
    program_completed: bool = False
    # degraded: счётчик не получен, показаны значения по умолчанию
    degraded: bool = False

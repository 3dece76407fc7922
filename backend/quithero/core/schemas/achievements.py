# quithero/core/schemas/achievements.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quithero.core.schemas.progress import ProgressCalculation


class AchievementDefinition(BaseModel):
    id: Optional[int] = None
    key: str
    title: str
    description: Optional[str] = None
    tier: str = "bronze"
    requirement_type: str
    requirement_value: int = 0

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("requirement_value", mode="before")
    @classmethod
    def _non_negative(cls, v):
        if v in (None, ""):
            return 0
        return max(0, int(v))


class UnlockedAchievement(BaseModel):
    user_id: int
    achievement: AchievementDefinition
    unlocked_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnlockFailure(BaseModel):
    key: str
    error: str


class UnlockReport(BaseModel):
    """Итог проверки достижений: что открыли, что уже было, что не удалось"""
    unlocked: List[AchievementDefinition] = []
    duplicates: List[str] = []
    failed: List[UnlockFailure] = []
    warnings: List[str] = []

    @property
    def is_partial(self) -> bool:
        return bool(self.failed) and bool(self.unlocked)


class ProgressRefreshResponse(BaseModel):
    calculation: ProgressCalculation
    persisted: bool = False
    degraded: bool = False
    newly_unlocked: List[AchievementDefinition] = []
    failed_unlocks: List[UnlockFailure] = []
    warnings: List[str] = Field(default_factory=list)

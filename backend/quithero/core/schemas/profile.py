# quithero/core/schemas/profile.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date, datetime

from quithero.models.enums import (
    ConsumptionUnit,
    CravingTrigger,
    EmotionalState,
    Gender,
    QuitArchetype,
)
from quithero.core.schemas.progress import MAX_DAILY_CONSUMPTION, normalize_choice_list


class ProfileUpdate(BaseModel):
    """Частичное обновление анкеты: передаются только изменённые поля"""
    age: Optional[int] = Field(None, ge=10, le=120)
    gender: Optional[Gender] = None
    language: Optional[str] = Field(None, min_length=2, max_length=5)
    quit_date: Optional[date] = None
    daily_consumption: Optional[float] = Field(None, ge=0, le=MAX_DAILY_CONSUMPTION, description="Units per day before quitting")
    consumption_unit: Optional[ConsumptionUnit] = None
    smoking_triggers: Optional[List[CravingTrigger]] = None
    emotional_states: Optional[List[EmotionalState]] = None
    motivations: Optional[List[str]] = None


class ProfileResponse(BaseModel):
    id: int
    user_id: int
    age: Optional[int] = None
    gender: Optional[str] = None
    language: Optional[str] = None
    quit_date: Optional[date] = None
    daily_consumption: float = 0.0
    consumption_unit: Optional[str] = None
    smoking_triggers: List[str] = []
    emotional_states: List[str] = []
    motivations: List[str] = []
    quit_archetype: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("smoking_triggers", "emotional_states", mode="before")
    @classmethod
    def _normalize_lists(cls, v):
        return normalize_choice_list(v)

    @field_validator("motivations", mode="before")
    @classmethod
    def _motivations_default(cls, v):
        return v or []

    @field_validator("daily_consumption", mode="before")
    @classmethod
    def _consumption_default(cls, v):
        return 0.0 if v is None else v


class ArchetypeInfo(BaseModel):
    archetype: QuitArchetype
    name: str
    description: str
    icon: str
    characteristics: List[str]


class ArchetypeResponse(BaseModel):
    archetype: QuitArchetype
    info: ArchetypeInfo

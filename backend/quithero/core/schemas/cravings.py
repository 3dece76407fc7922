# quithero/core/schemas/cravings.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from quithero.models.enums import CravingTrigger, CravingType


class CravingCreate(BaseModel):
    type: CravingType = Field(CravingType.CRAVING, description="craving (resisted) or slip (smoked)")
    trigger: CravingTrigger = CravingTrigger.OTHER
    intensity: int = Field(3, ge=1, le=5)
    notes: Optional[str] = Field(None, max_length=2000)


class CravingResponse(BaseModel):
    id: int
    type: str
    trigger: Optional[str] = None
    intensity: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TriggerBreakdownItem(BaseModel):
    name: str
    value: int


class CravingCounts(BaseModel):
    cravings: int = 0
    slips: int = 0

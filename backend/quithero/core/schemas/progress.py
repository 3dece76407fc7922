# quithero/core/schemas/progress.py
import json
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quithero.core.config import ProgressConfig

# Верхняя граница привычного потребления в день (единиц)
MAX_DAILY_CONSUMPTION = 1000.0


def normalize_choice_list(value: Any) -> List[str]:
    """Приводит сохранённый набор значений к списку строк.

    В базе встречаются разные формы одного и того же поля: список,
    строка через запятую, JSON-строка, {"values": [...]}
    и {"options": {"values": [...]}}.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw.startswith("[") or raw.startswith("{"):
            try:
                return normalize_choice_list(json.loads(raw))
            except json.JSONDecodeError:
                pass
        items = raw.split(",")
    elif isinstance(value, dict):
        if "values" in value:
            return normalize_choice_list(value["values"])
        options = value.get("options")
        if isinstance(options, dict):
            return normalize_choice_list(options.get("values"))
        return []
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        items = [value]

    result: List[str] = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("value")
        if item is None:
            continue
        text = str(getattr(item, "value", item)).strip().lower()
        if text and text not in result:
            result.append(text)
    return result


def to_calendar_date(value: Any) -> Optional[date]:
    """Отбрасывает время суток: datetime/ISO-строка -> date"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


class ProgressRates(BaseModel):
    """Коэффициенты расчёта на одну единицу (сигарету)"""
    price_per_unit: float = Field(8.0, ge=0)
    minutes_per_unit: float = Field(11.0, ge=0)
    nicotine_mg_per_unit: float = Field(0.8, ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_config(cls, config: ProgressConfig) -> "ProgressRates":
        return cls(
            price_per_unit=config.PRICE_PER_UNIT,
            minutes_per_unit=config.MINUTES_PER_UNIT,
            nicotine_mg_per_unit=config.NICOTINE_MG_PER_UNIT,
        )


class ProfileData(BaseModel):
    """Нормализованный профиль, с которым работает расчёт"""
    user_id: int
    quit_date: Optional[date] = None
    daily_consumption: float = 0.0
    smoking_triggers: List[str] = []
    emotional_states: List[str] = []
    quit_archetype: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("quit_date", mode="before")
    @classmethod
    def _truncate_quit_date(cls, v):
        return to_calendar_date(v)

    @field_validator("daily_consumption", mode="before")
    @classmethod
    def _consumption_default(cls, v):
        return 0.0 if v in (None, "") else v

    @field_validator("smoking_triggers", "emotional_states", mode="before")
    @classmethod
    def _normalize_lists(cls, v):
        return normalize_choice_list(v)


class ProgressCalculation(BaseModel):
    days_smoke_free: int = 0
    cigarettes_smoked: int = 0
    cigarettes_not_smoked: int = 0
    money_saved: float = 0.0
    life_regained_hours: float = 0.0
    nicotine_not_consumed_mg: float = 0.0

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @classmethod
    def zero(cls) -> "ProgressCalculation":
        return cls()


class StatsData(ProgressCalculation):
    """Сохранённый снимок прогресса"""
    user_id: int
    last_calculated: Optional[datetime] = None

    def as_calculation(self) -> ProgressCalculation:
        return ProgressCalculation(**self.model_dump(exclude={"user_id", "last_calculated"}))


class ProgressStatsResponse(ProgressCalculation):
    last_calculated: Optional[datetime] = None

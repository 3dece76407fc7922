# quithero/services/progress_calculator.py
"""
Расчёт прогресса по дате отказа и привычному потреблению.

Чистые функции: без обращений к базе, одинаковый результат на одинаковых
входных данных. Некорректные значения не вызывают исключений: всё, что
видит пользователь, ограничено снизу нулём.
"""
import math
from datetime import date, datetime
from typing import Optional, Union

from quithero.core.schemas.progress import (
    MAX_DAILY_CONSUMPTION,
    ProfileData,
    ProgressCalculation,
    ProgressRates,
    to_calendar_date,
)

DEFAULT_RATES = ProgressRates()


def days_between(quit_date: Optional[date], as_of: Union[date, datetime]) -> int:
    """Полных дней без курения на дату as_of (время суток отбрасывается)"""
    if quit_date is None:
        return 0
    start = to_calendar_date(quit_date)
    end = to_calendar_date(as_of)
    return max(0, (end - start).days)


def calculate_progress(
    profile: Optional[ProfileData],
    slip_count: int,
    as_of: Union[date, datetime],
    rates: ProgressRates = DEFAULT_RATES,
) -> ProgressCalculation:
    if profile is None or profile.quit_date is None:
        return ProgressCalculation.zero()

    days_smoke_free = days_between(profile.quit_date, as_of)
    cigarettes_smoked = max(0, int(slip_count or 0))
    daily_consumption = float(profile.daily_consumption or 0)
    if not math.isfinite(daily_consumption):
        daily_consumption = 0.0
    daily_consumption = min(max(0.0, daily_consumption), MAX_DAILY_CONSUMPTION)

    expected = math.floor(days_smoke_free * daily_consumption)
    cigarettes_not_smoked = max(0, expected - cigarettes_smoked)

    return ProgressCalculation(
        days_smoke_free=days_smoke_free,
        cigarettes_smoked=cigarettes_smoked,
        cigarettes_not_smoked=cigarettes_not_smoked,
        money_saved=round(cigarettes_not_smoked * rates.price_per_unit, 2),
        life_regained_hours=round(cigarettes_not_smoked * rates.minutes_per_unit / 60, 2),
        nicotine_not_consumed_mg=round(cigarettes_not_smoked * rates.nicotine_mg_per_unit, 2),
    )

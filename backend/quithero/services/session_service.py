# quithero/services/session_service.py
from quithero.core.result import Result
from quithero.core.schemas.sessions import PROGRAM_LENGTH_DAYS, SessionSummary
from quithero.repositories.record_store import RecordStore


def summarize_program(completed: int, total_days: int = PROGRAM_LENGTH_DAYS) -> SessionSummary:
    completed = max(0, min(completed, total_days))
    return SessionSummary(
        completed=completed,
        total_days=total_days,
        current_day=min(completed + 1, total_days),
        program_completed=completed >= total_days,
    )


async def get_program_summary(store: RecordStore, user_id: int) -> SessionSummary:
    """Положение в программе. Если счётчик недоступен, считаем с первого дня."""
    result = await Result.capture(store.count_completed_sessions(user_id), source="completed_sessions")
    summary = summarize_program(result.unwrap_or(0))
    if not result.ok:
        summary.degraded = True
    return summary

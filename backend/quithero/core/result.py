# quithero/core/result.py
import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from quithero.core.exceptions import DataUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Значение или DataUnavailable.

    Позволяет отличить «настоящий ноль» от «не смогли получить, подставили ноль».
    """
    value: Optional[T] = None
    error: Optional[DataUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DataUnavailable) -> "Result[T]":
        return cls(error=error)

    @classmethod
    async def capture(cls, awaitable: Awaitable[T], source: str = "") -> "Result[T]":
        """Выполняет запрос к хранилищу, превращая DataUnavailable в Result"""
        try:
            return cls.success(await awaitable)
        except DataUnavailable as e:
            if source and not e.source:
                e.source = source
            logger.warning(f"Data unavailable ({e.source or 'unknown'}): {e.detail}")
            return cls.failure(e)

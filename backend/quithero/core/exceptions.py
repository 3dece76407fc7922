# quithero/core/exceptions.py
from fastapi import status

class AppException(Exception):
    """Базовое исключение для приложения"""
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

class AuthenticationError(AppException):
    """Ошибка аутентификации"""
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)

class ValidationError(AppException):
    """Ошибка валидации данных"""
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, detail)

class NotFoundError(AppException):
    """Ресурс не найден"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)

class DataUnavailable(AppException):
    """Данные временно недоступны (хранилище не ответило).

    Расчёт прогресса и проверка достижений не пробрасывают это исключение
    наружу, а переходят на безопасные значения по умолчанию.
    """
    def __init__(self, detail: str = "Data unavailable", source: str = ""):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, detail)
        self.source = source

class RateLimitError(AppException):
    """Ошибка превышения лимита запросов"""
    def __init__(self, detail: str = "Too many requests"):
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, detail)

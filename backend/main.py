# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from sqlalchemy import text, make_url
from sqlalchemy.exc import SQLAlchemyError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging
from quithero.core.admin import setup_admin
from quithero.api.v1.routes import api_router
from quithero.api.v1.routes.auth import limiter
from quithero.core.config import settings
from quithero.core.database import db_helper
from quithero.core.exceptions import AppException
from quithero.models import Base
from quithero.repositories.achievement_repository import AchievementRepository

# Настройка логирования
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Контекстный менеджер для жизненного цикла приложения"""
    # Startup
    logger.info(f"🚀 Starting {settings.app_name} in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")

    # Маскируем пароль в URL для логов
    masked_db_url = make_url(settings.db.DATABASE_URL).render_as_string(hide_password=True)
    logger.info(f"📝 Database: {masked_db_url}")

    # Проверка подключения к базе данных при старте
    try:
        async with db_helper.session_factory() as session:
            await session.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise

    # Для SQLite миграции не гоняем: схема создаётся напрямую из моделей
    if settings.db.is_sqlite:
        async with db_helper.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.seed_achievements_on_startup:
        async with db_helper.session_factory() as session:
            inserted = await AchievementRepository(session).seed_defaults()
        if inserted:
            logger.info(f"🏆 Seeded {inserted} default achievements")

    setup_admin(app, db_helper.engine)

    yield

    # Shutdown
    await db_helper.dispose()
    logger.info("👋 Application shutdown complete")

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Настройка CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключение роутеров
app.include_router(api_router, prefix="/api/v1")

@app.get("/", summary="Root endpoint", tags=["root"])
async def root():
    """Корневой эндпоинт API"""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        } if settings.debug else None,
        "environment": "development" if settings.debug else "production",
        "timestamp": utc_now_iso()
    }

@app.get("/health", summary="Health check", tags=["health"])
async def health_check():
    """Проверка здоровья приложения"""
    try:
        async with db_helper.session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            db_value = result.scalar()

        return {
            "status": "healthy",
            "timestamp": utc_now_iso(),
            "environment": "development" if settings.debug else "production",
            "database": "connected",
            "database_ping": db_value,
            "app_name": settings.app_name,
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": utc_now_iso(),
                "database": "connection failed",
                "error": str(e) if settings.debug else "Database connection error"
            }
        )

# Глобальный обработчик исключений
@app.exception_handler(AppException)
async def app_exception_handler(request, exc: AppException):
    """Глобальный обработчик кастомных исключений"""
    logger.error(f"AppException: {exc.detail} (type: {type(exc).__name__})")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error": type(exc).__name__,
            "timestamp": utc_now_iso()
        }
    )

@app.exception_handler(Exception)
async def global_exception_handler(request, exc: Exception):
    """Глобальный обработчик всех исключений"""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": "InternalServerError",
            "timestamp": utc_now_iso(),
            "debug_info": str(exc) if settings.debug else None
        }
    )

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
        access_log=False  # Логи доступа лучше настраивать через Nginx или подобное
    )

# quithero/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, SecretStr
from typing import List, Optional
from functools import lru_cache


class DataBaseConfig(BaseModel):
    DB_HOST: str = Field("localhost", description="Database host")
    DB_PORT: int = Field(5432, description="Database port")
    DB_NAME: str = Field("quit_hero", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: SecretStr = Field(SecretStr("postgres"), description="Database password")  # SecretStr скрывает значение в логах
    DB_URL: Optional[str] = Field(None, description="Full SQLAlchemy URL, overrides host/port/name")
    DB_ECHO: bool = Field(False, description="Enable SQL echo")
    DB_POOL_SIZE: int = Field(5, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(10, description="Database max overflow")

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD.get_secret_value()}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    naming_convention: dict[str, str] = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


class SecurityConfig(BaseModel):
    JWT_SECRET_KEY: SecretStr = Field(..., description="JWT secret key")  # Обязательное поле!
    JWT_ALGORITHM: str = Field("HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, description="Access token expiration")
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7, description="Refresh token expiration")


class ProgressConfig(BaseModel):
    """Коэффициенты для расчёта прогресса (на одну сигарету / единицу)"""
    PRICE_PER_UNIT: float = Field(8.0, ge=0, description="Price of one unit in local currency")
    MINUTES_PER_UNIT: float = Field(11.0, ge=0, description="Minutes of life regained per unit not smoked")
    NICOTINE_MG_PER_UNIT: float = Field(0.8, ge=0, description="Nicotine per unit, mg")


class Settings(BaseSettings):
    app_name: str = Field("Quit Hero", description="Application name")
    debug: bool = Field(False, description="Debug mode")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
        ],
        description="CORS origins"
    )
    rate_limit_enabled: bool = Field(True, description="Enable slowapi rate limits")
    seed_achievements_on_startup: bool = Field(True, description="Seed default achievement catalog on startup")

    db: DataBaseConfig = Field(default_factory=DataBaseConfig)
    security: SecurityConfig
    progress: ProgressConfig = Field(default_factory=ProgressConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",  # Для вложенных объектов: DB__DB_HOST, PROGRESS__PRICE_PER_UNIT
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Кэшированный экземпляр настроек"""
    return Settings()


settings = get_settings()

from typing import Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Pharma Marketplace API"
    PROJECT_DESCRIPTION: str = "Marketplace backend for pharmacy and local-market orders"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DATABASE_URL: str | None = Field(None, description="Full async SQLAlchemy URL (overrides DB_* settings)")
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("marketplace", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout to acquire a pooled connection")

    # JWT Settings (tokens are issued by the identity service)
    JWT_SECRET_KEY: str = Field("change-me-in-production", description="Secret used to verify bearer tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Bearer token signing algorithm")

    # Razorpay Payment Gateway
    RAZORPAY_ENABLED: bool = Field(True, description="Open gateway orders for online payments")
    RAZORPAY_KEY_ID: str = Field("", description="Razorpay API key id")
    RAZORPAY_KEY_SECRET: str = Field("", description="Razorpay API key secret (also signs checkout payments)")
    RAZORPAY_WEBHOOK_SECRET: str = Field("", description="Secret used to sign Razorpay webhooks")
    RAZORPAY_BASE_URL: str = Field("https://api.razorpay.com/v1", description="Razorpay REST API base URL")
    RAZORPAY_TIMEOUT: float = Field(15.0, description="Timeout for Razorpay requests in seconds")
    PAYMENT_CURRENCY: str = Field("INR", description="ISO currency for gateway orders")

    # Notifications
    NOTIFICATIONS_ENABLED: bool = Field(True, description="Dispatch order lifecycle notifications")
    NOTIFICATION_WEBHOOK_URL: str | None = Field(None, description="Optional HTTP endpoint receiving notifications")
    NOTIFICATION_TIMEOUT: float = Field(5.0, description="Timeout for the notification webhook in seconds")

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    CORS_ORIGINS: str = Field("*", description="Comma-separated list of allowed CORS origins")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignorar campos extras en lugar de generar un error
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("PAYMENT_CURRENCY")
    @classmethod
    def validate_currency(cls, v):
        if len(v) != 3:
            raise ValueError("PAYMENT_CURRENCY must be a 3-letter ISO code")
        return v.upper()

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Construye la URL síncrona de PostgreSQL (usada por Alembic)"""
        if self.DATABASE_URL:
            return self.DATABASE_URL.replace("+asyncpg", "").replace("+aiosqlite", "")
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local", "test"]

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Lista de orígenes CORS permitidos"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @computed_field
    @property
    def razorpay_configured(self) -> bool:
        """Hay credenciales suficientes para hablar con Razorpay"""
        return self.RAZORPAY_ENABLED and bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)


# Singleton para configuración
_settings_instance = None


def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

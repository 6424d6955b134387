import logging
from typing import Any, AsyncGenerator
from urllib.parse import quote_plus

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from marketplace.config.settings import get_settings

logger = logging.getLogger(__name__)

# Configuración
settings = get_settings()


def get_async_database_url() -> str:
    """Construye la URL de la base de datos asíncrona"""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    host = settings.DB_HOST or "localhost"
    port = settings.DB_PORT or 5432
    user = settings.DB_USER or "postgres"
    database = settings.DB_NAME
    password = settings.DB_PASSWORD

    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    # Escapar caracteres especiales en credenciales
    encoded_user = quote_plus(user)

    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Crea el engine de base de datos asíncrono"""
    try:
        database_url = database_url or get_async_database_url()

        engine_config: dict[str, Any] = {"echo": settings.DB_ECHO}

        if database_url.startswith("sqlite"):
            # SQLite (tests / local tooling): sin configuración de pool
            logger.info("Creating async database engine for SQLite")
        elif settings.is_development:
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config.update(poolclass=NullPool, pool_pre_ping=True)
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config.update(
                pool_pre_ping=True,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


# Crear el engine asíncrono
async_engine = create_async_database_engine()

# Session maker asíncrono
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency para obtener la sesión de base de datos asíncrona
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Cierra las conexiones del pool al apagar la aplicación"""
    await async_engine.dispose()
    logger.info("Async database engine disposed")

"""
Application lifecycle management using modern FastAPI lifespan pattern.

This module follows SRP by handling only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from marketplace.config.settings import Settings, get_settings
from marketplace.database.async_db import async_engine, dispose_engine

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "change-me-in-production"


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup initialization and graceful shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize lifecycle manager."""
        self._settings = settings or get_settings()
        self._initialized = False

    async def startup(self) -> None:
        """
        Execute startup tasks.

        Called when the application starts.
        """
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()
        await self._verify_database()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """
        Execute shutdown tasks.

        Called when the application stops.
        """
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        await dispose_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Verify critical application configurations."""
        settings = self._settings

        if not settings.razorpay_configured:
            logger.warning("Razorpay not configured - online orders will be placed without a gateway order")

        if not settings.RAZORPAY_WEBHOOK_SECRET:
            logger.warning("RAZORPAY_WEBHOOK_SECRET not configured - every webhook will be rejected")

        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET and not settings.is_development:
            logger.error("JWT_SECRET_KEY uses the default value outside development")

        if not settings.NOTIFICATIONS_ENABLED:
            logger.info("Notifications are disabled via NOTIFICATIONS_ENABLED=False")

    async def _verify_database(self) -> None:
        """Verify the database is reachable."""
        try:
            async with async_engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
            logger.info("Database connectivity verified")
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    # Startup
    await lifecycle.startup()

    yield  # Application runs here

    # Shutdown
    await lifecycle.shutdown()

"""
Dependency Injection Container

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config.settings import Settings, get_settings
from marketplace.domains.ecommerce.application.ports import INotificationService, IPaymentGateway
from marketplace.domains.ecommerce.application.use_cases import (
    CancelOrderUseCase,
    CreateOrderUseCase,
    GetCustomerOrdersUseCase,
    GetOrderUseCase,
    GetVendorOrdersUseCase,
    HandlePaymentWebhookUseCase,
    UpdateOrderStatusUseCase,
    VerifyPaymentUseCase,
)
from marketplace.domains.ecommerce.domain.services import CatalogValidator, CommissionService
from marketplace.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyCatalogRepository,
    SQLAlchemyOrderRepository,
)
from marketplace.domains.ecommerce.infrastructure.services import (
    NotificationDispatcher,
    RazorpayPaymentGateway,
)

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container.

    Single Responsibility: Create and wire all application dependencies
    Singleton Pattern: One payment gateway and one notification dispatcher per container;
    repositories are bound to the request's database session.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        payment_gateway: IPaymentGateway | None = None,
        notification_service: INotificationService | None = None,
    ):
        """
        Initialize container.

        Args:
            settings: Application settings (uses default if not provided)
            payment_gateway: Optional gateway override
            notification_service: Optional notification service override
        """
        self.settings = settings or get_settings()

        # Singletons
        self._payment_gateway = payment_gateway
        self._notification_service = notification_service
        self._commission_service = CommissionService()
        self._catalog_validator = CatalogValidator()

        logger.info("DependencyContainer initialized")

    # ============================================================
    # SINGLETONS (Shared Resources)
    # ============================================================

    def get_payment_gateway(self) -> IPaymentGateway:
        """Get payment gateway instance (singleton)."""
        if self._payment_gateway is None:
            self._payment_gateway = RazorpayPaymentGateway(self.settings)
        return self._payment_gateway

    def get_notification_service(self) -> INotificationService:
        """Get notification dispatcher instance (singleton)."""
        if self._notification_service is None:
            self._notification_service = NotificationDispatcher.from_settings(self.settings)
        return self._notification_service

    # ============================================================
    # REPOSITORIES
    # ============================================================

    def create_order_repository(self, db: AsyncSession) -> SQLAlchemyOrderRepository:
        """Create Order Repository."""
        return SQLAlchemyOrderRepository(session=db)

    def create_catalog_repository(self, db: AsyncSession) -> SQLAlchemyCatalogRepository:
        """Create Catalog Repository."""
        return SQLAlchemyCatalogRepository(session=db)

    # ============================================================
    # USE CASES
    # ============================================================

    def create_create_order_use_case(self, db: AsyncSession) -> CreateOrderUseCase:
        """Create CreateOrderUseCase with dependencies."""
        return CreateOrderUseCase(
            order_repository=self.create_order_repository(db),
            catalog_repository=self.create_catalog_repository(db),
            payment_gateway=self.get_payment_gateway(),
            notification_service=self.get_notification_service(),
            catalog_validator=self._catalog_validator,
            commission_service=self._commission_service,
        )

    def create_update_order_status_use_case(self, db: AsyncSession) -> UpdateOrderStatusUseCase:
        """Create UpdateOrderStatusUseCase with dependencies."""
        return UpdateOrderStatusUseCase(
            order_repository=self.create_order_repository(db),
            notification_service=self.get_notification_service(),
        )

    def create_cancel_order_use_case(self, db: AsyncSession) -> CancelOrderUseCase:
        """Create CancelOrderUseCase with dependencies."""
        return CancelOrderUseCase(
            order_repository=self.create_order_repository(db),
            payment_gateway=self.get_payment_gateway(),
            notification_service=self.get_notification_service(),
        )

    def create_get_order_use_case(self, db: AsyncSession) -> GetOrderUseCase:
        """Create GetOrderUseCase with dependencies."""
        return GetOrderUseCase(order_repository=self.create_order_repository(db))

    def create_get_customer_orders_use_case(self, db: AsyncSession) -> GetCustomerOrdersUseCase:
        """Create GetCustomerOrdersUseCase with dependencies."""
        return GetCustomerOrdersUseCase(order_repository=self.create_order_repository(db))

    def create_get_vendor_orders_use_case(self, db: AsyncSession) -> GetVendorOrdersUseCase:
        """Create GetVendorOrdersUseCase with dependencies."""
        return GetVendorOrdersUseCase(order_repository=self.create_order_repository(db))

    def create_verify_payment_use_case(self, db: AsyncSession) -> VerifyPaymentUseCase:
        """Create VerifyPaymentUseCase with dependencies."""
        return VerifyPaymentUseCase(
            order_repository=self.create_order_repository(db),
            payment_gateway=self.get_payment_gateway(),
            notification_service=self.get_notification_service(),
        )

    def create_handle_payment_webhook_use_case(self, db: AsyncSession) -> HandlePaymentWebhookUseCase:
        """Create HandlePaymentWebhookUseCase with dependencies."""
        return HandlePaymentWebhookUseCase(
            order_repository=self.create_order_repository(db),
            payment_gateway=self.get_payment_gateway(),
            notification_service=self.get_notification_service(),
        )


# ============================================================
# GLOBAL CONTAINER INSTANCE
# ============================================================

_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """
    Get global container instance (singleton).

    Returns:
        DependencyContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer()

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None

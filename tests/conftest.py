"""
Shared pytest fixtures for all tests.

This module provides common fixtures for database sessions, mock ports,
principals and other shared testing utilities.
"""

import os
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Ensure test environment (before any marketplace import reads the settings)
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test-key-secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ.pop("NOTIFICATION_WEBHOOK_URL", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from marketplace.domains.ecommerce.domain.value_objects import Principal, UserRole  # noqa: E402
from marketplace.models.db.base import Base  # noqa: E402
from marketplace.models.db.catalog import Product as ProductModel  # noqa: E402
from marketplace.models.db.catalog import Vendor as VendorModel  # noqa: E402
from tests.utils.builders import ProductBuilder, VendorBuilder  # noqa: E402

# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine) -> async_sessionmaker:
    """Create async session factory (same options as the application)."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Fresh database session for each test."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest_asyncio.fixture
async def seeded_catalog(async_session_factory) -> dict:
    """
    Seed an approved pharmacy with two products, plus a second approved vendor.

    Returns the ids and prices tests need.
    """
    vendor_id, vendor_user_id = uuid4(), uuid4()
    other_vendor_id, other_vendor_user_id = uuid4(), uuid4()
    product_id, bulk_product_id, other_product_id = uuid4(), uuid4(), uuid4()

    async with async_session_factory() as session:
        session.add_all(
            [
                VendorModel(
                    id=vendor_id,
                    user_id=vendor_user_id,
                    business_name="Apollo Pharmacy",
                    vendor_type="PHARMACY",
                    status="APPROVED",
                ),
                VendorModel(
                    id=other_vendor_id,
                    user_id=other_vendor_user_id,
                    business_name="Green Market",
                    vendor_type="LOCAL_MARKET",
                    status="APPROVED",
                ),
            ]
        )
        await session.flush()
        session.add_all(
            [
                ProductModel(
                    id=product_id,
                    vendor_id=vendor_id,
                    name="Paracetamol 500mg",
                    price_min=Decimal("50.00"),
                    price_max=Decimal("150.00"),
                    min_order_quantity=1,
                    is_available=True,
                ),
                ProductModel(
                    id=bulk_product_id,
                    vendor_id=vendor_id,
                    name="Surgical Masks (box)",
                    price_min=Decimal("20.00"),
                    price_max=Decimal("40.00"),
                    min_order_quantity=5,
                    is_available=True,
                ),
                ProductModel(
                    id=other_product_id,
                    vendor_id=other_vendor_id,
                    name="Fresh Tomatoes 1kg",
                    price_min=Decimal("30.00"),
                    price_max=Decimal("60.00"),
                    min_order_quantity=1,
                    is_available=True,
                ),
            ]
        )
        await session.commit()

    return {
        "vendor_id": vendor_id,
        "vendor_user_id": vendor_user_id,
        "other_vendor_id": other_vendor_id,
        "other_vendor_user_id": other_vendor_user_id,
        "product_id": product_id,
        "bulk_product_id": bulk_product_id,
        "other_product_id": other_product_id,
    }


# ============================================================================
# PRINCIPAL FIXTURES
# ============================================================================


@pytest.fixture
def customer_principal() -> Principal:
    return Principal(user_id=uuid4(), role=UserRole.CUSTOMER, phone_number="+919876543210")


@pytest.fixture
def vendor_principal() -> Principal:
    return Principal(user_id=uuid4(), role=UserRole.VENDOR, vendor_id=uuid4())


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(user_id=uuid4(), role=UserRole.ADMIN)


# ============================================================================
# CATALOG FIXTURES
# ============================================================================


@pytest.fixture
def approved_vendor():
    """Approved pharmacy (16% commission tier)."""
    return VendorBuilder().approved().build()


@pytest.fixture
def product(approved_vendor):
    """Available product priced 50-150 with no minimum quantity."""
    return ProductBuilder().with_vendor(approved_vendor).with_price_range("50", "150").build()


# ============================================================================
# PORT FIXTURES
# ============================================================================


@pytest.fixture
def mock_order_repository():
    """Create a mock order ledger."""
    mock = AsyncMock()
    mock.get_by_id = AsyncMock(return_value=None)
    mock.find_by_gateway_order_id = AsyncMock(return_value=None)
    mock.attach_gateway_order = AsyncMock(return_value=None)
    mock.record_refund = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_catalog_repository():
    """Create a mock catalog reader."""
    mock = AsyncMock()
    mock.find_available_products = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_payment_gateway():
    """Create a mock payment gateway (sync and async methods)."""
    mock = MagicMock()
    mock.currency = "INR"
    mock.create_gateway_order = AsyncMock(return_value="order_RZP123")
    mock.initiate_refund = AsyncMock(return_value="rfnd_RZP123")
    mock.verify_signature = MagicMock(return_value=True)
    mock.parse_webhook = MagicMock()
    return mock


@pytest.fixture
def mock_notification_service():
    """Create a mock notification service."""
    mock = AsyncMock()
    mock.notify = AsyncMock(return_value=None)
    mock.notify_template = AsyncMock(return_value=None)
    return mock

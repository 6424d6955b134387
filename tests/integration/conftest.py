"""
Fixtures for API tests that run the whole stack against SQLite.

The Razorpay REST API is replaced by FakeRazorpay behind httpx.MockTransport;
notifications go to the shared AsyncMock.
"""

import json
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from marketplace.clients.razorpay_client import RazorpayClient
from marketplace.config.settings import get_settings
from marketplace.core.app_factory import create_app
from marketplace.core.container import DependencyContainer
from marketplace.database.async_db import get_async_db
from marketplace.domains.ecommerce.api import dependencies as deps
from marketplace.domains.ecommerce.domain.value_objects import Principal, UserRole
from marketplace.domains.ecommerce.infrastructure.services import RazorpayPaymentGateway


class FakeRazorpay:
    """Records Razorpay API calls and answers with fixed ids."""

    def __init__(self):
        self.requests: list[tuple[str, dict]] = []
        self.fail_orders = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        self.requests.append((request.url.path, body))
        if request.url.path.endswith("/orders"):
            if self.fail_orders:
                return httpx.Response(503)
            return httpx.Response(200, json={"id": "order_FLOW", "amount": body["amount"], "status": "created"})
        if request.url.path.endswith("/refund"):
            return httpx.Response(200, json={"id": "rfnd_FLOW", "amount": body.get("amount")})
        return httpx.Response(404)

    def calls_to(self, suffix: str) -> list[dict]:
        return [body for path, body in self.requests if path.endswith(suffix)]


@pytest.fixture
def razorpay() -> FakeRazorpay:
    return FakeRazorpay()


@pytest.fixture
def notifications(mock_notification_service):
    return mock_notification_service


@pytest_asyncio.fixture
async def client(async_session_factory, razorpay, notifications):
    settings = get_settings()
    transport = httpx.MockTransport(razorpay)
    gateway = RazorpayPaymentGateway(settings, client_factory=lambda: RazorpayClient(settings, transport=transport))
    container = DependencyContainer(settings, payment_gateway=gateway, notification_service=notifications)

    async def override_db():
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[deps.get_container] = lambda: container

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as http:
        yield http

    app.dependency_overrides.clear()


@pytest.fixture
def customer() -> Principal:
    return Principal(user_id=uuid4(), role=UserRole.CUSTOMER, phone_number="+919876543210")


@pytest.fixture
def vendor(seeded_catalog) -> Principal:
    return Principal(
        user_id=seeded_catalog["vendor_user_id"], role=UserRole.VENDOR, vendor_id=seeded_catalog["vendor_id"]
    )

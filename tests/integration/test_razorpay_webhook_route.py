"""Tests for POST /api/v1/webhooks/razorpay against the full stack."""

import httpx
import pytest

from marketplace.domains.ecommerce.domain.value_objects import Principal
from tests.utils.assertions import assert_error_envelope, assert_success_envelope
from tests.utils.factories import (
    auth_headers,
    create_payment_webhook_payload,
    create_refund_webhook_payload,
    sign_webhook,
)

pytestmark = pytest.mark.integration

WEBHOOK = "/api/v1/webhooks/razorpay"
ORDERS = "/api/v1/orders"


async def _place(client: httpx.AsyncClient, catalog: dict, customer: Principal) -> dict:
    body = {
        "items": [{"productId": str(catalog["product_id"]), "quantity": 2, "unitPrice": "100"}],
        "totalAmount": "200",
    }
    response = await client.post(ORDERS, json=body, headers=auth_headers(customer))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _deliver(client: httpx.AsyncClient, payload: bytes, signature: str | None = None) -> httpx.Response:
    headers = {"Content-Type": "application/json"}
    headers["X-Razorpay-Signature"] = signature if signature is not None else sign_webhook(payload)
    return await client.post(WEBHOOK, content=payload, headers=headers)


async def _detail(client: httpx.AsyncClient, order_id: str, customer: Principal) -> dict:
    response = await client.get(f"{ORDERS}/{order_id}", headers=auth_headers(customer))
    return response.json()["data"]


class TestRazorpayWebhookRoute:
    """Tests for webhook delivery handling."""

    @pytest.mark.asyncio
    async def test_payment_captured_confirms_order(self, client, seeded_catalog, customer) -> None:
        """Should settle the payment and confirm the order."""
        order = await _place(client, seeded_catalog, customer)

        response = await _deliver(client, create_payment_webhook_payload(gateway_order_id="order_FLOW"))

        assert response.status_code == 200
        body = response.json()
        assert_success_envelope(body, "Webhook processed")
        assert body["data"] == {"event": "payment.captured", "handled": True, "orderId": order["id"]}
        detail = await _detail(client, order["id"], customer)
        assert detail["status"] == "CONFIRMED"
        assert detail["payment"]["status"] == "SUCCESS"

    @pytest.mark.asyncio
    async def test_duplicate_delivery_is_idempotent(self, client, seeded_catalog, customer, notifications) -> None:
        order = await _place(client, seeded_catalog, customer)
        payload = create_payment_webhook_payload(gateway_order_id="order_FLOW")

        await _deliver(client, payload)
        await _deliver(client, payload)

        detail = await _detail(client, order["id"], customer)
        assert detail["status"] == "CONFIRMED"
        templates = [call.args[1] for call in notifications.notify_template.await_args_list]
        assert templates.count("PAYMENT_SUCCESS") == 1

    @pytest.mark.asyncio
    async def test_payment_failed_cancels_order(self, client, seeded_catalog, customer) -> None:
        order = await _place(client, seeded_catalog, customer)

        response = await _deliver(
            client,
            create_payment_webhook_payload(
                event="payment.failed",
                gateway_order_id="order_FLOW",
                error_description="Payment declined by bank",
            ),
        )

        assert response.json()["data"]["handled"] is True
        detail = await _detail(client, order["id"], customer)
        assert detail["status"] == "CANCELLED"
        assert detail["payment"]["status"] == "FAILED"

    @pytest.mark.asyncio
    async def test_capture_after_cancel_is_refunded(self, client, seeded_catalog, customer, razorpay) -> None:
        """Should keep the order cancelled and refund a late capture."""
        order = await _place(client, seeded_catalog, customer)
        await client.patch(f"{ORDERS}/{order['id']}/cancel", headers=auth_headers(customer))

        await _deliver(client, create_payment_webhook_payload(gateway_order_id="order_FLOW"))

        detail = await _detail(client, order["id"], customer)
        assert detail["status"] == "CANCELLED"
        assert detail["payment"]["status"] == "REFUNDED"
        assert len(razorpay.calls_to("/refund")) == 1

    @pytest.mark.asyncio
    async def test_refund_processed(self, client, seeded_catalog, customer) -> None:
        order = await _place(client, seeded_catalog, customer)
        await _deliver(client, create_payment_webhook_payload(gateway_order_id="order_FLOW"))
        await client.patch(f"{ORDERS}/{order['id']}/cancel", headers=auth_headers(customer))

        response = await _deliver(client, create_refund_webhook_payload(refund_id="rfnd_FLOW", amount=20000))

        assert response.status_code == 200
        assert response.json()["data"]["handled"] is True

    @pytest.mark.asyncio
    async def test_refund_with_non_numeric_amount(self, client) -> None:
        """Should answer 400 instead of failing on a signed but malformed refund."""
        payload = create_refund_webhook_payload().replace(b'"amount": 20000', b'"amount": "abc"')

        response = await _deliver(client, payload)

        assert response.status_code == 400
        assert_error_envelope(response.json(), "Malformed webhook payload")

    @pytest.mark.asyncio
    async def test_unknown_order_is_acknowledged(self, client) -> None:
        response = await _deliver(client, create_payment_webhook_payload(gateway_order_id="order_UNKNOWN"))

        assert response.status_code == 200
        assert_success_envelope(response.json(), "Webhook ignored")
        assert response.json()["data"]["handled"] is False

    @pytest.mark.asyncio
    async def test_unsupported_event_is_acknowledged(self, client) -> None:
        response = await _deliver(client, create_payment_webhook_payload(event="payment.authorized"))

        assert response.status_code == 200
        assert response.json()["data"] == {"event": "payment.authorized", "handled": False, "orderId": None}

    @pytest.mark.asyncio
    async def test_bad_signature(self, client, seeded_catalog, customer) -> None:
        """Should reject a forged delivery with 400 and leave the order untouched."""
        order = await _place(client, seeded_catalog, customer)

        response = await _deliver(client, create_payment_webhook_payload(gateway_order_id="order_FLOW"), "0" * 64)

        assert response.status_code == 400
        assert_error_envelope(response.json(), "Invalid webhook signature")
        assert (await _detail(client, order["id"], customer))["status"] == "PENDING"

    @pytest.mark.asyncio
    async def test_missing_signature(self, client) -> None:
        payload = create_payment_webhook_payload()

        response = await client.post(WEBHOOK, content=payload, headers={"Content-Type": "application/json"})

        assert response.status_code == 400

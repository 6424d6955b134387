"""
Razorpay API Client

Async client for Razorpay payment processing using HTTP Basic auth.
Amounts travel in the smallest currency unit (paise for INR).

Connection Details:
    - Base URL: https://api.razorpay.com/v1
    - Auth: Basic (key_id:key_secret)

Endpoints:
    - POST /orders - Create gateway order
    - POST /payments/{id}/refund - Refund a captured payment

Documentation:
    - https://razorpay.com/docs/api/
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from marketplace.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class RazorpayError(Exception):
    """
    Base exception for Razorpay errors.

    Attributes:
        error_code: Machine-readable error code
        error_message: Human-readable error description
    """

    def __init__(self, error_code: str, error_message: str):
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(f"{error_code}: {error_message}")


class RazorpayAuthError(RazorpayError):
    """Authentication error (invalid key id or secret)."""

    def __init__(self, message: str = "Invalid API credentials"):
        super().__init__("AUTH_ERROR", message)


class RazorpayConnectionError(RazorpayError):
    """Network connectivity issues."""

    def __init__(self, message: str):
        super().__init__("CONNECTION_ERROR", message)


class RazorpayValidationError(RazorpayError):
    """Request validation error."""

    def __init__(self, message: str):
        super().__init__("VALIDATION_ERROR", message)


class RazorpayClient:
    """
    Async HTTP client for Razorpay API.

    Environment Variables:
        RAZORPAY_ENABLED: Enable/disable Razorpay integration
        RAZORPAY_KEY_ID: API key id
        RAZORPAY_KEY_SECRET: API key secret
        RAZORPAY_BASE_URL: API base URL (default: https://api.razorpay.com/v1)
        RAZORPAY_TIMEOUT: Request timeout in seconds (default: 15)

    Example:
        async with RazorpayClient() as client:
            order = await client.create_order(
                amount=20000,
                currency="INR",
                receipt="ORD-LZ3K8Q1A-4F9XQ2",
            )
            # order["id"] is the gateway order id (order_...)
    """

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize Razorpay client with settings."""
        settings = settings or get_settings()

        if not settings.RAZORPAY_ENABLED:
            logger.warning("RazorpayClient initialized but RAZORPAY_ENABLED=false")

        self._key_id = settings.RAZORPAY_KEY_ID
        self._key_secret = settings.RAZORPAY_KEY_SECRET
        self._base_url = settings.RAZORPAY_BASE_URL
        self._timeout = settings.RAZORPAY_TIMEOUT
        self._enabled = settings.RAZORPAY_ENABLED
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not (self._key_id and self._key_secret):
            logger.error("RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET not configured")

    async def __aenter__(self) -> RazorpayClient:
        """Enter async context and create HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=(self._key_id or "", self._key_secret or ""),
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context and close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Create a gateway order (pending charge).

        Args:
            amount: Amount in the smallest currency unit (paise)
            currency: ISO currency code
            receipt: Your internal reference, shown in the dashboard
            notes: Key/value pairs echoed back in webhooks

        Returns:
            Razorpay order object (id, amount, currency, status, ...)

        Raises:
            RazorpayAuthError: Invalid credentials
            RazorpayValidationError: Invalid request parameters
            RazorpayConnectionError: Network error
        """
        if amount <= 0:
            raise RazorpayValidationError("Amount must be greater than zero")

        payload: dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt[:40],
            "notes": notes or {},
        }

        logger.info(f"Creating Razorpay order: amount={amount}, receipt={receipt}")
        data = await self._request("POST", "/orders", json=payload)
        logger.info(f"Razorpay order created: {data.get('id')}")
        return data

    async def create_refund(
        self,
        payment_id: str,
        amount: int | None = None,
        notes: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Refund a captured payment (full refund when amount is omitted).

        Returns:
            Razorpay refund object (id, amount, payment_id, status, ...)
        """
        payload: dict[str, Any] = {"notes": notes or {}}
        if amount is not None:
            payload["amount"] = amount

        logger.info(f"Creating Razorpay refund: payment={payment_id}, amount={amount}")
        data = await self._request("POST", f"/payments/{payment_id}/refund", json=payload)
        logger.info(f"Razorpay refund created: {data.get('id')}")
        return data

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._client:
            raise RazorpayError("CLIENT_NOT_INITIALIZED", "Client not initialized. Use 'async with' context.")

        try:
            response = await self._client.request(method, path, **kwargs)

            if response.status_code == 401:
                raise RazorpayAuthError("Invalid or revoked API key")

            if response.status_code == 400:
                raise RazorpayValidationError(self._error_description(response))

            if response.status_code == 404:
                raise RazorpayError("NOT_FOUND", f"{path} not found")

            response.raise_for_status()
            return response.json()

        except httpx.ConnectError as e:
            logger.error(f"Razorpay connection error: {e}")
            raise RazorpayConnectionError(f"Could not connect to Razorpay: {e}") from e

        except httpx.TimeoutException as e:
            logger.error(f"Razorpay timeout error: {e}")
            raise RazorpayConnectionError(f"Razorpay request timed out: {e}") from e

        except httpx.HTTPStatusError as e:
            logger.error(f"Razorpay HTTP error: {e}")
            raise RazorpayError("HTTP_ERROR", f"Razorpay returned {e.response.status_code}") from e

    @staticmethod
    def _error_description(response: httpx.Response) -> str:
        try:
            error = response.json().get("error") or {}
        except ValueError:
            return "Validation error"
        return error.get("description") or "Validation error"

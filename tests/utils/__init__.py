"""Test utilities and helpers."""

from tests.utils.assertions import (
    assert_error_envelope,
    assert_lines_follow_order,
    assert_money_conserved,
    assert_success_envelope,
)
from tests.utils.builders import (
    OrderBuilder,
    ProductBuilder,
    VendorBuilder,
)
from tests.utils.factories import (
    auth_headers,
    checkout_signature,
    create_access_token,
    create_payment_webhook_payload,
    create_refund_webhook_payload,
    sign_webhook,
)

__all__ = [
    # Builders
    "VendorBuilder",
    "ProductBuilder",
    "OrderBuilder",
    # Factories
    "create_access_token",
    "auth_headers",
    "checkout_signature",
    "create_payment_webhook_payload",
    "create_refund_webhook_payload",
    "sign_webhook",
    # Assertions
    "assert_success_envelope",
    "assert_error_envelope",
    "assert_money_conserved",
    "assert_lines_follow_order",
]

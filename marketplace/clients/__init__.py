"""
Clientes para APIs externas
"""

from .razorpay_client import (
    RazorpayAuthError,
    RazorpayClient,
    RazorpayConnectionError,
    RazorpayError,
    RazorpayValidationError,
)

__all__ = [
    "RazorpayClient",
    "RazorpayError",
    "RazorpayAuthError",
    "RazorpayConnectionError",
    "RazorpayValidationError",
]

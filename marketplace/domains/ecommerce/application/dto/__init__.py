"""
E-commerce Application DTOs

Data carriers shared between use cases and the ports they call.
"""

import math
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from marketplace.domains.ecommerce.domain.entities import Order

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    """Normalized pagination parameters."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def create(cls, page: int | None = None, limit: int | None = None) -> "PageRequest":
        """Clamp raw values to a valid page (page >= 1, 1 <= limit <= 100)."""
        page = max(page or DEFAULT_PAGE, 1)
        limit = min(max(limit or DEFAULT_LIMIT, 1), MAX_LIMIT)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class OrderPage:
    """One page of orders plus the pagination meta."""

    orders: list[Order]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def meta(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass
class SettlementResult:
    """Outcome of recording a gateway payment event against an order."""

    order: Order
    payment_updated: bool = False
    status_changed: bool = False


@dataclass
class CustomerInfo:
    """Customer details forwarded to the payment gateway."""

    customer_id: UUID
    phone_number: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookEvent:
    """Verified and parsed payment gateway webhook."""

    event: str
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    refund_id: str | None = None
    order_id: UUID | None = None
    amount: Decimal | None = None
    error_description: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "PageRequest",
    "OrderPage",
    "SettlementResult",
    "CustomerInfo",
    "WebhookEvent",
]

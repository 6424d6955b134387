"""
Catalog Validator for E-commerce Domain

Checks a cart against live catalog state before an order is placed.
Validation is all-or-nothing: the first violated rule fails the whole cart.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from marketplace.core.domain import (
    BusinessRuleViolationException,
    Money,
    ValidationException,
    round_money,
)

from ..entities.order import OrderLine
from ..entities.product import Product, Vendor

TOTAL_TOLERANCE = Decimal("0.01")


@dataclass
class CartItem:
    """One requested line as submitted by the customer."""

    product_id: UUID
    quantity: int
    unit_price: Decimal
    requires_delivery: bool = False
    delivery_address: str | None = None


@dataclass
class ValidatedCart:
    """Cart that passed every catalog rule, ready to become an order."""

    vendor: Vendor
    lines: list[OrderLine] = field(default_factory=list)
    total_amount: Decimal = field(default_factory=lambda: Decimal("0"))


class CatalogValidator:
    """
    Domain service validating a cart against the products it references.

    Rules, in order:
    1. Every product exists and is available
    2. All products belong to the same vendor
    3. The vendor is approved
    4. Each line meets the minimum order quantity and the price range
    5. The computed total matches the declared total within 0.01
    """

    def __init__(self, total_tolerance: Decimal = TOTAL_TOLERANCE):
        self.total_tolerance = total_tolerance

    def validate(
        self,
        items: list[CartItem],
        declared_total: Decimal,
        available_products: list[Product],
    ) -> ValidatedCart:
        """
        Validate a cart.

        Args:
            items: Requested lines
            declared_total: Total the client computed
            available_products: Products resolved by the catalog store

        Returns:
            ValidatedCart with priced order lines

        Raises:
            ValidationException: If the cart is empty or a line is malformed
            BusinessRuleViolationException: On the first violated catalog rule
        """
        if not items:
            raise ValidationException("Order must contain at least one item", field="items")

        products = self._resolve_products(items, available_products)
        vendor = self._resolve_vendor(products)

        lines: list[OrderLine] = []
        for item in items:
            product = products[item.product_id]
            self._check_line(item, product)
            lines.append(
                OrderLine.create(
                    product_id=item.product_id,
                    product_name=product.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    requires_delivery=item.requires_delivery,
                    delivery_address=item.delivery_address,
                )
            )

        calculated_total = round_money(sum((line.total_amount for line in lines), Decimal("0")))
        self._check_total(calculated_total, declared_total)

        return ValidatedCart(vendor=vendor, lines=lines, total_amount=calculated_total)

    def _resolve_products(self, items: list[CartItem], available_products: list[Product]) -> dict[UUID, Product]:
        requested_ids = {item.product_id for item in items}
        products = {
            product.id: product
            for product in available_products
            if product.id in requested_ids and product.is_available
        }

        missing = requested_ids - products.keys()
        if missing:
            raise BusinessRuleViolationException(
                rule="PRODUCT_UNAVAILABLE",
                message="Some products are not available",
                details={"product_ids": sorted(str(product_id) for product_id in missing)},
            )
        return products

    def _resolve_vendor(self, products: dict[UUID, Product]) -> Vendor:
        vendor_ids = {product.vendor_id for product in products.values()}
        if len(vendor_ids) > 1:
            raise BusinessRuleViolationException(
                rule="MULTI_VENDOR_ORDER",
                message="Cannot order from multiple vendors in one order",
                details={"vendor_ids": sorted(str(vendor_id) for vendor_id in vendor_ids)},
            )

        vendor = next(iter(products.values())).vendor
        if vendor is None or vendor.id is None:
            raise BusinessRuleViolationException(
                rule="INVALID_VENDOR_DATA",
                message="Product vendor information is incomplete",
            )

        if not vendor.is_approved():
            raise BusinessRuleViolationException(
                rule="VENDOR_NOT_APPROVED",
                message="Vendor is not approved",
                details={"vendor_id": str(vendor.id), "status": vendor.status.value},
            )
        return vendor

    def _check_line(self, item: CartItem, product: Product) -> None:
        if item.quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")
        if item.unit_price <= 0:
            raise ValidationException("Unit price must be positive", field="unitPrice")

        if not product.accepts_quantity(item.quantity):
            raise BusinessRuleViolationException(
                rule="BELOW_MIN_ORDER_QUANTITY",
                message=f"Minimum order quantity for {product.name} is {product.min_order_quantity}",
                details={"product_id": str(product.id), "min_order_quantity": product.min_order_quantity},
            )

        if not product.accepts_price(round_money(item.unit_price)):
            raise BusinessRuleViolationException(
                rule="PRICE_OUT_OF_RANGE",
                message=(
                    f"Invalid price for {product.name}. Price should be between "
                    f"{Money(product.price_min)} and {Money(product.price_max)}"
                ),
                details={
                    "product_id": str(product.id),
                    "price_min": str(product.price_min),
                    "price_max": str(product.price_max),
                },
            )

    def _check_total(self, calculated_total: Decimal, declared_total: Decimal) -> None:
        if abs(calculated_total - round_money(declared_total)) > self.total_tolerance:
            raise BusinessRuleViolationException(
                rule="TOTAL_AMOUNT_MISMATCH",
                message="Total amount mismatch",
                details={
                    "calculated_total": str(calculated_total),
                    "declared_total": str(declared_total),
                },
            )

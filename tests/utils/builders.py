"""
Test data builders using the Builder pattern.

Provides fluent interfaces for constructing domain objects with sensible defaults.
"""

from decimal import Decimal
from uuid import UUID, uuid4

from marketplace.domains.ecommerce.domain.entities import Order, OrderLine, Product, Vendor
from marketplace.domains.ecommerce.domain.value_objects import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    VendorStatus,
    VendorType,
)


class VendorBuilder:
    """Builder for creating vendor test data."""

    def __init__(self):
        self._id = uuid4()
        self._user_id = uuid4()
        self._business_name = "Apollo Pharmacy"
        self._vendor_type = VendorType.PHARMACY
        self._status = VendorStatus.PENDING

    def with_id(self, vendor_id: UUID) -> "VendorBuilder":
        """Set vendor ID."""
        self._id = vendor_id
        return self

    def with_type(self, vendor_type: VendorType) -> "VendorBuilder":
        """Set vendor category."""
        self._vendor_type = vendor_type
        return self

    def with_status(self, status: VendorStatus) -> "VendorBuilder":
        """Set approval status."""
        self._status = status
        return self

    def approved(self) -> "VendorBuilder":
        """Mark vendor as approved."""
        self._status = VendorStatus.APPROVED
        return self

    def local_market(self) -> "VendorBuilder":
        """Local market vendor (reduced commission tier)."""
        self._vendor_type = VendorType.LOCAL_MARKET
        return self

    def build(self) -> Vendor:
        """Build and return the vendor."""
        return Vendor(
            id=self._id,
            user_id=self._user_id,
            business_name=self._business_name,
            vendor_type=self._vendor_type,
            status=self._status,
        )


class ProductBuilder:
    """Builder for creating product test data."""

    def __init__(self):
        self._id = uuid4()
        self._name = "Paracetamol 500mg"
        self._price_min = Decimal("50.00")
        self._price_max = Decimal("150.00")
        self._min_order_quantity = 1
        self._is_available = True
        self._vendor: Vendor | None = None

    def with_id(self, product_id: UUID) -> "ProductBuilder":
        """Set product ID."""
        self._id = product_id
        return self

    def with_name(self, name: str) -> "ProductBuilder":
        """Set product name."""
        self._name = name
        return self

    def with_price_range(self, price_min: str, price_max: str) -> "ProductBuilder":
        """Set the accepted unit price range."""
        self._price_min = Decimal(price_min)
        self._price_max = Decimal(price_max)
        return self

    def with_min_order_quantity(self, quantity: int) -> "ProductBuilder":
        """Set minimum order quantity."""
        self._min_order_quantity = quantity
        return self

    def with_vendor(self, vendor: Vendor | None) -> "ProductBuilder":
        """Set owning vendor."""
        self._vendor = vendor
        return self

    def unavailable(self) -> "ProductBuilder":
        """Mark product as unavailable."""
        self._is_available = False
        return self

    def build(self) -> Product:
        """Build and return the product."""
        return Product(
            id=self._id,
            name=self._name,
            price_min=self._price_min,
            price_max=self._price_max,
            min_order_quantity=self._min_order_quantity,
            is_available=self._is_available,
            vendor=self._vendor if self._vendor is not None else VendorBuilder().approved().build(),
        )


class OrderBuilder:
    """Builder for creating persisted-looking orders."""

    def __init__(self):
        self._id = uuid4()
        self._customer_id = uuid4()
        self._vendor_id = uuid4()
        self._vendor_user_id = uuid4()
        self._lines = [(uuid4(), "Paracetamol 500mg", 2, Decimal("100.00"))]
        self._commission = Decimal("32.00")
        self._status = OrderStatus.PENDING
        self._payment_method = PaymentMethod.RAZORPAY
        self._payment_status = PaymentStatus.PENDING
        self._gateway_order_id: str | None = "order_RZP123"
        self._gateway_payment_id: str | None = None

    def with_customer(self, customer_id: UUID) -> "OrderBuilder":
        """Set owning customer."""
        self._customer_id = customer_id
        return self

    def with_vendor(self, vendor_id: UUID, vendor_user_id: UUID | None = None) -> "OrderBuilder":
        """Set receiving vendor."""
        self._vendor_id = vendor_id
        if vendor_user_id is not None:
            self._vendor_user_id = vendor_user_id
        return self

    def with_line(self, name: str, quantity: int, unit_price: str) -> "OrderBuilder":
        """Replace the lines with a single line."""
        self._lines = [(uuid4(), name, quantity, Decimal(unit_price))]
        return self

    def with_commission(self, commission: str) -> "OrderBuilder":
        """Set commission amount."""
        self._commission = Decimal(commission)
        return self

    def with_status(self, status: OrderStatus) -> "OrderBuilder":
        """Set order status (lines follow)."""
        self._status = status
        return self

    def with_gateway_order(self, gateway_order_id: str | None) -> "OrderBuilder":
        """Set the gateway order id on the payment."""
        self._gateway_order_id = gateway_order_id
        return self

    def paid(self, gateway_payment_id: str = "pay_RZP123") -> "OrderBuilder":
        """Payment captured."""
        self._payment_status = PaymentStatus.SUCCESS
        self._gateway_payment_id = gateway_payment_id
        return self

    def cash_on_delivery(self) -> "OrderBuilder":
        """Pay on delivery (no gateway order)."""
        self._payment_method = PaymentMethod.CASH_ON_DELIVERY
        self._gateway_order_id = None
        return self

    def build(self) -> Order:
        """Build and return the order."""
        lines = [
            OrderLine.create(product_id=product_id, product_name=name, quantity=quantity, unit_price=price)
            for product_id, name, quantity, price in self._lines
        ]
        order = Order.place(
            customer_id=self._customer_id,
            vendor_id=self._vendor_id,
            lines=lines,
            commission_amount=self._commission,
            payment_method=self._payment_method,
            vendor_user_id=self._vendor_user_id,
        )
        order.id = self._id
        order.status = self._status
        for line in order.lines:
            line.id = uuid4()
            line.order_id = order.id
            line.status = self._status

        assert order.payment is not None
        order.payment.id = uuid4()
        order.payment.order_id = order.id
        order.payment.status = self._payment_status
        order.payment.gateway_order_id = self._gateway_order_id
        order.payment.gateway_payment_id = self._gateway_payment_id
        return order

"""
Commission Service for E-commerce Domain

Computes the platform's cut of an order and the vendor's net amount.
"""

from dataclasses import dataclass
from decimal import Decimal

from marketplace.core.domain import Percentage, round_money

from ..value_objects.vendor import VendorType

# Commission tiers by vendor category (percentages)
COMMISSION_RATES: dict[VendorType, Decimal] = {
    VendorType.LOCAL_MARKET: Decimal("10.0"),
}
DEFAULT_COMMISSION_RATE = Decimal("16.0")


@dataclass(frozen=True)
class CommissionBreakdown:
    """Result of splitting an order total between platform and vendor."""

    total_amount: Decimal
    commission_rate: Decimal
    commission_amount: Decimal
    vendor_amount: Decimal


class CommissionService:
    """
    Domain service for commission calculations.

    Pure and deterministic. Negative amounts are the caller's responsibility.

    Example:
        ```python
        service = CommissionService()
        split = service.split(Decimal("200"), VendorType.PHARMACY)
        split.commission_amount  # Decimal("32.00")
        split.vendor_amount  # Decimal("168.00")
        ```
    """

    def rate_for(self, vendor_type: VendorType | str | None) -> Decimal:
        """Commission percentage for a vendor category."""
        if isinstance(vendor_type, str) and not isinstance(vendor_type, VendorType):
            try:
                vendor_type = VendorType.from_string(vendor_type)
            except ValueError:
                return DEFAULT_COMMISSION_RATE
        return COMMISSION_RATES.get(vendor_type, DEFAULT_COMMISSION_RATE)  # type: ignore[arg-type]

    def commission(self, amount: Decimal, vendor_type: VendorType | str | None) -> Decimal:
        """Platform commission on an amount, rounded to the cent."""
        rate = Percentage(self.rate_for(vendor_type))
        return round_money(rate.apply_to(round_money(amount)))

    def vendor_amount(self, total: Decimal, commission: Decimal) -> Decimal:
        """Vendor's net: total minus commission."""
        return round_money(total) - round_money(commission)

    def split(self, total: Decimal, vendor_type: VendorType | str | None) -> CommissionBreakdown:
        """Commission and vendor net for an order total; the two always add up to the total."""
        rounded_total = round_money(total)
        commission = self.commission(rounded_total, vendor_type)
        return CommissionBreakdown(
            total_amount=rounded_total,
            commission_rate=self.rate_for(vendor_type),
            commission_amount=commission,
            vendor_amount=self.vendor_amount(rounded_total, commission),
        )

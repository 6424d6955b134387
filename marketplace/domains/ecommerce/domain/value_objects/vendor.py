"""
Vendor Value Objects for E-commerce Domain

Vendor categories (which drive the commission tier) and approval states.
"""

from marketplace.core.domain import StatusEnum


class VendorType(StatusEnum):
    """Business category of a vendor."""

    PHARMACY = "PHARMACY"
    MEDICAL_STORE = "MEDICAL_STORE"
    HOSPITAL_PHARMACY = "HOSPITAL_PHARMACY"
    ONLINE_PHARMACY = "ONLINE_PHARMACY"
    WELLNESS_STORE = "WELLNESS_STORE"
    LOCAL_MARKET = "LOCAL_MARKET"
    OTHER = "OTHER"


class VendorStatus(StatusEnum):
    """Approval state of a vendor account."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"

    def can_accept_orders(self) -> bool:
        """Only approved vendors may receive orders."""
        return self is VendorStatus.APPROVED

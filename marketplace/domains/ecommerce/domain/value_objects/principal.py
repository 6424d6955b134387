"""
Principal Value Object

The authenticated caller as seen by the order workflow: a role plus the ids
it is scoped to. Credentials are verified upstream; the domain trusts it.
"""

from dataclasses import dataclass
from uuid import UUID

from marketplace.core.domain import StatusEnum, ValueObject


class UserRole(StatusEnum):
    """Marketplace user roles."""

    CUSTOMER = "CUSTOMER"
    VENDOR = "VENDOR"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Principal(ValueObject):
    """
    Capability token passed into every order operation.

    Example:
        ```python
        principal = Principal(user_id=user_id, role=UserRole.VENDOR, vendor_id=vendor_id)
        principal.is_vendor  # True
        ```
    """

    user_id: UUID
    role: UserRole
    vendor_id: UUID | None = None
    phone_number: str | None = None

    def _validate(self) -> None:
        if self.role is UserRole.VENDOR and self.vendor_id is None:
            raise ValueError("Vendor principals must carry a vendor_id")

    @property
    def is_customer(self) -> bool:
        return self.role is UserRole.CUSTOMER

    @property
    def is_vendor(self) -> bool:
        return self.role is UserRole.VENDOR

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self

CENT = Decimal("0.01")


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """Coerce a numeric value to Decimal going through str to avoid float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: int | float | str | Decimal) -> Decimal:
    """Round a monetary value to two decimals (half up)."""
    return to_decimal(value).quantize(CENT, ROUND_HALF_UP)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object for financial calculations.

    Example:
        ```python
        price = Money(amount=Decimal("99.99"))
        print(price)  # ₹99.99
        ```
    """

    amount: Decimal
    currency: str = "INR"

    def _validate(self) -> None:
        """Validate money constraints."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter ISO code")

    def to_minor_units(self) -> int:
        """Amount in the smallest currency unit (paise for INR)."""
        return int((self.amount * 100).quantize(Decimal("1"), ROUND_HALF_UP))

    def __str__(self) -> str:
        symbol = "₹" if self.currency == "INR" else f"{self.currency} "
        return f"{symbol}{self.amount:,.2f}"

    @classmethod
    def from_minor_units(cls, value: int, currency: str = "INR") -> "Money":
        """Create Money from the smallest currency unit."""
        return cls(amount=round_money(Decimal(value) / 100), currency=currency)


@dataclass(frozen=True)
class Percentage(ValueObject):
    """
    Percentage value object.

    Represents a percentage value (0-100).
    """

    value: Decimal
    min_value: Decimal = Decimal("0")
    max_value: Decimal = Decimal("100")

    def _validate(self) -> None:
        if not isinstance(self.value, Decimal):
            object.__setattr__(self, "value", to_decimal(self.value))
        if self.value < self.min_value or self.value > self.max_value:
            raise ValueError(f"Percentage must be between {self.min_value} and {self.max_value}")

    def as_decimal(self) -> Decimal:
        """Get percentage as decimal (0.0 - 1.0)."""
        return self.value / Decimal("100")

    def apply_to(self, amount: Decimal) -> Decimal:
        """Apply percentage to an amount."""
        return amount * self.as_decimal()

    def __str__(self) -> str:
        return f"{self.value}%"


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")

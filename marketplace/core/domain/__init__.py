"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from marketplace.core.domain.entities import (
    AggregateRoot,
    Entity,
)
from marketplace.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    InvalidStateTransitionException,
    PaymentException,
    ValidationException,
)
from marketplace.core.domain.value_objects import (
    CENT,
    Money,
    Percentage,
    StatusEnum,
    ValueObject,
    round_money,
    to_decimal,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "Money",
    "Percentage",
    "StatusEnum",
    "CENT",
    "round_money",
    "to_decimal",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InvalidOperationException",
    "InvalidStateTransitionException",
    "AuthorizationException",
    "PaymentException",
    "IntegrationException",
]

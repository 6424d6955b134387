"""
E-commerce Infrastructure Repositories

Repository implementations for data access.
All repositories implement the ports from marketplace.domains.ecommerce.application.ports
"""

from .catalog_repository import SQLAlchemyCatalogRepository
from .order_repository import SQLAlchemyOrderRepository

__all__ = [
    "SQLAlchemyCatalogRepository",
    "SQLAlchemyOrderRepository",
]

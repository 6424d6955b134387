"""
Catalog Repository Implementation

SQLAlchemy implementation of ICatalogRepository (read-only).
"""

import logging
from decimal import Decimal
from typing import Sequence, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.domains.ecommerce.application.ports import ICatalogRepository
from marketplace.domains.ecommerce.domain.entities import Product, Vendor
from marketplace.domains.ecommerce.domain.value_objects import VendorStatus, VendorType
from marketplace.models.db.catalog import Product as ProductModel
from marketplace.models.db.catalog import Vendor as VendorModel

logger = logging.getLogger(__name__)


class SQLAlchemyCatalogRepository(ICatalogRepository):
    """
    SQLAlchemy implementation of the catalog reader.

    Products and vendors are owned by the catalog side of the marketplace;
    this repository never writes them.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_available_products(self, product_ids: Sequence[UUID]) -> list[Product]:
        """Get available products by ID, with their vendor loaded."""
        if not product_ids:
            return []
        try:
            result = await self.session.execute(
                select(ProductModel)
                .options(selectinload(ProductModel.vendor))
                .where(ProductModel.id.in_(list(product_ids)))
                .where(ProductModel.is_available.is_(True))
            )
            models = result.scalars().all()
            return [self._to_entity(m) for m in models]
        except Exception as e:
            logger.error(f"Error finding available products {list(product_ids)}: {e}")
            raise

    # Mapping methods

    def _to_entity(self, model: ProductModel) -> Product:
        """Convert model to entity."""
        return Product(
            id=cast(UUID, model.id),
            name=cast(str, model.name),
            category=cast(str | None, model.category),
            price_min=cast(Decimal, model.price_min),
            price_max=cast(Decimal, model.price_max),
            min_order_quantity=cast(int, model.min_order_quantity),
            is_available=bool(model.is_available),
            vendor=self._vendor_to_entity(model.vendor) if model.vendor else None,
        )

    @staticmethod
    def _vendor_to_entity(model: VendorModel) -> Vendor:
        """Convert vendor model to entity. Unknown types map to OTHER, unknown statuses to PENDING."""
        try:
            vendor_type = VendorType(cast(str, model.vendor_type))
        except ValueError:
            vendor_type = VendorType.OTHER
        try:
            status = VendorStatus(cast(str, model.status))
        except ValueError:
            status = VendorStatus.PENDING

        return Vendor(
            id=cast(UUID, model.id),
            user_id=cast(UUID, model.user_id),
            business_name=cast(str, model.business_name),
            vendor_type=vendor_type,
            status=status,
        )

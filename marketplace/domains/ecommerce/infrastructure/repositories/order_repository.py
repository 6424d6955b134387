"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository (the order ledger).

Status changes lock the order row (SELECT ... FOR UPDATE), validate the
move on the entity and then apply a conditional UPDATE guarded by the
status that was read. Zero rows affected means another writer got there
first and the move is rejected as an invalid transition.
"""

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, cast

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    InvalidStateTransitionException,
    PaymentException,
    round_money,
)
from marketplace.domains.ecommerce.application.dto import OrderPage, PageRequest, SettlementResult
from marketplace.domains.ecommerce.application.ports import IOrderRepository
from marketplace.domains.ecommerce.domain.entities import Order, OrderLine, Payment
from marketplace.domains.ecommerce.domain.value_objects import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    VendorStatus,
)
from marketplace.models.db.catalog import Product as ProductModel
from marketplace.models.db.catalog import Vendor as VendorModel
from marketplace.models.db.orders import Order as OrderModel
from marketplace.models.db.orders import OrderItem as OrderItemModel
from marketplace.models.db.orders import Payment as PaymentModel

logger = logging.getLogger(__name__)


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of the order ledger.

    The only writer of orders, order lines and payments. Each public
    write method is one transaction: it commits on success and rolls
    back on any error.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, order: Order) -> Order:
        """
        Persist order, lines and payment in one transaction.

        Product availability and vendor approval are checked again inside
        the same transaction, right before the insert.
        """
        try:
            await self._recheck_catalog(order)
            model = self._to_model(order)
            self.session.add(model)
            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error creating order {order.order_number}: {e}")
            await self.session.rollback()
            raise

        created = await self.get_by_id(cast(uuid.UUID, model.id))
        if created is None:
            raise EntityNotFoundException("Order", model.id, message="Order not found")
        return created

    async def get_by_id(self, order_id: uuid.UUID) -> Order | None:
        """Get order by ID."""
        model = await self._load(order_id)
        return self._to_entity(model) if model else None

    async def find_by_gateway_order_id(self, gateway_order_id: str) -> Order | None:
        """Get order by the payment gateway's order id."""
        result = await self.session.execute(
            self._order_query()
            .join(PaymentModel, PaymentModel.order_id == OrderModel.id)
            .where(PaymentModel.gateway_order_id == gateway_order_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_customer(
        self, customer_id: uuid.UUID, page: PageRequest, status: OrderStatus | None = None
    ) -> OrderPage:
        """Orders placed by a customer, newest first."""
        return await self._list(OrderModel.customer_id == customer_id, page, status)

    async def list_for_vendor(
        self, vendor_id: uuid.UUID, page: PageRequest, status: OrderStatus | None = None
    ) -> OrderPage:
        """Orders received by a vendor, newest first."""
        return await self._list(OrderModel.vendor_id == vendor_id, page, status)

    # Status transitions

    async def transition_status(
        self,
        order_id: uuid.UUID,
        new_status: OrderStatus,
        vendor_id: uuid.UUID | None = None,
        notes: str | None = None,
    ) -> Order:
        """Move order and lines to a new status under a row lock."""
        try:
            order = await self._load_for_update(order_id)
            if vendor_id is not None and not order.is_owned_by_vendor(vendor_id):
                raise AuthorizationException("update_order_status", "order", str(vendor_id))

            previous = order.status
            order.transition_to(new_status)
            await self._apply_status(order_id, previous, new_status, notes=notes)
            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error updating status for order {order_id}: {e}")
            await self.session.rollback()
            raise

        return await self._reload(order_id)

    async def cancel(self, order_id: uuid.UUID, customer_id: uuid.UUID) -> Order:
        """Cancel an order on behalf of its customer under a row lock."""
        try:
            order = await self._load_for_update(order_id)
            if not order.is_owned_by_customer(customer_id):
                raise AuthorizationException("cancel_order", "order", str(customer_id))

            previous = order.status
            order.cancel()
            await self._apply_status(order_id, previous, OrderStatus.CANCELLED)
            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error cancelling order {order_id}: {e}")
            await self.session.rollback()
            raise

        return await self._reload(order_id)

    # Payment settlement

    async def attach_gateway_order(self, order_id: uuid.UUID, gateway_order_id: str) -> None:
        """Store the gateway order id on the payment record."""
        try:
            await self.session.execute(
                update(PaymentModel)
                .where(PaymentModel.order_id == order_id)
                .values(gateway_order_id=gateway_order_id, updated_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error attaching gateway order {gateway_order_id} to order {order_id}: {e}")
            await self.session.rollback()
            raise

    async def record_payment_success(
        self, order_id: uuid.UUID, gateway_payment_id: str, signature: str | None = None
    ) -> SettlementResult:
        """
        Mark the payment SUCCESS and confirm a pending order.

        Already captured or refunded payments are left untouched. A cancelled
        order keeps its status; the caller decides whether to refund.
        """
        try:
            model = await self._load(order_id, lock=True)
            if model is None:
                raise EntityNotFoundException("Order", order_id, message="Order not found")
            order = self._to_entity(model)
            payment = self._require_payment(order)

            if payment.status in (PaymentStatus.SUCCESS, PaymentStatus.REFUNDED):
                await self.session.rollback()
                return SettlementResult(order=order)

            payment.mark_success(gateway_payment_id, signature)
            self._copy_payment(payment, model.payment)

            status_changed = False
            if order.status is OrderStatus.PENDING:
                order.transition_to(OrderStatus.CONFIRMED)
                await self._apply_status(order_id, OrderStatus.PENDING, OrderStatus.CONFIRMED)
                status_changed = True

            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error recording payment success for order {order_id}: {e}")
            await self.session.rollback()
            raise

        return SettlementResult(order=await self._reload(order_id), payment_updated=True, status_changed=status_changed)

    async def record_payment_failure(self, order_id: uuid.UUID, reason: str | None = None) -> SettlementResult:
        """
        Mark the payment FAILED and cancel the order.

        Captured, refunded or already failed payments are left untouched.
        """
        try:
            model = await self._load(order_id, lock=True)
            if model is None:
                raise EntityNotFoundException("Order", order_id, message="Order not found")
            order = self._to_entity(model)
            payment = self._require_payment(order)

            if payment.status.is_settled():
                await self.session.rollback()
                return SettlementResult(order=order)

            payment.mark_failed(reason)
            self._copy_payment(payment, model.payment)

            status_changed = False
            if order.status.can_transition_to(OrderStatus.CANCELLED):
                previous = order.status
                order.transition_to(OrderStatus.CANCELLED)
                await self._apply_status(order_id, previous, OrderStatus.CANCELLED)
                status_changed = True

            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error recording payment failure for order {order_id}: {e}")
            await self.session.rollback()
            raise

        return SettlementResult(order=await self._reload(order_id), payment_updated=True, status_changed=status_changed)

    async def record_refund(self, order_id: uuid.UUID, refund_id: str, amount: Decimal) -> None:
        """Mark the payment REFUNDED with the gateway refund id."""
        try:
            result = await self.session.execute(
                update(PaymentModel)
                .where(PaymentModel.order_id == order_id)
                .values(
                    payment_status=PaymentStatus.REFUNDED.value,
                    refund_id=refund_id,
                    refund_amount=round_money(amount),
                    processed_at=datetime.now(UTC),
                    updated_at=datetime.now(UTC),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise EntityNotFoundException("Payment", order_id, message="Payment not found")
            await self.session.commit()
        except DomainException:
            await self.session.rollback()
            raise
        except Exception as e:
            logger.error(f"Error recording refund {refund_id} for order {order_id}: {e}")
            await self.session.rollback()
            raise

    async def mark_refund_processed(
        self,
        refund_id: str,
        amount: Decimal | None = None,
        gateway_payment_id: str | None = None,
    ) -> bool:
        """
        Confirm a refund reported by the gateway.

        The payment is matched by refund id, then by gateway payment id for
        refunds issued outside this service.
        """
        try:
            model = await self._find_payment(PaymentModel.refund_id == refund_id)
            if model is None and gateway_payment_id:
                model = await self._find_payment(PaymentModel.gateway_payment_id == gateway_payment_id)
            if model is None:
                return False

            model.payment_status = PaymentStatus.REFUNDED.value
            model.refund_id = refund_id
            if amount is not None:
                model.refund_amount = round_money(amount)
            elif model.refund_amount is None:
                model.refund_amount = model.total_amount
            model.processed_at = datetime.now(UTC)
            await self.session.commit()
            return True
        except Exception as e:
            logger.error(f"Error marking refund {refund_id} as processed: {e}")
            await self.session.rollback()
            raise

    # Helpers

    def _order_query(self):
        return select(OrderModel).options(
            selectinload(OrderModel.items),
            selectinload(OrderModel.payment),
            selectinload(OrderModel.vendor),
        )

    async def _load(self, order_id: uuid.UUID, lock: bool = False) -> OrderModel | None:
        stmt = self._order_query().where(OrderModel.id == order_id).execution_options(populate_existing=True)
        if lock:
            stmt = stmt.with_for_update(of=OrderModel)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_for_update(self, order_id: uuid.UUID) -> Order:
        model = await self._load(order_id, lock=True)
        if model is None:
            raise EntityNotFoundException("Order", order_id, message="Order not found")
        return self._to_entity(model)

    async def _reload(self, order_id: uuid.UUID) -> Order:
        order = await self.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundException("Order", order_id, message="Order not found")
        return order

    async def _find_payment(self, condition: Any) -> PaymentModel | None:
        result = await self.session.execute(select(PaymentModel).where(condition))
        return result.scalar_one_or_none()

    async def _list(self, condition: Any, page: PageRequest, status: OrderStatus | None) -> OrderPage:
        filters = [condition]
        if status is not None:
            filters.append(OrderModel.status == status.value)

        total = (await self.session.execute(select(func.count()).select_from(OrderModel).where(*filters))).scalar_one()
        result = await self.session.execute(
            self._order_query()
            .where(*filters)
            .order_by(OrderModel.created_at.desc(), OrderModel.order_number.desc())
            .offset(page.offset)
            .limit(page.limit)
        )
        orders = [self._to_entity(m) for m in result.scalars().all()]
        return OrderPage(orders=orders, total=total, page=page.page, limit=page.limit)

    async def _apply_status(
        self,
        order_id: uuid.UUID,
        expected: OrderStatus,
        new_status: OrderStatus,
        notes: str | None = None,
    ) -> None:
        """Conditional update of order and lines; zero rows means a concurrent change won."""
        now = datetime.now(UTC)
        values: dict[str, Any] = {"status": new_status.value, "updated_at": now}
        if notes is not None:
            values["notes"] = notes

        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidStateTransitionException(expected.value, new_status.value)

        await self.session.execute(
            update(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .values(status=new_status.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )

    async def _recheck_catalog(self, order: Order) -> None:
        """Re-read vendor approval and product availability inside the write transaction."""
        vendor_status = (
            await self.session.execute(select(VendorModel.status).where(VendorModel.id == order.vendor_id))
        ).scalar_one_or_none()
        if vendor_status != VendorStatus.APPROVED.value:
            raise BusinessRuleViolationException(
                rule="VENDOR_NOT_APPROVED",
                message="Vendor is not approved",
                details={"vendor_id": str(order.vendor_id)},
            )

        product_ids = {line.product_id for line in order.lines}
        result = await self.session.execute(
            select(ProductModel.id).where(
                ProductModel.id.in_(list(product_ids)),
                ProductModel.vendor_id == order.vendor_id,
                ProductModel.is_available.is_(True),
            )
        )
        missing = product_ids - set(result.scalars().all())
        if missing:
            raise BusinessRuleViolationException(
                rule="PRODUCT_UNAVAILABLE",
                message="Some products are not available",
                details={"product_ids": sorted(str(product_id) for product_id in missing)},
            )

    @staticmethod
    def _require_payment(order: Order) -> Payment:
        if order.payment is None:
            raise PaymentException(f"Order {order.order_number} has no payment record", reason="NO_PAYMENT")
        return order.payment

    @staticmethod
    def _copy_payment(payment: Payment, model: PaymentModel) -> None:
        model.payment_status = payment.status.value
        model.transaction_id = payment.transaction_id
        model.gateway_payment_id = payment.gateway_payment_id
        model.gateway_signature = payment.gateway_signature
        model.failure_reason = payment.failure_reason
        model.processed_at = payment.processed_at

    # Mapping methods

    def _to_entity(self, model: OrderModel) -> Order:
        """Convert model to entity."""
        order_id = cast(uuid.UUID, model.id)
        lines = [
            OrderLine(
                id=cast(uuid.UUID, item.id),
                order_id=order_id,
                product_id=cast(uuid.UUID, item.product_id),
                product_name=cast(str, item.product_name),
                quantity=cast(int, item.quantity),
                unit_price=cast(Decimal, item.unit_price),
                total_amount=cast(Decimal, item.total_amount),
                requires_delivery=bool(item.requires_delivery),
                delivery_address=cast(str | None, item.delivery_address),
                status=OrderStatus(cast(str, item.status)),
                created_at=cast(datetime, item.created_at),
                updated_at=cast(datetime, item.updated_at),
            )
            for item in model.items or []
        ]

        payment = None
        if model.payment is not None:
            payment = self._payment_to_entity(model.payment)

        return Order(
            id=order_id,
            order_number=cast(str, model.order_number),
            customer_id=cast(uuid.UUID, model.customer_id),
            vendor_id=cast(uuid.UUID, model.vendor_id),
            vendor_user_id=cast(uuid.UUID, model.vendor.user_id) if model.vendor else None,
            total_amount=cast(Decimal, model.total_amount),
            commission_amount=cast(Decimal, model.commission_amount),
            status=OrderStatus(cast(str, model.status)),
            lines=lines,
            payment=payment,
            notes=cast(str | None, model.notes),
            created_at=cast(datetime, model.created_at),
            updated_at=cast(datetime, model.updated_at),
        )

    @staticmethod
    def _payment_to_entity(model: PaymentModel) -> Payment:
        return Payment(
            id=cast(uuid.UUID, model.id),
            order_id=cast(uuid.UUID, model.order_id),
            total_amount=cast(Decimal, model.total_amount),
            commission_amount=cast(Decimal, model.commission_amount),
            vendor_amount=cast(Decimal, model.vendor_amount),
            payment_method=PaymentMethod(cast(str, model.payment_method)),
            status=PaymentStatus(cast(str, model.payment_status)),
            transaction_id=cast(str | None, model.transaction_id),
            gateway_order_id=cast(str | None, model.gateway_order_id),
            gateway_payment_id=cast(str | None, model.gateway_payment_id),
            gateway_signature=cast(str | None, model.gateway_signature),
            processed_at=cast(datetime | None, model.processed_at),
            refund_id=cast(str | None, model.refund_id),
            refund_amount=cast(Decimal | None, model.refund_amount),
            failure_reason=cast(str | None, model.failure_reason),
            created_at=cast(datetime, model.created_at),
            updated_at=cast(datetime, model.updated_at),
        )

    def _to_model(self, order: Order) -> OrderModel:
        """Convert a new entity to models (order, items and payment)."""
        order_id = order.id or uuid.uuid4()
        model = OrderModel(
            id=order_id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            vendor_id=order.vendor_id,
            status=order.status.value,
            total_amount=order.total_amount,
            commission_amount=order.commission_amount,
            notes=order.notes,
        )

        model.items = [
            OrderItemModel(
                id=line.id or uuid.uuid4(),
                order_id=order_id,
                product_id=line.product_id,
                position=position,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_amount=line.total_amount,
                requires_delivery=line.requires_delivery,
                delivery_address=line.delivery_address,
                status=line.status.value,
            )
            for position, line in enumerate(order.lines)
        ]

        payment = order.payment
        if payment is not None:
            model.payment = PaymentModel(
                id=payment.id or uuid.uuid4(),
                order_id=order_id,
                total_amount=payment.total_amount,
                commission_amount=payment.commission_amount,
                vendor_amount=payment.vendor_amount,
                payment_method=payment.payment_method.value,
                payment_status=payment.status.value,
                gateway_order_id=payment.gateway_order_id,
            )

        return model

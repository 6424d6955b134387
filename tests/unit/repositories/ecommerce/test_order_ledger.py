"""
Unit tests for SQLAlchemyOrderRepository (the order ledger).

Runs against an in-memory SQLite database so the transactional behaviour
(commit / rollback, conditional status updates) is exercised for real.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select, update

from marketplace.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    EntityNotFoundException,
    InvalidStateTransitionException,
)
from marketplace.domains.ecommerce.application.dto import PageRequest
from marketplace.domains.ecommerce.domain.entities import Order, OrderLine
from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus
from marketplace.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyCatalogRepository,
    SQLAlchemyOrderRepository,
)
from marketplace.models.db.catalog import Product as ProductModel
from marketplace.models.db.catalog import Vendor as VendorModel
from marketplace.models.db.orders import Order as OrderModel
from marketplace.models.db.orders import Payment as PaymentModel
from tests.utils.assertions import assert_lines_follow_order, assert_money_conserved


def _new_order(catalog: dict, customer_id=None, quantity: int = 2, unit_price: str = "100") -> Order:
    line = OrderLine.create(catalog["product_id"], "Paracetamol 500mg", quantity, Decimal(unit_price))
    total = line.total_amount
    return Order.place(
        customer_id=customer_id or uuid4(),
        vendor_id=catalog["vendor_id"],
        lines=[line],
        commission_amount=(total * Decimal("0.16")).quantize(Decimal("0.01")),
        vendor_user_id=catalog["vendor_user_id"],
    )


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.fixture
def repository(db_session) -> SQLAlchemyOrderRepository:
    return SQLAlchemyOrderRepository(db_session)


class TestCatalogRepository:
    """Tests for the read-only catalog repository."""

    @pytest.mark.asyncio
    async def test_loads_available_products_with_vendor(self, db_session, seeded_catalog) -> None:
        repository = SQLAlchemyCatalogRepository(db_session)

        products = await repository.find_available_products(
            [seeded_catalog["product_id"], seeded_catalog["other_product_id"]]
        )

        by_id = {product.id: product for product in products}
        assert set(by_id) == {seeded_catalog["product_id"], seeded_catalog["other_product_id"]}
        paracetamol = by_id[seeded_catalog["product_id"]]
        assert paracetamol.price_min == Decimal("50.00")
        assert paracetamol.vendor.id == seeded_catalog["vendor_id"]
        assert paracetamol.vendor.is_approved()

    @pytest.mark.asyncio
    async def test_skips_unavailable_products(self, db_session, seeded_catalog) -> None:
        await db_session.execute(
            update(ProductModel).where(ProductModel.id == seeded_catalog["product_id"]).values(is_available=False)
        )
        await db_session.commit()

        products = await SQLAlchemyCatalogRepository(db_session).find_available_products([seeded_catalog["product_id"]])

        assert products == []

    @pytest.mark.asyncio
    async def test_empty_request(self, db_session) -> None:
        assert await SQLAlchemyCatalogRepository(db_session).find_available_products([]) == []


class TestCreateOrder:
    """Tests for atomic order creation."""

    @pytest.mark.asyncio
    async def test_persists_order_lines_and_payment(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        assert created.id is not None
        assert created.status is OrderStatus.PENDING
        assert created.total_amount == Decimal("200.00")
        assert created.commission_amount == Decimal("32.00")
        assert created.vendor_user_id == seeded_catalog["vendor_user_id"]
        assert len(created.lines) == 1
        assert created.lines[0].order_id == created.id
        assert created.payment.status is PaymentStatus.PENDING
        assert created.payment.vendor_amount == Decimal("168.00")
        assert_money_conserved(created)
        assert_lines_follow_order(created)

    @pytest.mark.asyncio
    async def test_vendor_suspended_before_commit_writes_nothing(self, repository, db_session, seeded_catalog) -> None:
        """Should re-check vendor approval inside the write transaction."""
        await db_session.execute(
            update(VendorModel).where(VendorModel.id == seeded_catalog["vendor_id"]).values(status="SUSPENDED")
        )
        await db_session.commit()

        with pytest.raises(BusinessRuleViolationException) as exc_info:
            await repository.create(_new_order(seeded_catalog))

        assert exc_info.value.rule == "VENDOR_NOT_APPROVED"
        assert await _count(db_session, OrderModel) == 0
        assert await _count(db_session, PaymentModel) == 0

    @pytest.mark.asyncio
    async def test_product_withdrawn_before_commit_writes_nothing(self, repository, db_session, seeded_catalog) -> None:
        """Should re-check product availability inside the write transaction."""
        await db_session.execute(
            update(ProductModel).where(ProductModel.id == seeded_catalog["product_id"]).values(is_available=False)
        )
        await db_session.commit()

        with pytest.raises(BusinessRuleViolationException) as exc_info:
            await repository.create(_new_order(seeded_catalog))

        assert exc_info.value.rule == "PRODUCT_UNAVAILABLE"
        assert await _count(db_session, OrderModel) == 0


class TestQueries:
    """Tests for lookups and listings."""

    @pytest.mark.asyncio
    async def test_get_unknown_order(self, repository) -> None:
        assert await repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_by_gateway_order_id(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.attach_gateway_order(created.id, "order_RZP999")

        found = await repository.find_by_gateway_order_id("order_RZP999")

        assert found is not None
        assert found.id == created.id
        assert found.payment.gateway_order_id == "order_RZP999"
        assert await repository.find_by_gateway_order_id("order_NOPE") is None

    @pytest.mark.asyncio
    async def test_customer_listing_pagination_and_filter(self, repository, seeded_catalog) -> None:
        customer_id = uuid4()
        created = [await repository.create(_new_order(seeded_catalog, customer_id)) for _ in range(3)]
        await repository.create(_new_order(seeded_catalog))  # another customer
        await repository.transition_status(created[0].id, OrderStatus.CONFIRMED)

        first_page = await repository.list_for_customer(customer_id, PageRequest.create(1, 2))
        second_page = await repository.list_for_customer(customer_id, PageRequest.create(2, 2))
        confirmed = await repository.list_for_customer(customer_id, PageRequest.create(), OrderStatus.CONFIRMED)

        assert first_page.total == 3
        assert len(first_page.orders) == 2
        assert len(second_page.orders) == 1
        assert first_page.meta()["totalPages"] == 2
        assert first_page.meta()["hasNext"] is True
        assert second_page.meta()["hasPrev"] is True
        listed = first_page.orders + second_page.orders
        assert {order.id for order in listed} == {order.id for order in created}
        timestamps = [order.created_at for order in listed]
        assert timestamps == sorted(timestamps, reverse=True)
        assert [order.id for order in confirmed.orders] == [created[0].id]

    @pytest.mark.asyncio
    async def test_vendor_listing(self, repository, seeded_catalog) -> None:
        await repository.create(_new_order(seeded_catalog))

        mine = await repository.list_for_vendor(seeded_catalog["vendor_id"], PageRequest.create())
        theirs = await repository.list_for_vendor(seeded_catalog["other_vendor_id"], PageRequest.create())

        assert mine.total == 1
        assert theirs.total == 0
        assert theirs.orders == []


class TestStatusTransitions:
    """Tests for locked, conditional status changes."""

    @pytest.mark.asyncio
    async def test_vendor_moves_order_along(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        confirmed = await repository.transition_status(
            created.id, OrderStatus.CONFIRMED, vendor_id=seeded_catalog["vendor_id"], notes="Ready for pickup"
        )
        completed = await repository.transition_status(
            created.id, OrderStatus.COMPLETED, vendor_id=seeded_catalog["vendor_id"]
        )

        assert confirmed.status is OrderStatus.CONFIRMED
        assert confirmed.notes == "Ready for pickup"
        assert completed.status is OrderStatus.COMPLETED
        assert completed.notes == "Ready for pickup"
        assert_lines_follow_order(completed)

    @pytest.mark.asyncio
    async def test_invalid_transition_leaves_order_unchanged(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        with pytest.raises(InvalidStateTransitionException):
            await repository.transition_status(created.id, OrderStatus.COMPLETED)

        reloaded = await repository.get_by_id(created.id)
        assert reloaded.status is OrderStatus.PENDING
        assert_lines_follow_order(reloaded)

    @pytest.mark.asyncio
    async def test_terminal_order_cannot_move(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.transition_status(created.id, OrderStatus.CANCELLED)

        with pytest.raises(InvalidStateTransitionException) as exc_info:
            await repository.transition_status(created.id, OrderStatus.CONFIRMED)

        assert exc_info.value.message == "Cannot update completed or cancelled orders"

    @pytest.mark.asyncio
    async def test_other_vendor_is_rejected(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        with pytest.raises(AuthorizationException):
            await repository.transition_status(
                created.id, OrderStatus.CONFIRMED, vendor_id=seeded_catalog["other_vendor_id"]
            )

        assert (await repository.get_by_id(created.id)).status is OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_order(self, repository) -> None:
        with pytest.raises(EntityNotFoundException):
            await repository.transition_status(uuid4(), OrderStatus.CONFIRMED)

    @pytest.mark.asyncio
    async def test_concurrent_change_is_detected(self, repository, db_session, seeded_catalog) -> None:
        """Should reject a move when the row no longer holds the status that was read."""
        created = await repository.create(_new_order(seeded_catalog))

        with pytest.raises(InvalidStateTransitionException):
            await repository._apply_status(created.id, OrderStatus.CONFIRMED, OrderStatus.COMPLETED)
        await db_session.rollback()

        assert (await repository.get_by_id(created.id)).status is OrderStatus.PENDING


class TestCancel:
    """Tests for customer cancellation in the ledger."""

    @pytest.mark.asyncio
    async def test_owner_cancels(self, repository, seeded_catalog) -> None:
        customer_id = uuid4()
        created = await repository.create(_new_order(seeded_catalog, customer_id))

        cancelled = await repository.cancel(created.id, customer_id)

        assert cancelled.status is OrderStatus.CANCELLED
        assert_lines_follow_order(cancelled)

    @pytest.mark.asyncio
    async def test_second_cancel_is_rejected(self, repository, seeded_catalog) -> None:
        customer_id = uuid4()
        created = await repository.create(_new_order(seeded_catalog, customer_id))
        await repository.cancel(created.id, customer_id)

        with pytest.raises(BusinessRuleViolationException) as exc_info:
            await repository.cancel(created.id, customer_id)

        assert exc_info.value.rule == "ORDER_ALREADY_CANCELLED"

    @pytest.mark.asyncio
    async def test_completed_order_cannot_be_cancelled(self, repository, seeded_catalog) -> None:
        customer_id = uuid4()
        created = await repository.create(_new_order(seeded_catalog, customer_id))
        await repository.transition_status(created.id, OrderStatus.CONFIRMED)
        await repository.transition_status(created.id, OrderStatus.COMPLETED)

        with pytest.raises(BusinessRuleViolationException) as exc_info:
            await repository.cancel(created.id, customer_id)

        assert exc_info.value.rule == "ORDER_ALREADY_COMPLETED"

    @pytest.mark.asyncio
    async def test_stranger_cannot_cancel(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        with pytest.raises(AuthorizationException):
            await repository.cancel(created.id, uuid4())


class TestSettlement:
    """Tests for payment bookkeeping."""

    @pytest.mark.asyncio
    async def test_payment_success_confirms_pending_order(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        result = await repository.record_payment_success(created.id, "pay_1", "sig_1")

        assert result.payment_updated is True
        assert result.status_changed is True
        assert result.order.status is OrderStatus.CONFIRMED
        assert result.order.payment.status is PaymentStatus.SUCCESS
        assert result.order.payment.gateway_payment_id == "pay_1"
        assert result.order.payment.transaction_id == "pay_1"
        assert result.order.payment.gateway_signature == "sig_1"
        assert result.order.payment.processed_at is not None
        assert_lines_follow_order(result.order)

    @pytest.mark.asyncio
    async def test_payment_success_is_idempotent(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.record_payment_success(created.id, "pay_1")

        replay = await repository.record_payment_success(created.id, "pay_2")

        assert replay.payment_updated is False
        assert replay.order.payment.gateway_payment_id == "pay_1"

    @pytest.mark.asyncio
    async def test_payment_success_on_cancelled_order_keeps_status(self, repository, seeded_catalog) -> None:
        customer_id = uuid4()
        created = await repository.create(_new_order(seeded_catalog, customer_id))
        await repository.cancel(created.id, customer_id)

        result = await repository.record_payment_success(created.id, "pay_late")

        assert result.payment_updated is True
        assert result.status_changed is False
        assert result.order.status is OrderStatus.CANCELLED
        assert result.order.payment.status is PaymentStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_payment_failure_cancels_order(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))

        result = await repository.record_payment_failure(created.id, "Card declined")

        assert result.status_changed is True
        assert result.order.status is OrderStatus.CANCELLED
        assert result.order.payment.status is PaymentStatus.FAILED
        assert result.order.payment.failure_reason == "Card declined"

    @pytest.mark.asyncio
    async def test_payment_failure_after_capture_is_ignored(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.record_payment_success(created.id, "pay_1")

        result = await repository.record_payment_failure(created.id, "late failure")

        assert result.payment_updated is False
        assert result.order.status is OrderStatus.CONFIRMED
        assert result.order.payment.status is PaymentStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_record_refund(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.record_payment_success(created.id, "pay_1")

        await repository.record_refund(created.id, "rfnd_1", Decimal("200"))

        payment = (await repository.get_by_id(created.id)).payment
        assert payment.status is PaymentStatus.REFUNDED
        assert payment.refund_id == "rfnd_1"
        assert payment.refund_amount == Decimal("200.00")

    @pytest.mark.asyncio
    async def test_refund_for_unknown_order(self, repository) -> None:
        with pytest.raises(EntityNotFoundException):
            await repository.record_refund(uuid4(), "rfnd_x", Decimal("1"))

    @pytest.mark.asyncio
    async def test_mark_refund_processed_by_refund_id(self, repository, seeded_catalog) -> None:
        created = await repository.create(_new_order(seeded_catalog))
        await repository.record_payment_success(created.id, "pay_1")
        await repository.record_refund(created.id, "rfnd_1", Decimal("200"))

        assert await repository.mark_refund_processed("rfnd_1", Decimal("200.00")) is True

    @pytest.mark.asyncio
    async def test_mark_refund_processed_by_payment_id(self, repository, seeded_catalog) -> None:
        """Should match refunds issued outside the service by their payment id."""
        created = await repository.create(_new_order(seeded_catalog))
        await repository.record_payment_success(created.id, "pay_dash")

        handled = await repository.mark_refund_processed("rfnd_dash", None, "pay_dash")

        payment = (await repository.get_by_id(created.id)).payment
        assert handled is True
        assert payment.status is PaymentStatus.REFUNDED
        assert payment.refund_id == "rfnd_dash"
        assert payment.refund_amount == Decimal("200.00")

    @pytest.mark.asyncio
    async def test_mark_unknown_refund(self, repository) -> None:
        assert await repository.mark_refund_processed("rfnd_unknown") is False

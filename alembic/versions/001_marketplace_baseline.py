"""Baseline migration - marketplace catalog and order ledger.

Revision ID: 001_marketplace_baseline
Revises: None
Create Date: 2026-10-18

Creates:
- vendors, products: catalog tables (read-only for the order workflow)
- orders, order_items, payments: the order aggregate
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_marketplace_baseline"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create marketplace tables."""

    # ==========================================================================
    # 1. Catalog
    # ==========================================================================
    op.create_table(
        "vendors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("business_name", sa.String(200), nullable=False),
        sa.Column("vendor_type", sa.String(30), nullable=False, server_default=sa.text("'PHARMACY'")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("business_address", sa.Text(), nullable=True),
        sa.Column("contact_number", sa.String(20), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_vendors_user_id", "vendors", ["user_id"], unique=True)
    op.create_index("idx_vendors_status", "vendors", ["status"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("vendor_id", sa.Uuid(), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_min", sa.Numeric(12, 2), nullable=False),
        sa.Column("price_max", sa.Numeric(12, 2), nullable=False),
        sa.Column("min_order_quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("price_min <= price_max", name="ck_products_price_range"),
    )
    op.create_index("idx_products_vendor", "products", ["vendor_id"])
    op.create_index("idx_products_available", "products", ["is_available"])

    # ==========================================================================
    # 2. Order aggregate
    # ==========================================================================
    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_number", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("vendor_id", sa.Uuid(), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("idx_orders_customer", "orders", ["customer_id"])
    op.create_index("idx_orders_vendor", "orders", ["vendor_id"])
    op.create_index("idx_orders_status", "orders", ["status"])
    op.create_index("idx_orders_customer_created", "orders", ["customer_id", "created_at"])
    op.create_index("idx_orders_vendor_created", "orders", ["vendor_id", "created_at"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Uuid(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("requires_delivery", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("delivery_address", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
    )
    op.create_index("idx_order_items_order", "order_items", ["order_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("vendor_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(30), nullable=False, server_default=sa.text("'RAZORPAY'")),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("transaction_id", sa.String(100), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.Column("gateway_order_id", sa.String(100), nullable=True),
        sa.Column("gateway_payment_id", sa.String(100), nullable=True),
        sa.Column("gateway_signature", sa.String(256), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refund_id", sa.String(100), nullable=True),
        sa.Column("refund_amount", sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("order_id", name="uq_payments_order_id"),
        sa.UniqueConstraint("gateway_order_id", name="uq_payments_gateway_order_id"),
        sa.UniqueConstraint("refund_id", name="uq_payments_refund_id"),
        sa.CheckConstraint(
            "commission_amount + vendor_amount = total_amount",
            name="ck_payments_commission_split",
        ),
    )
    op.create_index("idx_payments_status", "payments", ["payment_status"])


def downgrade() -> None:
    """Drop marketplace tables."""
    op.drop_table("payments")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("vendors")

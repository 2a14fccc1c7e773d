"""Initial database schema - users, themes, stores, catalog, orders, admin notifications

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- Users ---
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="store"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    # --- Themes ---
    op.create_table(
        "themes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("config", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
    )

    # --- Stores ---
    op.create_table(
        "stores",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False, unique=True),
        sa.Column("whatsapp", sa.String(30), nullable=False, server_default=""),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("logo_url", sa.String(500)),
        sa.Column("banner_url", sa.String(500)),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("active_until", sa.DateTime(timezone=True)),
        sa.Column("catalog_retail", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("catalog_wholesale", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("wholesale_key", sa.String(100)),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("theme_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("themes.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_stores_slug", "stores", ["slug"])
    op.create_index("ix_stores_owner_id", "stores", ["owner_id"])

    op.create_table(
        "store_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("headline", sa.String(255)),
        sa.Column("description", sa.Text),
        sa.Column("address", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("department", sa.String(100)),
        sa.Column("google_maps_url", sa.String(500)),
        sa.Column("delivery_info", sa.Text),
        sa.Column("payment_methods", sa.Text),
        sa.Column("policies", sa.Text),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "store_links",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("label", sa.String(100)),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("icon_url", sa.String(500)),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_store_links_store_id", "store_links", ["store_id"])

    # --- Categories ---
    op.create_table(
        "product_categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("image_url", sa.String(500)),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "name", name="uq_category_store_name"),
    )
    op.create_index("ix_product_categories_name", "product_categories", ["name"])
    op.create_index("ix_product_categories_store_id", "product_categories", ["store_id"])

    # --- Products ---
    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price_retail", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("price_wholesale", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("min_wholesale", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("stock", sa.Integer),
        sa.Column("image_url", sa.String(500)),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("product_categories.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_store_id", "products", ["store_id"])
    op.create_index("ix_products_store_name", "products", ["store_id", "name"])

    # --- Orders ---
    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("token", sa.String(64), nullable=False, unique=True),
        sa.Column("receipt_no", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("catalog_type", sa.String(20), nullable=False, server_default="retail"),
        sa.Column("total", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("customer_name", sa.String(255)),
        sa.Column("customer_whatsapp", sa.String(30)),
        sa.Column("customer_note", sa.Text),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "receipt_no", name="uq_orders_store_receipt"),
    )
    op.create_index("ix_orders_token", "orders", ["token"])
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_store_created", "orders", ["store_id", "created_at"])

    op.create_table(
        "order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(500)),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("qty", sa.Integer, nullable=False),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("products.id", ondelete="SET NULL")),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    # --- Admin notifications ---
    op.create_table(
        "admin_notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True)),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("store_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("stores.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("store_id", "kind", name="uq_admin_notifications_store_kind"),
    )
    op.create_index("ix_admin_notifications_is_read", "admin_notifications", ["is_read"])


def downgrade() -> None:
    op.drop_table("admin_notifications")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("product_categories")
    op.drop_table("store_links")
    op.drop_table("store_profiles")
    op.drop_table("stores")
    op.drop_table("themes")
    op.drop_table("users")

"""Pick core: inventory ledger, order line items, corrective tasks, pick issues, outbox.

Revision ID: 0001_pick_core
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_pick_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "wms_inventory",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("bin_id", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=24), nullable=False, server_default="available"),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("batch_number", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("sku", "bin_id", name="uq_wms_inventory_sku_bin"),
        sa.CheckConstraint("quantity >= 0", name="ck_wms_inventory_qty_nonneg"),
    )
    op.create_index("ix_wms_inventory_sku", "wms_inventory", ["sku"])
    op.create_index("ix_wms_inventory_bin_id", "wms_inventory", ["bin_id"])
    op.create_index("ix_wms_inventory_status", "wms_inventory", ["status"])
    op.create_index("ix_wms_inventory_sku_status", "wms_inventory", ["sku", "status"])
    op.create_index("ix_wms_inventory_bin_status", "wms_inventory", ["bin_id", "status"])

    op.create_table(
        "wms_order_item",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("order_id", sa.String(length=64), nullable=False),
        sa.Column("item_code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("category", sa.String(length=32), nullable=True),
        sa.Column("status", sa.String(length=24), nullable=False, server_default="pending"),
        sa.Column("location", sa.String(length=64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("scanned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("order_id", "item_code", name="uq_wms_order_item_order_sku"),
    )
    op.create_index("ix_wms_order_item_order_id", "wms_order_item", ["order_id"])
    op.create_index("ix_wms_order_item_item_code", "wms_order_item", ["item_code"])
    op.create_index("ix_wms_order_item_category", "wms_order_item", ["category"])
    op.create_index("ix_wms_order_item_status", "wms_order_item", ["status"])
    op.create_index("ix_wms_order_item_order_status", "wms_order_item", ["order_id", "status"])

    op.create_table(
        "wms_task",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("assignee", sa.String(length=128), nullable=False),
        sa.Column("status", sa.String(length=24), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("order_id", sa.String(length=64), nullable=True),
        sa.Column("bin_id", sa.String(length=64), nullable=True),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.Column("pick_issue_id", sa.String(length=36), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_wms_task_assignee", "wms_task", ["assignee"])
    op.create_index("ix_wms_task_status", "wms_task", ["status"])
    op.create_index("ix_wms_task_order_id", "wms_task", ["order_id"])
    op.create_index("ix_wms_task_bin_id", "wms_task", ["bin_id"])
    op.create_index("ix_wms_task_pick_issue_id", "wms_task", ["pick_issue_id"])
    op.create_index("ix_wms_task_assignee_status", "wms_task", ["assignee", "status"])
    op.create_index("ix_wms_task_status_priority", "wms_task", ["status", "priority"])

    op.create_table(
        "wms_pick_issue",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("order_id", sa.String(length=64), nullable=False),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("bin_id", sa.String(length=64), nullable=False),
        sa.Column("issue_type", sa.String(length=24), nullable=False),
        sa.Column("reported_by", sa.String(length=128), nullable=False),
        sa.Column("device_id", sa.String(length=128), nullable=True),
        sa.Column("client_timestamp", sa.String(length=64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_wms_pick_issue_order_id", "wms_pick_issue", ["order_id"])
    op.create_index("ix_wms_pick_issue_sku", "wms_pick_issue", ["sku"])
    op.create_index("ix_wms_pick_issue_bin_id", "wms_pick_issue", ["bin_id"])
    op.create_index("ix_wms_pick_issue_issue_type", "wms_pick_issue", ["issue_type"])
    op.create_index("ix_wms_pick_issue_reported_by", "wms_pick_issue", ["reported_by"])
    op.create_index("ix_wms_pick_issue_device_id", "wms_pick_issue", ["device_id"])
    op.create_index("ix_wms_pick_issue_order_sku", "wms_pick_issue", ["order_id", "sku"])
    op.create_index("ix_wms_pick_issue_type_created", "wms_pick_issue", ["issue_type", "created_at"])

    op.create_table(
        "outbox_event",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("topic", sa.String(length=128), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("available_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attempt_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("delivered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_outbox_event_topic", "outbox_event", ["topic"])
    op.create_index("ix_outbox_topic_created", "outbox_event", ["topic", "created_at"])
    op.create_index("ix_outbox_delivery", "outbox_event", ["delivered", "available_at"])


def downgrade():
    op.drop_table("outbox_event")
    op.drop_table("wms_pick_issue")
    op.drop_table("wms_task")
    op.drop_table("wms_order_item")
    op.drop_table("wms_inventory")

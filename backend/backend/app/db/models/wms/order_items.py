from __future__ import annotations

import enum
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, Text, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.models.wms.common import HasId, HasCreatedAt, HasUpdatedAt

class LineItemStatus(str, enum.Enum):
    PENDING = "pending"
    FOUND = "found"
    NOT_FOUND = "not_found"
    SCANNED = "scanned"
    COMPLETED = "completed"
    PICKED = "picked"
    SHORT = "short"
    ON_HOLD = "on_hold"
    REASSIGNED = "reassigned"

class OrderLineItem(Base, HasId, HasCreatedAt, HasUpdatedAt):
    __tablename__ = "wms_order_item"
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    item_code: Mapped[str] = mapped_column(String(64), nullable=False, index=True)  # SKU
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    category: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)  # Fresh|Snacks|Grocery|Care
    status: Mapped[str] = mapped_column(String(24), default=LineItemStatus.PENDING.value, nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    scanned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("order_id", "item_code", name="uq_wms_order_item_order_sku"),
    )

Index("ix_wms_order_item_order_status", OrderLineItem.order_id, OrderLineItem.status)

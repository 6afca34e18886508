from __future__ import annotations

import enum
from datetime import date
from sqlalchemy import String, Integer, Date, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.models.wms.common import HasId, HasCreatedAt, HasUpdatedAt

class InventoryStatus(str, enum.Enum):
    AVAILABLE = "available"
    DAMAGED = "damaged"
    EXPIRED = "expired"
    BLOCKED = "blocked"
    RESERVED = "reserved"

class InventoryRecord(Base, HasId, HasCreatedAt, HasUpdatedAt):
    """Stock of one SKU in one bin."""
    __tablename__ = "wms_inventory"
    sku: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    bin_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(24), default=InventoryStatus.AVAILABLE.value, nullable=False, index=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("sku", "bin_id", name="uq_wms_inventory_sku_bin"),
        CheckConstraint("quantity >= 0", name="ck_wms_inventory_qty_nonneg"),
    )

Index("ix_wms_inventory_sku_status", InventoryRecord.sku, InventoryRecord.status)
Index("ix_wms_inventory_bin_status", InventoryRecord.bin_id, InventoryRecord.status)

from __future__ import annotations

import enum
from sqlalchemy import String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.models.wms.common import HasId, HasCreatedAt

class IssueType(str, enum.Enum):
    ITEM_DAMAGED = "ITEM_DAMAGED"
    ITEM_MISSING = "ITEM_MISSING"
    ITEM_EXPIRED = "ITEM_EXPIRED"
    WRONG_ITEM = "WRONG_ITEM"

class NextAction(str, enum.Enum):
    ALTERNATE_BIN = "ALTERNATE_BIN"
    SKIP_ITEM = "SKIP_ITEM"

class PickIssue(Base, HasId, HasCreatedAt):
    """Append-only record of a picker reporting that an item could not be picked."""
    __tablename__ = "wms_pick_issue"
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    bin_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    issue_type: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    reported_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    device_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    client_timestamp: Mapped[str | None] = mapped_column(String(64), nullable=True)  # advisory, as sent
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

Index("ix_wms_pick_issue_order_sku", PickIssue.order_id, PickIssue.sku)
Index("ix_wms_pick_issue_type_created", PickIssue.issue_type, PickIssue.created_at)

from __future__ import annotations

import enum
from datetime import datetime
from sqlalchemy import String, DateTime, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.models.wms.common import HasId, HasCreatedAt, HasUpdatedAt

class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class CorrectiveTask(Base, HasId, HasCreatedAt, HasUpdatedAt):
    """Follow-up work for warehouse staff, usually opened by a pick issue."""
    __tablename__ = "wms_task"
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    assignee: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(24), default=TaskStatus.PENDING.value, nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(16), default=TaskPriority.MEDIUM.value, nullable=False)

    # traceability back to the pick that raised it
    order_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    bin_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    sku: Mapped[str | None] = mapped_column(String(64), nullable=True)
    pick_issue_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

Index("ix_wms_task_assignee_status", CorrectiveTask.assignee, CorrectiveTask.status)
Index("ix_wms_task_status_priority", CorrectiveTask.status, CorrectiveTask.priority)

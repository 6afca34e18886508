from __future__ import annotations

import logging
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.db.models.wms.common import utcnow
from app.db.models.wms.tasking import CorrectiveTask, TaskStatus, TaskPriority
from app.events.outbox import OutboxEvent

logger = logging.getLogger(__name__)

_STATUSES = {s.value for s in TaskStatus}
_PRIORITIES = {p.value for p in TaskPriority}


def create_corrective_task(
    db: Session,
    *,
    title: str,
    description: str | None,
    assignee: str,
    priority: TaskPriority,
    order_id: str | None = None,
    bin_id: str | None = None,
    sku: str | None = None,
    pick_issue_id: str | None = None,
) -> CorrectiveTask:
    """Add a pending task to the session. The caller owns the commit."""
    task = CorrectiveTask(
        title=title,
        description=description,
        assignee=assignee,
        status=TaskStatus.PENDING.value,
        priority=priority.value,
        order_id=order_id,
        bin_id=bin_id,
        sku=sku,
        pick_issue_id=pick_issue_id,
    )
    db.add(task)
    db.flush()
    logger.info("corrective task %s opened: %s (priority=%s)", task.id, title, task.priority)
    return task


def create_task(db: Session, payload: dict, *, actor: str) -> CorrectiveTask:
    title = str(payload.get("title") or "").strip()
    if not title:
        raise ValidationError("Please add a task title")
    priority = payload.get("priority") or TaskPriority.MEDIUM.value
    if not isinstance(priority, str) or priority not in _PRIORITIES:
        raise ValidationError(f"Invalid task priority '{priority}'")
    task = create_corrective_task(
        db,
        title=title,
        description=_optional_str(payload, "description"),
        assignee=_optional_str(payload, "assignee") or actor,
        priority=TaskPriority(priority),
        order_id=_optional_str(payload, "orderId"),
        bin_id=_optional_str(payload, "binId"),
        sku=_optional_str(payload, "sku"),
    )
    task.due_date = _parse_due_date(payload.get("dueDate"))
    _commit(db, task.id)
    return task


def list_tasks(
    db: Session,
    *,
    status: str | None = None,
    assignee: str | None = None,
    order_id: str | None = None,
    priority: str | None = None,
) -> list[CorrectiveTask]:
    if status and status not in _STATUSES:
        raise ValidationError(f"Invalid task status '{status}'")
    if priority and priority not in _PRIORITIES:
        raise ValidationError(f"Invalid task priority '{priority}'")
    q = db.query(CorrectiveTask)
    if status:
        q = q.filter(CorrectiveTask.status == status)
    if assignee:
        q = q.filter(CorrectiveTask.assignee == assignee)
    if order_id:
        q = q.filter(CorrectiveTask.order_id == order_id)
    if priority:
        q = q.filter(CorrectiveTask.priority == priority)
    return q.order_by(CorrectiveTask.created_at.desc()).limit(200).all()


def get_task(db: Session, task_id: str) -> CorrectiveTask:
    task = db.query(CorrectiveTask).filter(CorrectiveTask.id == task_id).first()
    if not task:
        raise NotFoundError(f"Task not found with id of {task_id}")
    return task


def update_task(db: Session, task_id: str, payload: dict, *, actor: str) -> CorrectiveTask:
    task = get_task(db, task_id)

    status = payload.get("status")
    if status is not None and (not isinstance(status, str) or status not in _STATUSES):
        raise ValidationError(f"Invalid task status '{status}'")
    priority = payload.get("priority")
    if priority is not None and (not isinstance(priority, str) or priority not in _PRIORITIES):
        raise ValidationError(f"Invalid task priority '{priority}'")
    description = _optional_str(payload, "description")
    due_date = _parse_due_date(payload.get("dueDate"))

    previous = task.status
    if status is not None:
        task.status = status
        if status == TaskStatus.COMPLETED.value and task.completed_at is None:
            task.completed_at = utcnow()
        elif status != TaskStatus.COMPLETED.value:
            task.completed_at = None
    if priority is not None:
        task.priority = priority
    if "description" in payload:
        task.description = description
    if "dueDate" in payload:
        task.due_date = due_date

    db.add(OutboxEvent(topic="CorrectiveTaskUpdated", payload={
        "task_id": task.id,
        "previous_status": previous,
        "status": task.status,
        "priority": task.priority,
        "actor": actor,
    }))
    _commit(db, task.id)
    return task


def _optional_str(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Invalid {key}")
    return value


def _commit(db: Session, task_id: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("could not save task %s", task_id)
        raise PersistenceError("Could not save the task, please retry") from exc


def _parse_due_date(value) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid dueDate '{value}'") from None


def serialize_task(t: CorrectiveTask) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "assignee": t.assignee,
        "status": t.status,
        "priority": t.priority,
        "orderId": t.order_id,
        "binId": t.bin_id,
        "sku": t.sku,
        "pickIssueId": t.pick_issue_id,
        "dueDate": t.due_date.isoformat() if t.due_date else None,
        "completedAt": t.completed_at.isoformat() if t.completed_at else None,
        "createdAt": t.created_at.isoformat() if t.created_at else None,
    }

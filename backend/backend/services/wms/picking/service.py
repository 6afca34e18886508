"""Pick-issue resolution.

A picker who cannot take an item from the bin they were sent to reports why.
The report is recorded, the bin's stock is corrected, a follow-up task is
opened where a human has to look at the bin, and the picker is either sent to
another bin holding the same SKU or told to skip the line.

The whole resolution is one unit of work: if any write fails nothing is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.db.models.wms.pick_issue import IssueType, NextAction, PickIssue
from app.events.outbox import OutboxEvent
from services.wms.inventory_ops.service import apply_issue_mutation, find_substitute, get_record
from services.wms.order_items.service import apply_resolution, find_line_item
from services.wms.picking.policy import IssuePolicy, parse_issue_type, policy_for
from services.wms.tasking.service import create_corrective_task

logger = logging.getLogger(__name__)


@dataclass
class IssueRequest:
    order_id: str | None
    sku: str | None
    bin_id: str | None
    issue_type: str | None
    device_id: str | None = None
    timestamp: str | None = None


@dataclass
class Resolution:
    pick_issue_id: str
    next_action: NextAction
    bin_id: str | None = None

    def as_dict(self) -> dict:
        data = {"pickIssueId": self.pick_issue_id, "nextAction": self.next_action.value}
        if self.next_action == NextAction.ALTERNATE_BIN and self.bin_id:
            data["binId"] = self.bin_id
        return data


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def validate_request(request: IssueRequest) -> IssueType:
    if any(_blank(v) for v in (request.order_id, request.sku, request.bin_id, request.issue_type)):
        raise ValidationError("Please provide orderId, sku, binId, and issueType")
    issue_type = parse_issue_type(request.issue_type)
    if issue_type is None:
        raise ValidationError("Invalid issue type")
    return issue_type


def resolve_issue(db: Session, request: IssueRequest, *, reporter_id: str, today: date | None = None) -> Resolution:
    issue_type = validate_request(request)
    policy = policy_for(issue_type)

    try:
        line_item = find_line_item(db, request.order_id, request.sku, lock=True)
        if not line_item:
            raise NotFoundError("Order item not found")

        issue = PickIssue(
            order_id=request.order_id,
            sku=request.sku,
            bin_id=request.bin_id,
            issue_type=issue_type.value,
            reported_by=reporter_id,
            device_id=request.device_id or None,
            client_timestamp=request.timestamp[:64] if request.timestamp else None,
        )
        db.add(issue)
        db.flush()

        _apply_inventory(db, request, policy)

        task_id = None
        if policy.task is not None:
            title, description = policy.task.render(order_id=request.order_id, sku=request.sku, bin_id=request.bin_id)
            task = create_corrective_task(
                db,
                title=title,
                description=description,
                assignee=reporter_id,
                priority=policy.task.priority,
                order_id=request.order_id,
                bin_id=request.bin_id,
                sku=request.sku,
                pick_issue_id=issue.id,
            )
            task_id = task.id

        substitute = find_substitute(
            db,
            sku=request.sku,
            exclude_bin_id=request.bin_id,
            order=policy.substitute_order,
            require_fresh=policy.require_fresh,
            today=today,
        )
        if substitute is not None:
            resolution = Resolution(pick_issue_id=issue.id, next_action=NextAction.ALTERNATE_BIN, bin_id=substitute.bin_id)
        else:
            resolution = Resolution(pick_issue_id=issue.id, next_action=NextAction.SKIP_ITEM)

        apply_resolution(line_item, next_action=resolution.next_action, bin_id=resolution.bin_id)

        db.add(OutboxEvent(topic="PickIssueReported", payload={
            "pick_issue_id": issue.id,
            "order_id": request.order_id,
            "sku": request.sku,
            "bin_id": request.bin_id,
            "issue_type": issue_type.value,
            "reported_by": reporter_id,
            "next_action": resolution.next_action.value,
            "alternate_bin_id": resolution.bin_id,
            "item_status": line_item.status,
            "task_id": task_id,
        }))
        db.commit()
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("failed to resolve %s for order=%s sku=%s bin=%s",
                         issue_type.value, request.order_id, request.sku, request.bin_id)
        raise PersistenceError("Could not record the pick issue, please retry") from exc

    logger.info("pick issue %s: %s order=%s sku=%s bin=%s -> %s %s",
                resolution.pick_issue_id, issue_type.value, request.order_id, request.sku,
                request.bin_id, resolution.next_action.value, resolution.bin_id or "")
    return resolution


def _apply_inventory(db: Session, request: IssueRequest, policy: IssuePolicy) -> None:
    if not policy.mutates_inventory:
        return
    record = get_record(db, request.sku, request.bin_id, lock=True)
    if record is None:
        logger.warning("no inventory record for sku=%s bin=%s, stock left unchanged", request.sku, request.bin_id)
        return
    apply_issue_mutation(record, status=policy.inventory_status, decrement=policy.decrement_quantity)


def list_issues(
    db: Session,
    *,
    order_id: str | None = None,
    sku: str | None = None,
    bin_id: str | None = None,
    issue_type: str | None = None,
) -> list[PickIssue]:
    if issue_type and parse_issue_type(issue_type) is None:
        raise ValidationError("Invalid issue type")
    q = db.query(PickIssue)
    if order_id:
        q = q.filter(PickIssue.order_id == order_id)
    if sku:
        q = q.filter(PickIssue.sku == sku)
    if bin_id:
        q = q.filter(PickIssue.bin_id == bin_id)
    if issue_type:
        q = q.filter(PickIssue.issue_type == issue_type)
    return q.order_by(PickIssue.created_at.desc()).limit(200).all()


def serialize_issue(i: PickIssue) -> dict:
    return {
        "id": i.id,
        "orderId": i.order_id,
        "sku": i.sku,
        "binId": i.bin_id,
        "issueType": i.issue_type,
        "reportedBy": i.reported_by,
        "deviceId": i.device_id,
        "createdAt": i.created_at.isoformat() if i.created_at else None,
    }

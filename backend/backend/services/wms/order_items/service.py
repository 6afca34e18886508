from __future__ import annotations

from sqlalchemy.orm import Session
from app.db.models.wms.order_items import OrderLineItem, LineItemStatus
from app.db.models.wms.pick_issue import NextAction


def find_line_item(db: Session, order_id: str, sku: str, *, lock: bool = False) -> OrderLineItem | None:
    q = db.query(OrderLineItem).filter(OrderLineItem.order_id == order_id, OrderLineItem.item_code == sku)
    if lock:
        q = q.with_for_update()
    return q.first()


def apply_resolution(item: OrderLineItem, *, next_action: NextAction, bin_id: str | None) -> None:
    if next_action == NextAction.ALTERNATE_BIN:
        item.status = LineItemStatus.REASSIGNED.value
        item.location = bin_id
    else:
        # nothing to redirect the picker to; keep the original location for the audit
        item.status = LineItemStatus.SHORT.value


def list_order_items(db: Session, order_id: str, *, status: str | None = None) -> list[OrderLineItem]:
    q = db.query(OrderLineItem).filter(OrderLineItem.order_id == order_id)
    if status:
        q = q.filter(OrderLineItem.status == status)
    return q.order_by(OrderLineItem.created_at.asc(), OrderLineItem.item_code.asc()).all()


def serialize_item(i: OrderLineItem) -> dict:
    return {
        "id": i.id,
        "orderId": i.order_id,
        "itemCode": i.item_code,
        "name": i.name,
        "quantity": i.quantity,
        "category": i.category,
        "status": i.status,
        "location": i.location,
        "notes": i.notes,
        "scannedAt": i.scanned_at.isoformat() if i.scanned_at else None,
    }

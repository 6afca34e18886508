from __future__ import annotations

import logging
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import or_
from app.db.models.wms.inventory import InventoryRecord, InventoryStatus
from services.wms.picking.policy import SubstituteOrder

logger = logging.getLogger(__name__)


def get_record(db: Session, sku: str, bin_id: str, *, lock: bool = False) -> InventoryRecord | None:
    q = db.query(InventoryRecord).filter(InventoryRecord.sku == sku, InventoryRecord.bin_id == bin_id)
    if lock:
        q = q.with_for_update()
    return q.first()


def apply_issue_mutation(record: InventoryRecord, *, status: InventoryStatus | None, decrement: bool) -> None:
    if status is not None:
        record.status = status.value
    if decrement:
        if record.quantity > 0:
            record.quantity = record.quantity - 1
        else:
            # quantity never goes negative; repeated reports against an empty bin are a no-op
            logger.warning("quantity already 0 for sku=%s bin=%s, not decremented", record.sku, record.bin_id)


def find_substitute(
    db: Session,
    *,
    sku: str,
    exclude_bin_id: str,
    order: SubstituteOrder,
    require_fresh: bool = False,
    today: date | None = None,
) -> InventoryRecord | None:
    q = (db.query(InventoryRecord)
         .filter(InventoryRecord.sku == sku,
                 InventoryRecord.status == InventoryStatus.AVAILABLE.value,
                 InventoryRecord.quantity > 0,
                 InventoryRecord.bin_id != exclude_bin_id))
    if require_fresh:
        today = today or date.today()
        q = q.filter(or_(InventoryRecord.expiry_date.is_(None), InventoryRecord.expiry_date >= today))

    if order == SubstituteOrder.SOONEST_EXPIRY:
        # FEFO: dated batches first, earliest expiry wins. Undated stock sorts
        # last on purpose; a plain ascending sort on a missing expiry would put it first.
        q = q.order_by(InventoryRecord.expiry_date.is_(None).asc(),
                       InventoryRecord.expiry_date.asc(),
                       InventoryRecord.quantity.desc(),
                       InventoryRecord.bin_id.asc())
    else:
        q = q.order_by(InventoryRecord.quantity.desc(), InventoryRecord.bin_id.asc())

    # rows locked by a concurrent report are skipped, never waited on
    return q.with_for_update(skip_locked=True).first()


def list_records(db: Session, *, sku: str | None = None, bin_id: str | None = None, status: str | None = None) -> list[InventoryRecord]:
    q = db.query(InventoryRecord)
    if sku:
        q = q.filter(InventoryRecord.sku == sku)
    if bin_id:
        q = q.filter(InventoryRecord.bin_id == bin_id)
    if status:
        q = q.filter(InventoryRecord.status == status)
    return q.order_by(InventoryRecord.sku.asc(), InventoryRecord.bin_id.asc()).limit(500).all()


def serialize_record(r: InventoryRecord) -> dict:
    return {
        "id": r.id,
        "sku": r.sku,
        "binId": r.bin_id,
        "quantity": r.quantity,
        "status": r.status,
        "expiryDate": r.expiry_date.isoformat() if r.expiry_date else None,
        "batchNumber": r.batch_number,
        "updatedAt": r.updated_at.isoformat() if r.updated_at else None,
    }

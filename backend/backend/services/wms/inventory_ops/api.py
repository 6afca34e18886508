from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.errors import ValidationError
from app.core.security import require_user
from app.db.models.wms.inventory import InventoryStatus
from services.wms.inventory_ops.service import list_records, serialize_record

router = APIRouter(prefix="/inventory", tags=["inventory"])

@router.get("")
def list_inventory(sku: str | None = None, bin_id: str | None = None, status: str | None = None,
                   db: Session = Depends(get_db), p=Depends(require_user)):
    if status and status not in [s.value for s in InventoryStatus]:
        raise ValidationError(f"Invalid inventory status '{status}'")
    rows = list_records(db, sku=sku, bin_id=bin_id, status=status)
    return {"success": True, "count": len(rows), "data": [serialize_record(r) for r in rows]}

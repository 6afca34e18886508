from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.errors import ValidationError
from app.core.security import require_user
from app.db.models.wms.order_items import LineItemStatus
from services.wms.order_items.service import list_order_items, serialize_item

router = APIRouter(prefix="/items", tags=["items"])

@router.get("/order/{order_id}")
def order_items(order_id: str, status: str | None = None, db: Session = Depends(get_db), p=Depends(require_user)):
    if status and status not in [s.value for s in LineItemStatus]:
        raise ValidationError(f"Invalid item status '{status}'")
    items = list_order_items(db, order_id, status=status)
    return {"success": True, "count": len(items), "data": [serialize_item(i) for i in items]}

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import require_user
from services.wms.picking.service import IssueRequest, resolve_issue, list_issues, serialize_issue

router = APIRouter(prefix="/pick", tags=["pick"])


class ReportIssueIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str | None = Field(default=None, alias="orderId")
    sku: str | None = None
    bin_id: str | None = Field(default=None, alias="binId")
    issue_type: str | None = Field(default=None, alias="issueType")
    device_id: str | None = Field(default=None, alias="deviceId")
    timestamp: str | None = None


@router.post("/report-issue")
def report_issue(payload: ReportIssueIn, db: Session = Depends(get_db), p=Depends(require_user)):
    request = IssueRequest(
        order_id=payload.order_id,
        sku=payload.sku,
        bin_id=payload.bin_id,
        issue_type=payload.issue_type,
        device_id=payload.device_id,
        timestamp=payload.timestamp,
    )
    resolution = resolve_issue(db, request, reporter_id=p.user_id)
    return {"success": True, "data": resolution.as_dict()}


@router.get("/issues")
def issues(order_id: str | None = None, sku: str | None = None, bin_id: str | None = None, issue_type: str | None = None,
           db: Session = Depends(get_db), p=Depends(require_user)):
    rows = list_issues(db, order_id=order_id, sku=sku, bin_id=bin_id, issue_type=issue_type)
    return {"success": True, "count": len(rows), "data": [serialize_issue(i) for i in rows]}

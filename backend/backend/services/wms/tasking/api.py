from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import require_user
from services.wms.tasking.service import create_task, get_task, list_tasks, update_task, serialize_task

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("")
def tasks(status: str | None = None, assignee: str | None = None, order_id: str | None = None, priority: str | None = None,
          db: Session = Depends(get_db), p=Depends(require_user)):
    rows = list_tasks(db, status=status, assignee=assignee, order_id=order_id, priority=priority)
    return {"success": True, "count": len(rows), "data": [serialize_task(t) for t in rows]}

@router.post("", status_code=201)
def new_task(payload: dict, db: Session = Depends(get_db), p=Depends(require_user)):
    task = create_task(db, payload, actor=p.user_id)
    return {"success": True, "data": serialize_task(task)}

@router.get("/{task_id}")
def task_detail(task_id: str, db: Session = Depends(get_db), p=Depends(require_user)):
    return {"success": True, "data": serialize_task(get_task(db, task_id))}

@router.patch("/{task_id}")
def task_update(task_id: str, payload: dict, db: Session = Depends(get_db), p=Depends(require_user)):
    task = update_task(db, task_id, payload, actor=p.user_id)
    return {"success": True, "data": serialize_task(task)}

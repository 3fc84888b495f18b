# backend/routes/logs.py
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from schemas.admin import LogResponse
from schemas.common import PaginatedResponse
from utils.responses import paginated
from utils.tokenJWT import admin_required

router = APIRouter(prefix="/admin/logs", tags=["Logs"])
logger = logging.getLogger(__name__)


def _parse_date(value: str, end_of_day: bool = False) -> Optional[datetime]:
    # Plain dates cover the whole day when used as an upper bound
    if end_of_day and len(value) == 10:
        value += " 23:59:59"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring malformed log date filter %r", value)
        return None


@router.get("", response_model=PaginatedResponse[LogResponse])
def get_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[int] = Query(None, description="Filter by user id"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    date_from: Optional[str] = Query(None, description="From date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="To date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))
    if user_id is not None:
        query = query.filter(Log.user_id == user_id)
    if resource:
        query = query.filter(Log.resource.ilike(f"%{resource}%"))
    if status:
        query = query.filter(Log.status == status.upper())
    # Malformed dates are ignored rather than rejected
    dt_from = _parse_date(date_from) if date_from else None
    if dt_from:
        query = query.filter(Log.ts >= dt_from)
    dt_to = _parse_date(date_to, end_of_day=True) if date_to else None
    if dt_to:
        query = query.filter(Log.ts <= dt_to)

    # Newest first
    query = query.order_by(Log.ts.desc(), Log.id.desc())

    total = query.count()
    logs = query.offset((page - 1) * limit).limit(limit).all()
    return paginated([LogResponse.model_validate(entry) for entry in logs], page, limit, total)

# backend/routes/activity.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.log import ActivityType
from models.users import User
from schemas.stock import ActivityLogResponse
from storage import DatabaseStorage
from utils.session import get_current_user

router = APIRouter(prefix="/api/activity-log", tags=["Activity log"])


# Most recent entries/exits, newest first
@router.get("", response_model=List[ActivityLogResponse])
def get_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    type: Optional[ActivityType] = Query(None, description="entry or exit"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DatabaseStorage(db).get_recent_activity(limit=limit, type=type)
